"""Archive entry naming and temporary archive names."""

from __future__ import annotations

import random
import string
from pathlib import PurePath

__all__ = [
    "ARCHIVE_SUFFIX",
    "TEMP_NAME_ALPHABET",
    "TEMP_NAME_LENGTH",
    "archive_entry_name",
    "random_token",
    "temp_archive_name",
]

TEMP_NAME_ALPHABET = string.ascii_uppercase + string.ascii_lowercase + string.digits
TEMP_NAME_LENGTH = 15
ARCHIVE_SUFFIX = ".zip"


def archive_entry_name(file_path: PurePath, base_dir: PurePath) -> str:
    """Name of ``file_path`` inside the archive, relative to ``base_dir``.

    ``base_dir`` is the parent of the scanned root, so the root directory's
    own name is the first component. Pure: no filesystem access, and the
    result always uses ``/`` whatever the path flavour.

    Example:
        /work/app/sub/b.txt relative to /work    -> "app/sub/b.txt"
        C:/work/app/a.txt relative to C:/work    -> "app/a.txt" (Windows flavour)

    Raises:
        ValueError: ``file_path`` is not below ``base_dir``.
    """
    relative = file_path.relative_to(base_dir)
    if not relative.parts:
        raise ValueError(f"{file_path} is the base directory itself, not a file below it")
    return "/".join(relative.parts)


def random_token(length: int = TEMP_NAME_LENGTH, rng: random.Random | None = None) -> str:
    """Random alphanumeric token of ``length`` characters.

    Uniqueness is not guaranteed; collisions are handled by the writer's
    exclusive create.
    """
    if length < 1:
        raise ValueError(f"length must be positive, got {length}")
    source = rng if rng is not None else random
    return "".join(source.choice(TEMP_NAME_ALPHABET) for _ in range(length))


def temp_archive_name(rng: random.Random | None = None) -> str:
    return random_token(TEMP_NAME_LENGTH, rng) + ARCHIVE_SUFFIX

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Literal

__all__ = [
    "ArchiveEntry",
    "ArtifactDescriptor",
    "BundleError",
    "BundleErrorKind",
    "PathKind",
]


class PathKind(Enum):
    SINGLE_FILE = "file"
    DIRECTORY = "directory"


@dataclass(frozen=True, slots=True)
class ArtifactDescriptor:
    """The file handed to the upload workflow.

    Attributes:
        path: Absolute path of the artifact.
        is_temporary: True when the bundler synthesized the archive. The
            caller owns it and must delete it after use (see ``discard``).
            False means this is the caller's own input file.
    """

    path: Path
    is_temporary: bool

    def discard(self) -> None:
        """Delete the artifact if it is a temporary archive.

        Input files are never touched. Calling this twice is harmless.
        """
        if self.is_temporary:
            self.path.unlink(missing_ok=True)


@dataclass(frozen=True, slots=True)
class ArchiveEntry:
    source_path: Path
    entry_name: str


BundleErrorKind = Literal[
    "not_found",
    "scan_failed",
    "read_failed",
    "write_failed",
    "name_collision",
    "invalid_name",
]


@dataclass(frozen=True, slots=True)
class BundleError:
    """Error from the bundling pipeline.

    ``not_found`` means the input path could not be stat'd. ``scan_failed``,
    ``read_failed`` and ``write_failed`` are I/O failures while walking the
    tree, reading a source file or writing the archive. ``name_collision``
    means the temporary archive name was already taken. ``invalid_name``
    means a file name cannot be stored in the archive (not valid UTF-8).
    """

    kind: BundleErrorKind
    message: str
    path: Path | None = None
    hint: str | None = None

    def pretty(self) -> str:
        if self.hint:
            return f"{self.message} (hint: {self.hint})"
        return self.message

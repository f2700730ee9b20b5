from __future__ import annotations

import os
import stat
from pathlib import Path

from rdist.bundle.model import BundleError, PathKind
from rdist.core.result import Err, Ok, Result

__all__ = ["classify_path"]


def classify_path(path: str | os.PathLike[str]) -> Result[PathKind, BundleError]:
    """Decide whether ``path`` is passed through as-is or must be archived.

    Symlinks are followed, so a link to a directory is a directory.
    """
    p = Path(path)
    try:
        st = p.stat()
    except OSError as e:
        return Err(
            BundleError(
                kind="not_found",
                message=f"Cannot access {p}: {e.strerror or e}",
                path=p,
                hint="Check that the path exists and is readable",
            )
        )
    except ValueError as e:
        # e.g. embedded NUL byte
        return Err(BundleError(kind="not_found", message=f"Invalid path {p!r}: {e}", path=p))

    if stat.S_ISDIR(st.st_mode):
        return Ok(PathKind.DIRECTORY)
    return Ok(PathKind.SINGLE_FILE)

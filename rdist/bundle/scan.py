from __future__ import annotations

import errno
import os
import stat
from pathlib import Path

from rdist.bundle.model import BundleError
from rdist.core.result import Err, Ok, Result

__all__ = ["scan_directory"]

# stat errors that mean "not a regular file" rather than "cannot scan"
_NOT_A_FILE = frozenset({errno.ENOENT, errno.ENOTDIR, errno.ELOOP})


class _WalkFailed(Exception):
    def __init__(self, error: OSError) -> None:
        super().__init__(str(error))
        self.error = error


def _raise_walk_error(error: OSError) -> None:
    raise _WalkFailed(error)


def _is_regular_file(path: Path) -> bool:
    try:
        st = path.stat()
    except OSError as e:
        if e.errno in _NOT_A_FILE:
            return False
        raise _WalkFailed(e) from e
    return stat.S_ISREG(st.st_mode)


def scan_directory(root: Path) -> Result[list[Path], BundleError]:
    """Return every regular file below ``root``, recursively.

    Directory symlinks are listed but not descended, so cycles are impossible.
    File symlinks count when they point at a regular file; dangling ones are
    skipped. Order follows the directory listing and is not sorted.

    Any directory or entry that cannot be read aborts the whole scan; no
    partial list is returned.
    """
    root = Path(os.path.abspath(root))
    files: list[Path] = []
    try:
        for dirpath, _dirnames, filenames in os.walk(
            root, onerror=_raise_walk_error, followlinks=False
        ):
            base = Path(dirpath)
            for name in filenames:
                candidate = base / name
                if _is_regular_file(candidate):
                    files.append(candidate)
    except _WalkFailed as e:
        failed = Path(e.error.filename) if e.error.filename else root
        return Err(
            BundleError(
                kind="scan_failed",
                message=f"Cannot scan {failed}: {e.error.strerror or e.error}",
                path=failed,
            )
        )
    return Ok(files)

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from zipfile import ZIP_DEFLATED, ZipFile, ZipInfo

from rdist.bundle.model import ArchiveEntry, BundleError
from rdist.core.result import Err, Ok, Result

__all__ = ["write_archive"]

_CHUNK_SIZE = 1024 * 1024


def _read_failed(entry: ArchiveEntry, error: OSError) -> BundleError:
    return BundleError(
        kind="read_failed",
        message=f"Cannot read {entry.source_path}: {error.strerror or error}",
        path=entry.source_path,
        hint="The file may have been removed or changed while bundling",
    )


def _write_entry(zf: ZipFile, entry: ArchiveEntry) -> BundleError | None:
    try:
        # ZIP cannot store timestamps before 1980; clamp instead of failing.
        info = ZipInfo.from_file(
            entry.source_path, arcname=entry.entry_name, strict_timestamps=False
        )
        source = entry.source_path.open("rb")
    except OSError as e:
        return _read_failed(entry, e)

    info.compress_type = ZIP_DEFLATED
    with source:
        try:
            member = zf.open(info, "w")
        except UnicodeEncodeError:
            # Undecodable file names come back from os.walk with lone surrogates
            return BundleError(
                kind="invalid_name",
                message=f"Cannot store {entry.entry_name!r}: file name is not valid UTF-8",
                path=entry.source_path,
                hint="Rename the file to a UTF-8 name",
            )
        with member:
            while True:
                try:
                    chunk = source.read(_CHUNK_SIZE)
                except OSError as e:
                    return _read_failed(entry, e)
                if not chunk:
                    return None
                member.write(chunk)


def write_archive(entries: Sequence[ArchiveEntry], dest: Path) -> Result[Path, BundleError]:
    """Write ``entries`` into a new deflate ZIP archive at ``dest``.

    ``dest`` is created exclusively: an existing file is reported as
    ``name_collision`` and left untouched. Entries are streamed one after the
    other in the given order and the archive is closed only once all of them
    are written.

    On any failure the partially written archive is removed, so an ``Ok``
    result is the only case where ``dest`` exists afterwards, even when an
    unexpected exception propagates.

    Raises:
        ValueError: Two entries share the same ``entry_name``.
    """
    seen: set[str] = set()
    for entry in entries:
        if entry.entry_name in seen:
            raise ValueError(f"duplicate archive entry name: {entry.entry_name}")
        seen.add(entry.entry_name)

    try:
        handle = dest.open("xb")
    except FileExistsError:
        return Err(
            BundleError(kind="name_collision", message=f"Archive already exists: {dest}", path=dest)
        )
    except OSError as e:
        return Err(
            BundleError(
                kind="write_failed",
                message=f"Cannot create archive {dest}: {e.strerror or e}",
                path=dest,
            )
        )

    error: BundleError | None = None
    try:
        with handle, ZipFile(handle, "w", compression=ZIP_DEFLATED) as zf:
            for entry in entries:
                error = _write_entry(zf, entry)
                if error is not None:
                    break
    except OSError as e:
        if error is None:
            error = BundleError(
                kind="write_failed",
                message=f"Cannot write archive {dest}: {e.strerror or e}",
                path=dest,
            )
    except BaseException:
        dest.unlink(missing_ok=True)
        raise

    if error is not None:
        dest.unlink(missing_ok=True)
        return Err(error)
    return Ok(dest)

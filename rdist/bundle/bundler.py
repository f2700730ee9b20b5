"""Turn a release path into a single uploadable artifact.

A file is uploaded as-is. A directory is zipped into a temporary archive in
the working directory, with the directory's own name as the top-level folder
inside the archive:

    build/
      index.js
      assets/logo.png

becomes ``<random>.zip`` holding ``build/index.js`` and
``build/assets/logo.png``. The caller deletes the temporary archive once the
upload is done (``ArtifactDescriptor.discard``).
"""

from __future__ import annotations

import os
import random
from pathlib import Path

from rdist.bundle.classify import classify_path
from rdist.bundle.model import ArchiveEntry, ArtifactDescriptor, BundleError, PathKind
from rdist.bundle.names import archive_entry_name, temp_archive_name
from rdist.bundle.scan import scan_directory
from rdist.bundle.writer import write_archive
from rdist.core.result import Err, Ok, Result

__all__ = ["PackageBundler", "DEFAULT_NAME_ATTEMPTS"]

DEFAULT_NAME_ATTEMPTS = 5


class PackageBundler:
    def __init__(
        self,
        *,
        work_dir: Path | None = None,
        rng: random.Random | None = None,
        sort_entries: bool = True,
        name_attempts: int = DEFAULT_NAME_ATTEMPTS,
    ) -> None:
        """
        Args:
            work_dir: Where temporary archives are written. Defaults to the
                current working directory at the time of each ``bundle`` call.
            rng: Random source for archive names (inject a seeded one in tests).
            sort_entries: Write entries sorted by name so the same tree always
                yields the same archive layout.
            name_attempts: How many fresh names to try when the generated
                archive name already exists.
        """
        if name_attempts < 1:
            raise ValueError(f"name_attempts must be at least 1, got {name_attempts}")
        self._work_dir = work_dir
        self._rng = rng
        self._sort_entries = sort_entries
        self._name_attempts = name_attempts

    def bundle(self, path: str | os.PathLike[str]) -> Result[ArtifactDescriptor, BundleError]:
        kind = classify_path(path)
        if isinstance(kind, Err):
            return kind

        # abspath also collapses "." and ".." so parent/name below are real
        root = Path(os.path.abspath(path))
        if kind.value is PathKind.SINGLE_FILE:
            return Ok(ArtifactDescriptor(path=root, is_temporary=False))

        return self._bundle_directory(root)

    def _bundle_directory(self, root: Path) -> Result[ArtifactDescriptor, BundleError]:
        scanned = scan_directory(root)
        if isinstance(scanned, Err):
            return scanned

        entries = self.entries_for(root, scanned.value)
        work_dir = Path(os.path.abspath(self._work_dir if self._work_dir is not None else "."))

        for _ in range(self._name_attempts):
            dest = work_dir / temp_archive_name(self._rng)
            result = write_archive(entries, dest)
            if isinstance(result, Ok):
                return Ok(ArtifactDescriptor(path=result.value, is_temporary=True))
            if result.error.kind != "name_collision":
                return result

        return Err(
            BundleError(
                kind="name_collision",
                message=(
                    f"Could not find a free archive name in {work_dir} "
                    f"after {self._name_attempts} attempts"
                ),
                path=work_dir,
            )
        )

    def entries_for(self, root: Path, files: list[Path]) -> list[ArchiveEntry]:
        """Map scanned files to archive entries named relative to ``root.parent``."""
        base_dir = root.parent
        entries = [
            ArchiveEntry(source_path=f, entry_name=archive_entry_name(f, base_dir)) for f in files
        ]
        if self._sort_entries:
            entries.sort(key=lambda e: e.entry_name)
        return entries

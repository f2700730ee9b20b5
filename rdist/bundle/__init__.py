"""Package bundling: one uploadable artifact from a file or a directory."""

from .bundler import PackageBundler
from .classify import classify_path
from .model import ArchiveEntry, ArtifactDescriptor, BundleError, PathKind
from .names import archive_entry_name, random_token, temp_archive_name
from .scan import scan_directory
from .writer import write_archive

__all__ = [
    "ArchiveEntry",
    "ArtifactDescriptor",
    "BundleError",
    "PackageBundler",
    "PathKind",
    "archive_entry_name",
    "classify_path",
    "random_token",
    "scan_directory",
    "temp_archive_name",
    "write_archive",
]

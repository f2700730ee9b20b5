"""Error presentation and exit code mapping for the CLI."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rdist.bundle.model import BundleError
from rdist.core.errors import ErrorCode
from rdist.output.console import Style
from rdist.sdk.release import ReleaseError

if TYPE_CHECKING:
    from rdist.output.console import ConsoleProtocol

__all__ = [
    "bundle_error_exit_code",
    "print_bundle_error",
    "print_release_error",
    "release_error_exit_code",
]


def print_bundle_error(error: BundleError, console: ConsoleProtocol) -> None:
    console.error(error.message)
    if error.hint:
        console.print(f"hint: {error.hint}", Style.DIM)


def bundle_error_exit_code(error: BundleError) -> int:
    match error.kind:
        case "not_found" | "invalid_name":
            return int(ErrorCode.USER_ERROR)
        case "scan_failed" | "read_failed" | "write_failed" | "name_collision":
            return int(ErrorCode.IO_ERROR)


def print_release_error(error: ReleaseError, console: ConsoleProtocol) -> None:
    console.error(error.message)
    if error.hint:
        console.print(f"hint: {error.hint}", Style.DIM)


def release_error_exit_code(error: ReleaseError) -> int:
    match error.kind:
        case "bundle_failed":
            if error.bundle_error is not None:
                return bundle_error_exit_code(error.bundle_error)
            return int(ErrorCode.IO_ERROR)
        case "upload_failed" | "invalid_response":
            return int(ErrorCode.NETWORK_ERROR)

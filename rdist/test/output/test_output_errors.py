from __future__ import annotations

from pathlib import Path

import pytest

from rdist.bundle.model import BundleError
from rdist.core.errors import ErrorCode
from rdist.output.console import MockConsole, Style
from rdist.output.errors import (
    bundle_error_exit_code,
    print_bundle_error,
    print_release_error,
    release_error_exit_code,
)
from rdist.sdk.release import ReleaseError


@pytest.mark.parametrize(
    ("kind", "code"),
    [
        ("not_found", ErrorCode.USER_ERROR),
        ("invalid_name", ErrorCode.USER_ERROR),
        ("scan_failed", ErrorCode.IO_ERROR),
        ("read_failed", ErrorCode.IO_ERROR),
        ("write_failed", ErrorCode.IO_ERROR),
        ("name_collision", ErrorCode.IO_ERROR),
    ],
)
def test_bundle_exit_codes(kind: str, code: ErrorCode) -> None:
    error = BundleError(kind=kind, message="m")  # type: ignore[arg-type]
    assert bundle_error_exit_code(error) == int(code)


def test_release_exit_codes() -> None:
    not_found = BundleError(kind="not_found", message="m", path=Path("x"))
    assert release_error_exit_code(
        ReleaseError(kind="bundle_failed", message="m", bundle_error=not_found)
    ) == int(ErrorCode.USER_ERROR)
    assert release_error_exit_code(ReleaseError(kind="upload_failed", message="m")) == int(
        ErrorCode.NETWORK_ERROR
    )
    assert release_error_exit_code(ReleaseError(kind="invalid_response", message="m")) == int(
        ErrorCode.NETWORK_ERROR
    )


def test_print_includes_hint() -> None:
    console = MockConsole()
    error = BundleError(kind="read_failed", message="cannot read", hint="retry")
    print_bundle_error(error, console)
    print_release_error(ReleaseError(kind="upload_failed", message="HTTP 500"), console)

    assert console.messages == ["error: cannot read", "hint: retry", "error: HTTP 500"]
    assert console.outputs[1].style == Style.DIM

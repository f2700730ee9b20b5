from __future__ import annotations

import io
import json
import random
import zipfile
from pathlib import Path

from rdist.bundle.bundler import PackageBundler
from rdist.output.console import MockConsole
from rdist.sdk.http import HttpError, MockHttpClient
from rdist.sdk.release import PackageInfo, ReleaseService

RELEASE_PATH = "/apps/MyApp/deployments/Staging/release"


def _service(tmp_path: Path, http: MockHttpClient, console: MockConsole) -> ReleaseService:
    return ReleaseService(
        http=http,
        bundler=PackageBundler(work_dir=tmp_path, rng=random.Random(1)),
        console=console,
    )


def _tree(tmp_path: Path) -> Path:
    root = tmp_path / "build"
    (root / "assets").mkdir(parents=True)
    (root / "index.js").write_text("main()", encoding="utf-8")
    (root / "assets" / "icon.png").write_bytes(b"\x89PNG")
    return root


def test_package_info_json_omits_unset_fields() -> None:
    info = PackageInfo(app_version="1.2.3", description="fix", is_mandatory=False)
    assert info.to_json() == {"appVersion": "1.2.3", "description": "fix", "isMandatory": False}


def test_release_directory_uploads_archive_then_deletes_it(tmp_path: Path) -> None:
    http = MockHttpClient()
    http.set_upload(RELEASE_PATH, {"package": {"label": "v7"}})
    console = MockConsole()
    work_before = set(tmp_path.iterdir())
    root = _tree(tmp_path)

    result = _service(tmp_path, http, console).release(
        "MyApp", "Staging", root, "1.0.0", PackageInfo(description="notes", rollout=25)
    )

    assert result.unwrap() == {"label": "v7"}
    upload = http.uploads[0]
    assert upload.path == RELEASE_PATH
    assert upload.file_field == "package"
    with zipfile.ZipFile(io.BytesIO(upload.content)) as zf:
        assert sorted(zf.namelist()) == ["build/assets/icon.png", "build/index.js"]
    assert json.loads(upload.fields["packageInfo"]) == {
        "appVersion": "1.0.0",
        "description": "notes",
        "rollout": 25,
    }
    assert set(tmp_path.iterdir()) == work_before | {root}
    assert console.find("Bundled")


def test_release_single_file_is_sent_and_kept(tmp_path: Path) -> None:
    http = MockHttpClient()
    http.set_upload(RELEASE_PATH, {"package": {"label": "v1"}})
    bundle_file = tmp_path / "main.jsbundle"
    bundle_file.write_bytes(b"code")

    result = _service(tmp_path, http, MockConsole()).release(
        "MyApp", "Staging", bundle_file, "2.0.0"
    )

    assert result.is_ok()
    assert http.uploads[0].content == b"code"
    assert http.uploads[0].filename == "main.jsbundle"
    assert bundle_file.read_bytes() == b"code"


def test_upload_failure_still_deletes_temporary_archive(tmp_path: Path) -> None:
    http = MockHttpClient()
    http.set_upload(RELEASE_PATH, HttpError(url="mock://x", status=401, message="Unauthorized"))
    root = _tree(tmp_path)

    result = _service(tmp_path, http, MockConsole()).release("MyApp", "Staging", root, "1.0.0")

    assert result.is_err()
    error = result.error  # type: ignore[union-attr]
    assert error.kind == "upload_failed"
    assert error.status == 401
    assert error.hint == "Check the access key"
    assert not list(tmp_path.glob("*.zip"))


def test_missing_path_is_a_bundle_failure(tmp_path: Path) -> None:
    http = MockHttpClient()

    result = _service(tmp_path, http, MockConsole()).release(
        "MyApp", "Staging", tmp_path / "missing", "1.0.0"
    )

    assert result.is_err()
    error = result.error  # type: ignore[union-attr]
    assert error.kind == "bundle_failed"
    assert error.bundle_error is not None
    assert error.bundle_error.kind == "not_found"
    assert http.uploads == []


def test_app_name_with_slash_is_escaped(tmp_path: Path) -> None:
    http = MockHttpClient()
    http.set_upload("/apps/org~~app/deployments/Prod%20EU/release", {"package": {}})
    f = tmp_path / "f.bin"
    f.write_bytes(b"x")

    result = _service(tmp_path, http, MockConsole()).release("org/app", "Prod EU", f, "1.0")

    assert result.is_ok()


def test_response_without_package_is_invalid(tmp_path: Path) -> None:
    http = MockHttpClient()
    http.set_upload(RELEASE_PATH, {"status": "ok"})
    f = tmp_path / "f.bin"
    f.write_bytes(b"x")

    result = _service(tmp_path, http, MockConsole()).release("MyApp", "Staging", f, "1.0")

    assert result.is_err()
    assert result.error.kind == "invalid_response"  # type: ignore[union-attr]


def test_caller_package_info_is_not_mutated(tmp_path: Path) -> None:
    http = MockHttpClient()
    http.set_upload(RELEASE_PATH, {"package": {}})
    f = tmp_path / "f.bin"
    f.write_bytes(b"x")
    info = PackageInfo(description="d")

    _service(tmp_path, http, MockConsole()).release("MyApp", "Staging", f, "3.0", info)

    assert info.app_version is None

from __future__ import annotations

import json
import os
from dataclasses import dataclass, replace
from typing import Any, Literal

from rdist.bundle.bundler import PackageBundler
from rdist.bundle.model import BundleError
from rdist.core.result import Err, Ok, Result
from rdist.core.structured import as_str_dict
from rdist.output.console import ConsoleProtocol
from rdist.sdk.http import HttpClient, ProgressCallback
from rdist.sdk.urls import app_name_param, encode_path

__all__ = ["PackageInfo", "ReleaseError", "ReleaseService"]

_RELEASE_PATH = "/apps/{}/deployments/{}/release"


@dataclass(frozen=True, slots=True)
class PackageInfo:
    """Release metadata sent alongside the package.

    Unset (None) fields are left out of the request so the server applies its
    own defaults.
    """

    app_version: str | None = None
    description: str | None = None
    is_mandatory: bool | None = None
    is_disabled: bool | None = None
    rollout: int | None = None
    label: str | None = None

    def to_json(self) -> dict[str, object]:
        payload: dict[str, object] = {
            "appVersion": self.app_version,
            "description": self.description,
            "isMandatory": self.is_mandatory,
            "isDisabled": self.is_disabled,
            "rollout": self.rollout,
            "label": self.label,
        }
        return {k: v for k, v in payload.items() if v is not None}


@dataclass(frozen=True, slots=True)
class ReleaseError:
    kind: Literal["bundle_failed", "upload_failed", "invalid_response"]
    message: str
    hint: str | None = None
    status: int = 0
    bundle_error: BundleError | None = None

    def pretty(self) -> str:
        if self.hint:
            return f"{self.message} (hint: {self.hint})"
        return self.message


class ReleaseService:
    """Bundle a path and upload it as a new release of a deployment."""

    def __init__(
        self,
        *,
        http: HttpClient,
        bundler: PackageBundler,
        console: ConsoleProtocol,
    ) -> None:
        self._http = http
        self._bundler = bundler
        self._console = console

    def release(
        self,
        app_name: str,
        deployment_name: str,
        path: str | os.PathLike[str],
        target_binary_version: str,
        info: PackageInfo | None = None,
        progress: ProgressCallback | None = None,
    ) -> Result[dict[str, Any], ReleaseError]:
        """Upload ``path`` to ``app_name``/``deployment_name``.

        A temporary archive built from a directory is deleted once the upload
        finishes, whether it succeeded or not.

        Returns:
            Ok with the ``package`` object the server created, or Err.
        """
        package_info = replace(info or PackageInfo(), app_version=target_binary_version)

        bundled = self._bundler.bundle(path)
        if isinstance(bundled, Err):
            error = bundled.error
            return Err(
                ReleaseError(
                    kind="bundle_failed",
                    message=error.message,
                    hint=error.hint,
                    bundle_error=error,
                )
            )

        artifact = bundled.value
        if artifact.is_temporary:
            self._console.info(f"Bundled {os.fspath(path)} into {artifact.path.name}")

        route = encode_path(_RELEASE_PATH, app_name_param(app_name), deployment_name)
        try:
            uploaded = self._http.upload(
                route,
                file_field="package",
                file_path=artifact.path,
                fields={"packageInfo": json.dumps(package_info.to_json())},
                progress=progress,
            )
        finally:
            artifact.discard()

        if isinstance(uploaded, Err):
            http_error = uploaded.error
            hint = "Check the access key" if http_error.status in (401, 403) else None
            return Err(
                ReleaseError(
                    kind="upload_failed",
                    message=str(http_error),
                    hint=hint,
                    status=http_error.status,
                )
            )

        package = as_str_dict(uploaded.value.get("package"))
        if package is None:
            return Err(
                ReleaseError(
                    kind="invalid_response",
                    message="Server response has no 'package' object",
                )
            )
        return Ok(package)

"""HTTP client abstraction for the distribution API.

This module provides:
- HttpClient: Protocol for API calls (injectable for tests)
- RealHttpClient: Real implementation using urllib
- MockHttpClient: Mock implementation for testing
"""

from __future__ import annotations

import json
import ssl
import urllib.error
import urllib.request
import uuid
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol, cast, runtime_checkable

from rdist import __version__
from rdist.core.config import DEFAULT_TIMEOUT_SECONDS
from rdist.core.result import Err, Ok, Result
from rdist.core.structured import as_str_dict, get_str

__all__ = [
    "HttpClient",
    "HttpError",
    "MockHttpClient",
    "ProgressCallback",
    "RealHttpClient",
    "UploadRecord",
]

# Receives upload progress as a percentage in [0, 100]
ProgressCallback = Callable[[float], None]

_CHUNK_SIZE = 64 * 1024


@dataclass(frozen=True, slots=True)
class HttpError:
    """HTTP error details.

    Attributes:
        url: The URL that failed
        status: HTTP status code (0 for network and parse errors)
        message: Human-readable error message
    """

    url: str
    status: int
    message: str

    def __str__(self) -> str:
        if self.status:
            return f"HTTP {self.status}: {self.message} ({self.url})"
        return f"{self.message} ({self.url})"


@runtime_checkable
class HttpClient(Protocol):
    """Protocol for calls against the distribution API."""

    def upload(
        self,
        path: str,
        *,
        file_field: str,
        file_path: Path,
        fields: Mapping[str, str],
        progress: ProgressCallback | None = None,
    ) -> Result[dict[str, Any], HttpError]:
        """POST a multipart form with one file and extra text fields.

        Args:
            path: API path, already encoded (e.g. "/apps/x/deployments/y/release")
            file_field: Form field name for the file
            file_path: File to send
            fields: Extra text form fields
            progress: Optional callback receiving the upload percentage

        Returns:
            Ok with the parsed JSON response object, or Err with HttpError
        """
        ...


def _parse_json_object(url: str, raw: bytes) -> Result[dict[str, Any], HttpError]:
    try:
        data_obj: object = json.loads(raw.decode("utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError):
        text = raw.decode("utf-8", errors="replace")
        return Err(HttpError(url=url, status=0, message=f"Could not parse response: {text}"))
    data = as_str_dict(data_obj)
    if data is None:
        return Err(HttpError(url=url, status=0, message="Expected a JSON object in response"))
    return Ok(cast(dict[str, Any], data))


def _error_message(error: urllib.error.HTTPError) -> str:
    """Prefer the server's ``message`` field over the bare HTTP reason."""
    try:
        raw = error.read()
    except OSError:
        raw = b""
    try:
        body = as_str_dict(json.loads(raw.decode("utf-8"))) if raw else None
    except (json.JSONDecodeError, UnicodeDecodeError):
        body = None
    if body is not None:
        message = get_str(body, "message")
        if message:
            return message
    text = raw.decode("utf-8", errors="replace").strip()
    return text or str(error.reason)


def _multipart_head(
    boundary: str, fields: Mapping[str, str], file_field: str, filename: str
) -> bytes:
    lines: list[str] = []
    for name, value in fields.items():
        lines.append(f"--{boundary}")
        lines.append(f'Content-Disposition: form-data; name="{name}"')
        lines.append("")
        lines.append(value)
    lines.append(f"--{boundary}")
    lines.append(f'Content-Disposition: form-data; name="{file_field}"; filename="{filename}"')
    lines.append("Content-Type: application/octet-stream")
    lines.append("")
    lines.append("")
    return "\r\n".join(lines).encode("utf-8")


def _stream_body(
    head: bytes,
    file_path: Path,
    tail: bytes,
    total: int,
    progress: ProgressCallback | None,
) -> Iterator[bytes]:
    sent = 0

    def report(n: int) -> None:
        nonlocal sent
        sent += n
        if progress and total > 0:
            progress(sent / total * 100)

    yield head
    report(len(head))
    with file_path.open("rb") as f:
        for chunk in iter(lambda: f.read(_CHUNK_SIZE), b""):
            yield chunk
            report(len(chunk))
    yield tail
    report(len(tail))


class RealHttpClient:
    """HTTP client using urllib.

    Handles:
    - HTTPS with system certificates
    - Optional proxy
    - Bearer access key and custom headers on every request
    - Streamed multipart upload with progress
    """

    def __init__(
        self,
        server_url: str,
        access_key: str,
        *,
        headers: Mapping[str, str] | None = None,
        proxy: str | None = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        user_agent: str = f"rdist/{__version__}",
    ) -> None:
        if not access_key:
            raise ValueError("A token must be specified.")

        self.server_url = server_url.rstrip("/")
        self.timeout = timeout
        self._headers = {
            **dict(headers or {}),
            "Accept": "application/json",
            "Authorization": f"Bearer {access_key}",
            "User-Agent": user_agent,
        }
        handlers: list[urllib.request.BaseHandler] = [
            urllib.request.HTTPSHandler(context=ssl.create_default_context())
        ]
        if proxy:
            handlers.append(urllib.request.ProxyHandler({"http": proxy, "https": proxy}))
        self._opener = urllib.request.build_opener(*handlers)

    def upload(
        self,
        path: str,
        *,
        file_field: str,
        file_path: Path,
        fields: Mapping[str, str],
        progress: ProgressCallback | None = None,
    ) -> Result[dict[str, Any], HttpError]:
        url = self.server_url + path
        boundary = uuid.uuid4().hex
        head = _multipart_head(boundary, fields, file_field, file_path.name)
        tail = f"\r\n--{boundary}--\r\n".encode("ascii")

        try:
            size = file_path.stat().st_size
        except OSError as e:
            return Err(HttpError(url=url, status=0, message=f"Cannot read {file_path}: {e}"))

        total = len(head) + size + len(tail)
        req = urllib.request.Request(
            url,
            data=_stream_body(head, file_path, tail, total, progress),
            method="POST",
            headers={
                **self._headers,
                "Content-Type": f"multipart/form-data; boundary={boundary}",
                "Content-Length": str(total),
            },
        )

        try:
            with self._opener.open(req, timeout=self.timeout) as response:
                raw = response.read()
        except urllib.error.HTTPError as e:
            return Err(HttpError(url=url, status=e.code, message=_error_message(e)))
        except urllib.error.URLError as e:
            return Err(HttpError(url=url, status=0, message=str(e.reason)))
        except TimeoutError:
            return Err(HttpError(url=url, status=0, message="Upload timed out"))
        except ValueError as e:
            return Err(HttpError(url=url, status=0, message=str(e)))
        except OSError as e:
            return Err(HttpError(url=url, status=0, message=str(e)))

        return _parse_json_object(url, raw)


@dataclass(frozen=True, slots=True)
class UploadRecord:
    """One upload seen by MockHttpClient, with the file content at call time."""

    path: str
    file_field: str
    filename: str
    content: bytes
    fields: dict[str, str]


def _empty_uploads() -> list[UploadRecord]:
    return []


@dataclass
class MockHttpClient:
    """Mock HTTP client for testing.

    Usage:
        client = MockHttpClient()
        client.set_upload("/apps/a/deployments/b/release", {"package": {"label": "v1"}})
        result = client.upload("/apps/a/deployments/b/release", ...)
    """

    responses: dict[str, dict[str, Any] | HttpError] = field(default_factory=dict)
    uploads: list[UploadRecord] = field(default_factory=_empty_uploads)

    def set_upload(self, path: str, response: dict[str, Any] | HttpError) -> None:
        self.responses[path] = response

    def upload(
        self,
        path: str,
        *,
        file_field: str,
        file_path: Path,
        fields: Mapping[str, str],
        progress: ProgressCallback | None = None,
    ) -> Result[dict[str, Any], HttpError]:
        url = f"mock://{path}"
        try:
            content = file_path.read_bytes()
        except OSError as e:
            return Err(HttpError(url=url, status=0, message=f"Cannot read {file_path}: {e}"))

        self.uploads.append(
            UploadRecord(
                path=path,
                file_field=file_field,
                filename=file_path.name,
                content=content,
                fields=dict(fields),
            )
        )

        if path not in self.responses:
            return Err(HttpError(url=url, status=404, message="Not found (mock)"))

        response = self.responses[path]
        if isinstance(response, HttpError):
            return Err(response)

        if progress:
            progress(100.0)
        return Ok(response)

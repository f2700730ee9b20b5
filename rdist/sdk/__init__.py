"""Client side of the distribution API: transport, paths and release upload."""

from .http import HttpClient, HttpError, MockHttpClient, RealHttpClient
from .release import PackageInfo, ReleaseError, ReleaseService
from .urls import app_name_param, encode_path

__all__ = [
    "HttpClient",
    "HttpError",
    "MockHttpClient",
    "PackageInfo",
    "RealHttpClient",
    "ReleaseError",
    "ReleaseService",
    "app_name_param",
    "encode_path",
]

"""Typed configuration loading for rdist.toml.

Example file:

    [server]
    url = "https://api.example.com"
    proxy = "http://proxy.local:8080"
    timeout = 60

    [auth]
    access_key_env = "RDIST_ACCESS_KEY"

    [headers]
    X-Client = "ci"

    [bundle]
    work_dir = "."
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_number, get_str, get_table

__all__ = [
    "Config",
    "ServerConfig",
    "AuthConfig",
    "BundleConfig",
    "ConfigError",
    "load_config",
    "load_config_or_default",
    "DEFAULT_SERVER_URL",
    "DEFAULT_ACCESS_KEY_ENV",
    "DEFAULT_TIMEOUT_SECONDS",
]

DEFAULT_SERVER_URL = "https://api.rdist.dev"
DEFAULT_ACCESS_KEY_ENV = "RDIST_ACCESS_KEY"
DEFAULT_TIMEOUT_SECONDS = 60.0

CONFIG_FILENAME = "rdist.toml"


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class ServerConfig:
    url: str = DEFAULT_SERVER_URL
    proxy: str | None = None
    timeout: float = DEFAULT_TIMEOUT_SECONDS


@dataclass(frozen=True, slots=True)
class AuthConfig:
    """Where to find the access key.

    The key itself never lives in the config file, only the name of the
    environment variable that holds it.
    """

    access_key_env: str = DEFAULT_ACCESS_KEY_ENV

    def access_key(self, environ: Mapping[str, str] | None = None) -> str | None:
        env = os.environ if environ is None else environ
        value = env.get(self.access_key_env, "").strip()
        return value or None


@dataclass(frozen=True, slots=True)
class BundleConfig:
    # None means "current working directory at bundle time"
    work_dir: Path | None = None


def _empty_headers() -> dict[str, str]:
    return {}


@dataclass(frozen=True, slots=True)
class Config:
    """Main configuration container."""

    server: ServerConfig = field(default_factory=ServerConfig)
    auth: AuthConfig = field(default_factory=AuthConfig)
    headers: dict[str, str] = field(default_factory=_empty_headers)
    bundle: BundleConfig = field(default_factory=BundleConfig)

    @classmethod
    def from_dict(cls, data: Mapping[str, object], *, base_dir: Path | None = None) -> Config:
        """Create Config from parsed TOML.

        Relative ``bundle.work_dir`` values are resolved against ``base_dir``
        (the directory holding the config file) when given.
        """
        server: StrDict = get_table(data, "server") or {}
        auth: StrDict = get_table(data, "auth") or {}
        headers: StrDict = get_table(data, "headers") or {}
        bundle: StrDict = get_table(data, "bundle") or {}

        timeout = get_number(server, "timeout")
        if timeout is not None and timeout <= 0:
            raise ValueError(f"server.timeout must be positive, got {timeout}")

        work_dir: Path | None = None
        work_dir_str = get_str(bundle, "work_dir")
        if work_dir_str:
            work_dir = Path(work_dir_str).expanduser()
            if base_dir is not None and not work_dir.is_absolute():
                work_dir = base_dir / work_dir

        extra_headers: dict[str, str] = {}
        for name, value in headers.items():
            if not isinstance(value, str):
                raise TypeError(f"header '{name}' must be a string")
            extra_headers[name] = value

        return cls(
            server=ServerConfig(
                url=(get_str(server, "url") or DEFAULT_SERVER_URL).rstrip("/"),
                proxy=get_str(server, "proxy"),
                timeout=timeout or DEFAULT_TIMEOUT_SECONDS,
            ),
            auth=AuthConfig(
                access_key_env=get_str(auth, "access_key_env") or DEFAULT_ACCESS_KEY_ENV,
            ),
            headers=extra_headers,
            bundle=BundleConfig(work_dir=work_dir),
        )


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    import tomllib

    try:
        content = path.read_bytes()
        data_obj: object = tomllib.loads(content.decode("utf-8"))
        data = as_str_dict(data_obj)
        if data is None:
            return Err(ConfigError("Config root must be a TOML table", path=path))
        return Ok(data)
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))


def load_config(path: Path) -> Result[Config, ConfigError]:
    """Load and parse configuration from a TOML file.

    Args:
        path: Path to rdist.toml

    Returns:
        Ok(Config) on success, Err(ConfigError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        return Ok(Config.from_dict(result.value, base_dir=path.parent))
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config structure: {e}", path=path))


def load_config_or_default(path: Path | None = None) -> Result[Config, ConfigError]:
    """Load config, falling back to defaults when the file does not exist.

    With no path, ``rdist.toml`` in the current directory is used if present.
    A file that exists but cannot be parsed is still an error.
    """
    candidate = path if path is not None else Path.cwd() / CONFIG_FILENAME
    if path is None and not candidate.exists():
        return Ok(Config())
    return load_config(candidate)

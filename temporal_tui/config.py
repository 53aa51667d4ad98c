"""Configuration loading for the Temporal dashboard.

Settings are resolved in this order (later wins):
1. Built-in defaults
2. ``$XDG_CONFIG_HOME/temporal-tui/config.yaml`` (or an explicit ``--config`` path)
3. ``TEMPORAL_TUI_*`` environment variables
4. Command-line flags
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

import yaml

APP_DIR_NAME = "temporal-tui"

DEFAULT_SERVER_URL = "http://localhost:7243"
DEFAULT_NAMESPACE = "default"
DEFAULT_PAGE_SIZE = 48
DEFAULT_TIMEOUT = 30

ENV_PREFIX = "TEMPORAL_TUI_"


class ConfigError(Exception):
    """Raised when the configuration file or environment is invalid."""


def _xdg_dir(env_var: str, fallback: str) -> Path:
    """Resolve an XDG base directory; relative values are ignored."""
    value = os.environ.get(env_var)
    if value and Path(value).is_absolute():
        return Path(value) / APP_DIR_NAME
    return Path.home() / fallback / APP_DIR_NAME


def get_config_dir() -> Path:
    return _xdg_dir("XDG_CONFIG_HOME", ".config")


def get_state_dir() -> Path:
    return _xdg_dir("XDG_STATE_HOME", ".local/state")


def default_config_path() -> Path:
    return get_config_dir() / "config.yaml"


def default_log_path() -> Path:
    return get_state_dir() / "temporal-tui.log"


def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in ("1", "true", "yes", "on"):
        return True
    if text in ("0", "false", "no", "off", ""):
        return False
    raise ConfigError(f"Invalid boolean value: {value!r}")


def _parse_int(name: str, value: Any) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{name} must be an integer, got {value!r}")
    if number <= 0:
        raise ConfigError(f"{name} must be positive, got {number}")
    return number


@dataclass
class Settings:
    server_url: str = DEFAULT_SERVER_URL
    namespace: str = DEFAULT_NAMESPACE
    api_key: str | None = None
    client_cert: Path | None = None
    client_private_key: Path | None = None
    server_root_ca_cert: Path | None = None
    page_size: int = DEFAULT_PAGE_SIZE
    timeout: int = DEFAULT_TIMEOUT
    debug: bool = False
    log_path: Path | None = None

    def __post_init__(self) -> None:
        if self.log_path is None:
            self.log_path = default_log_path()

    def tls_cert(self) -> tuple[str, str] | None:
        """Client certificate pair for mutual TLS, if configured."""
        if self.client_cert is None and self.client_private_key is None:
            return None
        if self.client_cert is None or self.client_private_key is None:
            raise ConfigError("client_cert and client_private_key must be set together")
        return (str(self.client_cert), str(self.client_private_key))

    def tls_verify(self) -> str | bool:
        if self.server_root_ca_cert is not None:
            return str(self.server_root_ca_cert)
        return True


_PATH_FIELDS = {"client_cert", "client_private_key", "server_root_ca_cert", "log_path"}
_INT_FIELDS = {"page_size", "timeout"}


def _coerce(values: dict[str, Any]) -> dict[str, Any]:
    known = {f.name for f in fields(Settings)}
    unknown = sorted(set(values) - known)
    if unknown:
        raise ConfigError(f"Unknown configuration keys: {', '.join(unknown)}")

    result: dict[str, Any] = {}
    for key, value in values.items():
        if value is None:
            continue
        if key in _PATH_FIELDS:
            result[key] = Path(str(value)).expanduser()
        elif key in _INT_FIELDS:
            result[key] = _parse_int(key, value)
        elif key == "debug":
            result[key] = _parse_bool(value)
        else:
            result[key] = str(value)
    return result


def load_config_file(path: Path) -> dict[str, Any]:
    """Read the YAML config file. A missing file is an empty config."""
    if not path.exists():
        return {}
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Could not parse {path}: {e}")
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a mapping at the top level")
    return data


def env_overrides(environ: dict[str, str] | None = None) -> dict[str, Any]:
    environ = os.environ if environ is None else environ
    overrides = {}
    for f in fields(Settings):
        value = environ.get(ENV_PREFIX + f.name.upper())
        if value is not None:
            overrides[f.name] = value
    return overrides


def load_settings(
    config_path: Path | None = None,
    overrides: dict[str, Any] | None = None,
    environ: dict[str, str] | None = None,
) -> Settings:
    """Build Settings from file, environment and explicit overrides."""
    values: dict[str, Any] = {}
    values.update(load_config_file(config_path or default_config_path()))
    values.update(env_overrides(environ))
    values.update({k: v for k, v in (overrides or {}).items() if v is not None})
    settings = Settings(**_coerce(values))
    if not settings.server_url.startswith(("http://", "https://")):
        raise ConfigError(f"server_url must be an http(s) URL, got {settings.server_url!r}")
    return settings

"""Service configuration loaded from YAML files."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import yaml

SYSTEM_CONFIG_DIR = Path("/etc/config")


class ConfigError(Exception):
    """Raised when a configuration cannot be found or is invalid."""


@dataclass(frozen=True)
class AuthConfig:
    pk: str


@dataclass(frozen=True)
class ServerConfig:
    """Server settings; fields beyond port are used by particular services."""

    port: int
    db_url: str | None = None
    sender_email: str | None = None
    metadata: str | None = None
    user_stats: str | None = None
    notification: str | None = None


@dataclass(frozen=True)
class AppConfig:
    server: ServerConfig
    auth: AuthConfig


_OPTIONAL_SERVER_FIELDS = ("db_url", "sender_email", "metadata", "user_stats", "notification")


def _section(data: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    value = data.get(name)
    if not isinstance(value, Mapping):
        raise ConfigError(f"missing or invalid section: {name}")
    return value


def _string(section: Mapping[str, Any], key: str, required: bool) -> str | None:
    if key not in section:
        if required:
            raise ConfigError(f"missing field: {key}")
        return None
    value = section[key]
    if not isinstance(value, str):
        raise ConfigError(f"field {key} must be a string")
    return value


def parse_config(data: str | bytes | Mapping[str, Any]) -> AppConfig:
    """Build an AppConfig from YAML text or an already parsed mapping."""
    if isinstance(data, (str, bytes)):
        try:
            data = yaml.safe_load(data)
        except yaml.YAMLError as exc:
            raise ConfigError(f"invalid YAML: {exc}") from exc
    if not isinstance(data, Mapping):
        raise ConfigError("configuration must be a mapping")

    server = _section(data, "server")
    auth = _section(data, "auth")

    port = server.get("port")
    if not isinstance(port, int) or isinstance(port, bool):
        raise ConfigError("field port must be an integer")
    if not 0 <= port <= 65535:
        raise ConfigError(f"port out of range: {port}")

    extras = {key: _string(server, key, required=False) for key in _OPTIONAL_SERVER_FIELDS}
    return AppConfig(
        server=ServerConfig(port=port, **extras),
        auth=AuthConfig(pk=_string(auth, "pk", required=True)),
    )


def _read(path: Path) -> AppConfig:
    with path.open("r", encoding="utf-8") as reader:
        return parse_config(reader.read())


def load_config(service: str) -> AppConfig:
    """Load ./<service>.yml, else /etc/config/<service>.yml, else the file named by <SERVICE>_CONFIG."""
    filename = f"{service}.yml"
    for candidate in (Path(filename), SYSTEM_CONFIG_DIR / filename):
        if candidate.is_file():
            return _read(candidate)

    env_path = os.environ.get(f"{service.upper()}_CONFIG")
    if env_path is None:
        raise ConfigError("Config file not found")
    try:
        return _read(Path(env_path))
    except OSError as exc:
        raise ConfigError(f"cannot read config file {env_path}: {exc}") from exc
"""Application configuration loaded from a YAML file."""

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml


class ConfigError(Exception):
    """Raised when configuration cannot be read, decoded or is incomplete."""


@dataclass
class ServerConfig:
    mode: str = ""
    address: str = ""


@dataclass
class DatabaseConfig:
    host: str = ""
    port: int = 0
    user: str = ""
    password: str = ""
    name: str = ""
    dsn: str = ""


@dataclass
class PasetoConfig:
    symmetric_key: str = ""
    expire_minutes: int = 0


@dataclass
class LogConfig:
    level: str = ""


@dataclass
class Config:
    server: ServerConfig = field(default_factory=ServerConfig)
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    paseto: PasetoConfig = field(default_factory=PasetoConfig)
    log: LogConfig = field(default_factory=LogConfig)


_current: Optional[Config] = None


def _lowered(raw: Any, name: str) -> dict:
    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        raise ConfigError(f"unmarshal config: {name} must be a mapping")
    return {str(k).lower(): v for k, v in raw.items()}


def _section(cls, raw: Any, name: str):
    values = _lowered(raw, name)
    kwargs = {}
    for f in fields(cls):
        value = values.get(f.name)
        if value is None:
            continue
        try:
            kwargs[f.name] = int(value) if f.type is int else str(value)
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"unmarshal config: {name}.{f.name}: {exc}") from exc
    return cls(**kwargs)


def parse_config(data: Any) -> Config:
    """Build and validate a Config from a mapping of raw settings."""
    raw = _lowered(data, "top level")
    cfg = Config(**{f.name: _section(f.type, raw.get(f.name), f.name) for f in fields(Config)})

    if not cfg.server.address or not cfg.server.mode:
        raise ConfigError("config: server.address and server.mode must be set")
    db = cfg.database
    if not db.dsn and not (db.host and db.user and db.name):
        raise ConfigError(
            "config: either database.dsn or (database.host, database.user, "
            "database.name) must be set"
        )
    if not cfg.paseto.symmetric_key:
        raise ConfigError("config: paseto.symmetric_key must be set")
    return cfg


def _find_config_file() -> Path:
    for directory in (Path("config"), Path(".")):
        for ext in ("yaml", "yml"):
            candidate = directory / f"config.{ext}"
            if candidate.is_file():
                return candidate
    raise ConfigError('read config: Config File "config" Not Found')


def load(config_path=None) -> Config:
    """Read, validate and install the configuration.

    Without a path, config.yaml is looked up in ./config and then in the
    current directory. No defaults are filled in for required fields.
    """
    global _current
    path = Path(config_path) if config_path else _find_config_file()
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigError(f"read config: {exc}") from exc
    _current = parse_config(data)
    return _current


def get() -> Optional[Config]:
    """Return the loaded configuration, or None if nothing was loaded."""
    return _current


def set_config(cfg: Optional[Config]) -> Optional[Config]:
    """Install a configuration directly and return the one it replaces."""
    global _current
    if cfg is not None and not isinstance(cfg, Config):
        raise TypeError(f"expected Config or None, got {type(cfg).__name__}")
    previous, _current = _current, cfg
    return previous
"""Application configuration loaded from a YAML file."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import timedelta
from pathlib import Path
from typing import Any

import yaml
from sqlalchemy.engine import URL

DEFAULT_CONFIG_PATH = "config/config.yaml"

_DURATION_UNITS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "μs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}
_DURATION_PART = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|μs|ms|s|m|h)")


class ConfigError(Exception):
    """Raised when the configuration cannot be loaded."""


@dataclass
class Database:
    host: str = ""
    port: str = ""
    user: str = ""
    password: str = ""
    dbname: str = ""
    ssl_mode: str = ""

    def url(self) -> URL:
        """Return the connection URL for the PostgreSQL database."""
        try:
            port = int(self.port) if self.port else None
        except ValueError as exc:
            raise ConfigError(f"invalid database port {self.port!r}") from exc
        query = {"sslmode": self.ssl_mode} if self.ssl_mode else {}
        return URL.create(
            "postgresql",
            username=self.user or None,
            password=self.password or None,
            host=self.host or None,
            port=port,
            database=self.dbname or None,
            query=query,
        )


@dataclass
class LoggerSettings:
    level: str = ""
    encoding: str = ""
    output_paths: list[str] = field(default_factory=list)


@dataclass
class HTTPServer:
    address: str = ""
    timeout: timedelta = timedelta(0)
    idle_timeout: timedelta = timedelta(0)


@dataclass
class Config:
    env: str = ""
    database: Database = field(default_factory=Database)
    logger: LoggerSettings = field(default_factory=LoggerSettings)
    http_server: HTTPServer = field(default_factory=HTTPServer)


def _parse_duration(value: Any) -> timedelta:
    if value is None:
        return timedelta(0)
    text = str(value)
    sign = 1.0
    body = text
    if body[:1] in "+-" and body:
        if body[0] == "-":
            sign = -1.0
        body = body[1:]
    if body == "0":
        return timedelta(0)
    if not body:
        raise ConfigError(f"invalid duration {text!r}")
    seconds = 0.0
    position = 0
    for match in _DURATION_PART.finditer(body):
        if match.start() != position:
            break
        seconds += float(match.group(1)) * _DURATION_UNITS[match.group(2)]
        position = match.end()
    if position != len(body):
        raise ConfigError(f"invalid duration {text!r}")
    return timedelta(seconds=sign * seconds)


def _section(data: dict[str, Any], key: str) -> dict[str, Any]:
    value = data.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError(f"section {key} must be a mapping")
    return value


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def load_config(path: str | Path = DEFAULT_CONFIG_PATH) -> Config:
    """Read the configuration file at *path*."""
    config_path = Path(path)
    if not config_path.exists():
        raise ConfigError(f"op MustLoad: config file {config_path} does not exist")
    try:
        data = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigError(f"op MustLoad: {exc}") from exc
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError("op MustLoad: configuration must be a mapping")

    db = _section(data, "database")
    log = _section(data, "logger")
    http = _section(data, "http-server")

    paths = log.get("output_paths") or []
    if not isinstance(paths, list):
        raise ConfigError("op MustLoad: logger.output_paths must be a list")

    return Config(
        env=_text(data.get("env")),
        database=Database(
            host=_text(db.get("host")),
            port=_text(db.get("port")),
            user=_text(db.get("user")),
            password=_text(db.get("password")),
            dbname=_text(db.get("dbname")),
            ssl_mode=_text(db.get("ssl_mode")),
        ),
        logger=LoggerSettings(
            level=_text(log.get("level")),
            encoding=_text(log.get("encoding")),
            output_paths=[str(p) for p in paths],
        ),
        http_server=HTTPServer(
            address=_text(http.get("address")),
            timeout=_parse_duration(http.get("timeout")),
            idle_timeout=_parse_duration(http.get("idle_timeout")),
        ),
    )
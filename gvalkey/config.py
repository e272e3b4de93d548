"""Server configuration read from GVK_* environment variables."""

from __future__ import annotations

import ipaddress
import os
import re
from dataclasses import dataclass
from typing import Mapping

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 6379
DEFAULT_LOG_LEVEL = "INFO"
LOG_LEVELS = ("DEBUG", "INFO", "WARN", "ERROR")

_INT_RE = re.compile(r"[+-]?[0-9]+")
_INT64_MIN = -(1 << 63)
_INT64_MAX = (1 << 63) - 1
_HOSTNAME_RE = re.compile(r"[a-zA-Z](?:[a-zA-Z0-9-]+(?:\.[a-zA-Z0-9-]+)*\.?)?[a-zA-Z0-9]")


class ConfigError(ValueError):
    """Raised when the configuration cannot be read or is invalid."""


@dataclass
class Config:
    """The listening address and log level of the server."""

    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    log_level: str = DEFAULT_LOG_LEVEL


def _parse_int(field: str, raw: str) -> int:
    if _INT_RE.fullmatch(raw) is None:
        raise ConfigError(f'env: parse error on field "{field}" of type "int": invalid syntax {raw!r}')
    value = int(raw)
    if not _INT64_MIN <= value <= _INT64_MAX:
        raise ConfigError(f'env: parse error on field "{field}" of type "int": value out of range {raw!r}')
    return value


def load(environ: Mapping[str, str] | None = None) -> Config:
    """Build a validated ``Config`` from ``environ`` (the process environment by default).

    Unset or empty variables take their defaults; the log level is upper-cased.
    """
    env = os.environ if environ is None else environ
    host = env.get("GVK_HOST") or DEFAULT_HOST
    port = _parse_int("Port", env.get("GVK_PORT") or str(DEFAULT_PORT))
    log_level = (env.get("GVK_LOG_LEVEL") or DEFAULT_LOG_LEVEL).upper()

    config = Config(host=host, port=port, log_level=log_level)
    validate_config(config)
    return config


def _is_ip(value: str) -> bool:
    try:
        ipaddress.ip_address(value)
    except ValueError:
        return False
    return True


def _failure(name: str, tag: str) -> str:
    return f"Key: 'Config.{name}' Error:Field validation for '{name}' failed on the '{tag}' tag"


def validate_config(config: Config) -> None:
    """Raise ``ConfigError`` listing every field of ``config`` that is invalid."""
    problems = []

    if not config.host:
        problems.append(_failure("GVK_HOST", "required"))
    elif _HOSTNAME_RE.fullmatch(config.host) is None and not _is_ip(config.host):
        problems.append(_failure("GVK_HOST", "hostname|ip"))

    if not config.port:
        problems.append(_failure("GVK_PORT", "required"))
    elif config.port < 1:
        problems.append(_failure("GVK_PORT", "min"))
    elif config.port > 65535:
        problems.append(_failure("GVK_PORT", "max"))

    if not config.log_level:
        problems.append(_failure("GVK_LOG_LEVEL", "required"))
    elif config.log_level not in LOG_LEVELS:
        problems.append(_failure("GVK_LOG_LEVEL", "oneof"))

    if problems:
        raise ConfigError("\n".join(problems))
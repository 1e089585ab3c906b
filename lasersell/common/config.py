"""
Environment-driven settings for stream tooling.

Values are read at call time (never at import time), so tests and wrappers can adjust
the environment before building a config.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Dict

DEFAULT_SERVICE_NAME = "lasersell-stream-tools"
DEFAULT_ENV = "local"
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_MAX_REPORTED_FAILURES = 50

_TRUE = {"1", "true", "t", "yes", "y", "on"}
_FALSE = {"0", "false", "f", "no", "n", "off"}


def _parse_bool(v: Any, default: bool = False) -> bool:
    s = str(v if v is not None else "").strip().lower()
    if s in _TRUE:
        return True
    if s in _FALSE:
        return False
    return default


def _parse_bool_env(name: str, default: bool = False) -> bool:
    return _parse_bool(os.getenv(name), default=default)


def _parse_int_env(name: str, default: int) -> int:
    raw = str(os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _str_env(name: str, default: str) -> str:
    return str(os.getenv(name) or "").strip() or default


@dataclass(frozen=True, slots=True)
class ToolConfig:
    service_name: str = DEFAULT_SERVICE_NAME
    env: str = DEFAULT_ENV
    log_level: str = DEFAULT_LOG_LEVEL
    strict_market_context: bool = False
    max_reported_failures: int = DEFAULT_MAX_REPORTED_FAILURES

    @classmethod
    def from_env(cls) -> "ToolConfig":
        return cls(
            service_name=_str_env("SERVICE_NAME", DEFAULT_SERVICE_NAME),
            env=_str_env("ENV", DEFAULT_ENV),
            log_level=_str_env("LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
            strict_market_context=_parse_bool_env("LASERSELL_STRICT_MARKET_CONTEXT", default=False),
            max_reported_failures=max(0, _parse_int_env("LASERSELL_MAX_REPORTED_FAILURES", DEFAULT_MAX_REPORTED_FAILURES)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "service_name": self.service_name,
            "env": self.env,
            "log_level": self.log_level,
            "strict_market_context": self.strict_market_context,
            "max_reported_failures": self.max_reported_failures,
        }

from __future__ import annotations

import codecs
import os
from dataclasses import dataclass
from functools import lru_cache


_LOG_LEVEL_ENV = "LOG_LEVEL"
_MAX_BYTES_ENV = "SENSOR_LOG_MAX_BYTES"
_ENCODING_ENV = "SENSOR_LOG_ENCODING"

DEFAULT_MAX_LOG_BYTES = 1024 * 1024


@dataclass(frozen=True)
class Settings:
    log_level: str
    max_log_bytes: int
    log_encoding: str


def _read_positive_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = int(candidate)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _read_log_level(default: str) -> str:
    value = os.getenv(_LOG_LEVEL_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    return candidate.upper()


def _read_encoding(default: str) -> str:
    value = os.getenv(_ENCODING_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        codecs.lookup(candidate)
    except LookupError:
        return default
    return candidate


@lru_cache
def get_settings() -> Settings:
    return Settings(
        log_level=_read_log_level("INFO"),
        max_log_bytes=_read_positive_int(_MAX_BYTES_ENV, DEFAULT_MAX_LOG_BYTES),
        log_encoding=_read_encoding("utf-8"),
    )

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

DEFAULT_BASE_URL = "http://localhost:8000"
DEFAULT_TIMEOUT = 30.0
DEFAULT_SOURCE = "csv"

_BASE_URL_ENV = "API_BASE_URL"
_TIMEOUT_ENV = "CLI_TIMEOUT"
_SOURCE_ENV = "CLI_READING_SOURCE"

SOURCES = ("csv", "firebase")


@dataclass(frozen=True)
class CLIConfig:
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT
    source: str = DEFAULT_SOURCE


def _read_float(value: Optional[str], default: float) -> float:
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = float(candidate)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _read_source(value: Optional[str], default: str) -> str:
    if value is None:
        return default
    candidate = value.strip().lower()
    return candidate if candidate in SOURCES else default


def load_config(
    base_url: Optional[str] = None,
    timeout: Optional[float] = None,
    source: Optional[str] = None,
) -> CLIConfig:
    url = base_url or os.getenv(_BASE_URL_ENV) or DEFAULT_BASE_URL
    if timeout is None:
        timeout = _read_float(os.getenv(_TIMEOUT_ENV), DEFAULT_TIMEOUT)
    if source is None:
        source = _read_source(os.getenv(_SOURCE_ENV), DEFAULT_SOURCE)
    return CLIConfig(
        base_url=url.rstrip("/"),
        timeout=timeout,
        source=source,
    )

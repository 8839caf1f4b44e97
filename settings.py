from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional


_CSV_PATH_ENV = "SENSOR_CSV_PATH"
_FIREBASE_URL_ENV = "FIREBASE_URL"
_FIREBASE_NODE_ENV = "FIREBASE_NODE"
_FIREBASE_TIMEOUT_ENV = "FIREBASE_TIMEOUT"
_RESOLUTION_ENV = "HEATMAP_RESOLUTION"
_IDW_POWER_ENV = "IDW_POWER"
_CACHE_SIZE_ENV = "HEATMAP_CACHE_SIZE"
_LOG_LEVEL_ENV = "LOG_LEVEL"

DEFAULT_FIREBASE_URL = "https://major-project-d3e48-default-rtdb.asia-southeast1.firebasedatabase.app"


@dataclass(frozen=True)
class Settings:
    csv_path: Optional[str]
    firebase_url: str
    firebase_node: str
    firebase_timeout: float
    heatmap_resolution: int
    idw_power: float
    heatmap_cache_size: int
    log_level: str


def _read_str_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or default


def _read_optional_env(name: str, default: Optional[str]) -> Optional[str]:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or None


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


def _read_positive_float(name: str, default: float) -> float:
    value = os.getenv(name)
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


def _read_log_level(default: str) -> str:
    value = os.getenv(_LOG_LEVEL_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    return candidate.upper()


@lru_cache
def get_settings() -> Settings:
    return Settings(
        csv_path=_read_optional_env(_CSV_PATH_ENV, "./data/sensor_data_24h_transformed.csv"),
        firebase_url=_read_str_env(_FIREBASE_URL_ENV, DEFAULT_FIREBASE_URL).rstrip("/"),
        firebase_node=_read_str_env(_FIREBASE_NODE_ENV, "NEW_BOARDS"),
        firebase_timeout=_read_positive_float(_FIREBASE_TIMEOUT_ENV, 10.0),
        heatmap_resolution=_read_positive_int(_RESOLUTION_ENV, 100),
        idw_power=_read_positive_float(_IDW_POWER_ENV, 2.0),
        heatmap_cache_size=_read_positive_int(_CACHE_SIZE_ENV, 128),
        log_level=_read_log_level("INFO"),
    )

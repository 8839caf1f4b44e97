"""Flatten raw device storage into readings and derive per-slice inputs."""

from __future__ import annotations

import logging
import math
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Set, Tuple

from models.devices import REQUIRED_DEVICES, SENSOR_COORDS
from models.records import Reading, SensorObservation
from models.rounding import round_half_up

logger = logging.getLogger(__name__)


def heat_index(temperature: float, humidity: float) -> float:
    """HI = T + 0.33*e - 5.358 with e the vapour pressure in hPa."""

    vapour_pressure = (humidity / 100) * 6.112 * math.exp(
        (17.62 * temperature) / (243.12 + temperature)
    )
    return round_half_up(temperature + 0.33 * vapour_pressure - 5.358)


def coerce_metric(raw: Any) -> float:
    """Coerce a raw metric to a finite float; anything else becomes 0.0."""

    if isinstance(raw, bool):
        return 0.0
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return 0.0
    return value if math.isfinite(value) else 0.0


def _split_timestamp(key: str) -> Optional[Tuple[str, str]]:
    # "18-11-2025_06-00-37" -> ("18-11-2025", "06-00-00")
    date_part, _, time_part = key.partition("_")
    if not date_part or not time_part:
        return None
    components = time_part.split("-")
    if len(components) < 2 or not all(components[:2]):
        return None
    hours, minutes = components[0], components[1]
    return date_part, f"{hours}-{minutes}-00"


def build_reading(
    date: str,
    time: str,
    device_id: str,
    temperature: Any,
    humidity: Any,
    pressure: Any,
) -> Reading:
    temp = coerce_metric(temperature)
    hum = coerce_metric(humidity)
    return Reading(
        date=date,
        time=time,
        device_id=device_id,
        bmp_temp_c=temp,
        humidity_pct=hum,
        pressure_hpa=coerce_metric(pressure),
        heat_index=heat_index(temp, hum),
    )


def normalize_raw_readings(raw: Any) -> List[Reading]:
    """Flatten ``{device: {"DD-MM-YYYY_HH-MM-SS": record}}`` into readings."""

    if not isinstance(raw, Mapping):
        return []

    readings: List[Reading] = []
    for device_key, device_data in raw.items():
        if not isinstance(device_data, Mapping):
            continue
        for timestamp, record in device_data.items():
            if not isinstance(record, Mapping):
                continue
            parsed = _split_timestamp(str(timestamp))
            if parsed is None:
                logger.debug(
                    "Skipping reading with malformed timestamp %r",
                    timestamp,
                    extra={"device_id": device_key},
                )
                continue
            date, time = parsed
            readings.append(
                build_reading(
                    date=date,
                    time=time,
                    device_id=record.get("device_id") or str(device_key),
                    temperature=record.get("bmp_temp_c"),
                    humidity=record.get("humidity_pct"),
                    pressure=record.get("pressure_hpa"),
                )
            )
    return readings


def filter_complete_timestamps(
    readings: Iterable[Reading],
    required: Sequence[str] = REQUIRED_DEVICES,
) -> List[Reading]:
    """Keep readings whose (date, time) slice has every required device."""

    readings = list(readings)
    devices_by_slice: Dict[Tuple[str, str], Set[str]] = {}
    for reading in readings:
        devices_by_slice.setdefault((reading.date, reading.time), set()).add(reading.device_id)

    required_set = set(required)
    complete = {key for key, devices in devices_by_slice.items() if required_set <= devices}
    return [reading for reading in readings if (reading.date, reading.time) in complete]


def sample_readings(readings: Sequence[Reading], max_rows: int = 50) -> List[Reading]:
    """Return at most ``max_rows`` readings taken at an even stride."""

    readings = list(readings)
    if len(readings) <= max_rows:
        return readings
    step = len(readings) // max_rows
    return readings[::step][:max_rows]


def available_time_buckets(readings: Iterable[Reading]) -> List[str]:
    return sorted({reading.time for reading in readings})


def observations_for_slice(
    readings: Iterable[Reading],
    time: str,
    date: Optional[str] = None,
) -> List[SensorObservation]:
    """Build one observation per fixed device for a time-slice.

    The first reading of each device in the slice wins. A device with no
    reading in the slice contributes a temperature of 0.0.
    """

    temperatures: Dict[str, float] = {}
    for reading in readings:
        if reading.time != time or (date is not None and reading.date != date):
            continue
        temperatures.setdefault(reading.device_id, reading.bmp_temp_c)

    observations = []
    for device_id in REQUIRED_DEVICES:
        latitude, longitude = SENSOR_COORDS[device_id]
        observations.append(
            SensorObservation(
                latitude=latitude,
                longitude=longitude,
                temperature=temperatures.get(device_id, 0.0),
                device_id=device_id,
            )
        )
    return observations


def slice_has_readings(readings: Iterable[Reading], time: str, date: Optional[str] = None) -> bool:
    return any(
        reading.time == time and (date is None or reading.date == date) for reading in readings
    )

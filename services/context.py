"""Plain-text summaries of sensor data for a chat assistant prompt."""

from __future__ import annotations

from typing import Sequence

from models.records import Reading
from services.normalizer import sample_readings
from services.statistics import compute_statistics

SAMPLE_ROWS = 50
PROMPT_ROWS = 10


def format_reading(reading: Reading) -> str:
    return (
        f"{reading.date} {reading.time} - Device: {reading.device_id}, "
        f"Temp: {reading.bmp_temp_c}°C, Humidity: {reading.humidity_pct}%, "
        f"Pressure: {reading.pressure_hpa} hPa, Heat Index: {reading.heat_index}"
    )


def build_chat_context(readings: Sequence[Reading]) -> str:
    """Render statistics and a few sampled readings; empty input gives ``""``."""

    if not readings:
        return ""

    statistics = compute_statistics(readings)
    sampled = sample_readings(readings, SAMPLE_ROWS)

    lines = ["Current Sensor Statistics:"]
    lines.extend(
        f"- {stat.metric}: avg={stat.average}, min={stat.min_value}, "
        f"max={stat.max_value}, std_dev={stat.std_deviation}"
        for stat in statistics
    )
    lines.append("")
    lines.append(f"Sample Data ({len(sampled)} records):")
    lines.extend(format_reading(reading) for reading in sampled[:PROMPT_ROWS])
    return "\n".join(lines)

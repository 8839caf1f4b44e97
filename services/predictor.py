"""Single-harmonic diurnal temperature prediction."""

from __future__ import annotations

import math
import re
from typing import Optional, Sequence

from models.records import Reading, metric_series
from models.rounding import round_half_up

DAY_MINUTES = 1440

_TIME_SEPARATORS = re.compile(r"[-:]")


def time_to_minutes(time_bucket: str) -> int:
    """Convert ``HH-MM-SS`` (or ``HH:MM:SS``) into minutes since midnight."""

    parts = _TIME_SEPARATORS.split(time_bucket.strip())
    if len(parts) < 2:
        raise ValueError(f"Invalid time bucket {time_bucket!r}.")
    try:
        hours = int(parts[0])
        minutes = int(parts[1])
    except ValueError as exc:
        raise ValueError(f"Invalid time bucket {time_bucket!r}.") from exc
    return hours * 60 + minutes


def predict_temperature(readings: Sequence[Reading], target_time: str) -> Optional[float]:
    """Evaluate ``A*cos(2*pi*(t - t_peak)/1440) + T_avg`` at ``target_time``.

    The model is fitted in closed form from the observed temperatures:
    ``A`` is half the observed range and ``t_peak`` is the time bucket of the
    first reading that reaches the maximum. Returns ``None`` when there are no
    readings to fit.
    """

    readings = list(readings)
    temperatures = metric_series(readings, "bmp_temp_c")
    if not temperatures:
        return None

    t_max = max(temperatures)
    t_min = min(temperatures)
    t_avg = sum(temperatures) / len(temperatures)
    amplitude = (t_max - t_min) / 2

    peak = next(reading for reading in readings if reading.bmp_temp_c == t_max)
    t_peak = time_to_minutes(peak.time)
    t = time_to_minutes(target_time)

    radians = 2 * math.pi * (t - t_peak) / DAY_MINUTES
    return round_half_up(amplitude * math.cos(radians) + t_avg)

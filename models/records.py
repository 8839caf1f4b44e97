"""Domain models shared across services."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, NamedTuple, Tuple

METRICS: Tuple[str, ...] = ("bmp_temp_c", "pressure_hpa", "humidity_pct", "heat_index")

METRIC_LABELS = {
    "bmp_temp_c": "Temperature (°C)",
    "pressure_hpa": "Pressure (hPa)",
    "humidity_pct": "Humidity (%)",
    "heat_index": "Heat Index",
}


@dataclass(frozen=True, slots=True)
class Reading:
    """A single normalized device reading at one-minute granularity."""

    date: str
    time: str
    device_id: str
    bmp_temp_c: float
    humidity_pct: float
    pressure_hpa: float
    heat_index: float

    def metric(self, name: str) -> float:
        if name not in METRICS:
            raise KeyError(f"Unknown metric {name!r}.")
        return getattr(self, name)


def metric_series(readings: Iterable[Reading], metric: str) -> List[float]:
    """Return the values of ``metric`` in record order."""

    return [reading.metric(metric) for reading in readings]


@dataclass(frozen=True, slots=True)
class MetricStatistic:
    """Summary statistics for one metric, rounded to two decimals."""

    metric: str
    average: float
    min_value: float
    max_value: float
    time_at_min: str
    time_at_max: str
    variance: float
    std_deviation: float


@dataclass(frozen=True, slots=True)
class SensorObservation:
    """Temperature observed by one fixed-location device in a time-slice."""

    latitude: float
    longitude: float
    temperature: float
    device_id: str


@dataclass(frozen=True, slots=True)
class GridPoint:
    latitude: float
    longitude: float
    value: float


class Color(NamedTuple):
    red: int
    green: int
    blue: int

    def css(self) -> str:
        return f"rgb({self.red}, {self.green}, {self.blue})"


@dataclass(frozen=True)
class Heatmap:
    """Sparse interpolated field plus the range used for colour normalization."""

    points: Tuple[GridPoint, ...]
    min_temperature: float
    max_temperature: float
    resolution: int
    power: float

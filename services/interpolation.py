"""Inverse-distance-weighted interpolation inside the sensor triangle."""

from __future__ import annotations

import math
from typing import Iterator, Sequence, Tuple

from models.records import Color, GridPoint, Heatmap, SensorObservation
from models.rounding import round_channel

DEFAULT_POWER = 2.0
DISTANCE_FLOOR = 1e-10
PADDING_RATIO = 0.1

Point = Tuple[float, float]


def is_inside_polygon(point: Point, polygon: Sequence[Point]) -> bool:
    """Crossing-number test; points exactly on an edge may go either way."""

    x, y = point
    inside = False
    j = len(polygon) - 1
    for i in range(len(polygon)):
        xi, yi = polygon[i]
        xj, yj = polygon[j]
        if (yi > y) != (yj > y) and x < (xj - xi) * (y - yi) / (yj - yi) + xi:
            inside = not inside
        j = i
    return inside


def idw_value(
    latitude: float,
    longitude: float,
    observations: Sequence[SensorObservation],
    power: float = DEFAULT_POWER,
) -> float:
    weight_sum = 0.0
    weighted_total = 0.0
    for observation in observations:
        distance = math.hypot(latitude - observation.latitude, longitude - observation.longitude)
        weight = 1 / max(distance, DISTANCE_FLOOR) ** power
        weight_sum += weight
        weighted_total += weight * observation.temperature
    return weighted_total / weight_sum


def _validate(observations: Sequence[SensorObservation], resolution: int) -> None:
    if len(observations) != 3:
        raise ValueError(
            f"Interpolation requires exactly 3 observations, got {len(observations)}."
        )
    if resolution < 1:
        raise ValueError(f"Resolution must be a positive integer, got {resolution}.")


def generate_heatmap_grid(
    observations: Sequence[SensorObservation],
    resolution: int,
    power: float = DEFAULT_POWER,
) -> Iterator[GridPoint]:
    """Lazily interpolate lattice cells inside the sensor triangle.

    The bounding box of the observations is padded by 10% on each side and
    split into ``resolution x resolution`` cells. Each cell centre is tested
    against the polygon formed by the observations in their given order;
    exterior cells are skipped, so the output is a sparse point cloud.
    """

    observations = tuple(observations)
    _validate(observations, resolution)
    return _iter_grid(observations, resolution, power)


def _iter_grid(
    observations: Tuple[SensorObservation, ...],
    resolution: int,
    power: float,
) -> Iterator[GridPoint]:
    polygon = [(obs.latitude, obs.longitude) for obs in observations]
    latitudes = [lat for lat, _ in polygon]
    longitudes = [lng for _, lng in polygon]

    min_lat, max_lat = min(latitudes), max(latitudes)
    min_lng, max_lng = min(longitudes), max(longitudes)
    lat_padding = (max_lat - min_lat) * PADDING_RATIO
    lng_padding = (max_lng - min_lng) * PADDING_RATIO
    min_lat -= lat_padding
    max_lat += lat_padding
    min_lng -= lng_padding
    max_lng += lng_padding

    lat_step = (max_lat - min_lat) / resolution
    lng_step = (max_lng - min_lng) / resolution

    for i in range(resolution):
        latitude = min_lat + (i + 0.5) * lat_step
        for j in range(resolution):
            longitude = min_lng + (j + 0.5) * lng_step
            if not is_inside_polygon((latitude, longitude), polygon):
                continue
            yield GridPoint(
                latitude=latitude,
                longitude=longitude,
                value=idw_value(latitude, longitude, observations, power),
            )


def build_heatmap(
    observations: Sequence[SensorObservation],
    resolution: int,
    power: float = DEFAULT_POWER,
) -> Heatmap:
    """Materialize the grid together with the observed temperature range."""

    observations = tuple(observations)
    points = tuple(generate_heatmap_grid(observations, resolution, power))
    temperatures = [obs.temperature for obs in observations]
    return Heatmap(
        points=points,
        min_temperature=min(temperatures),
        max_temperature=max(temperatures),
        resolution=resolution,
        power=power,
    )


def color_for_value(value: float, minimum: float, maximum: float) -> Color:
    """Map ``value`` onto a blue, cyan, green, yellow, red gradient.

    A degenerate range (``minimum == maximum``) renders the midpoint colour.
    """

    if maximum == minimum:
        normalized = 0.5
    else:
        normalized = (value - minimum) / (maximum - minimum)

    if normalized <= 0:
        return Color(0, 0, 255)
    if normalized >= 1:
        return Color(255, 0, 0)

    if normalized < 0.25:
        t = normalized / 0.25
        return Color(0, round_channel(255 * t), 255)
    if normalized < 0.5:
        t = (normalized - 0.25) / 0.25
        return Color(0, 255, round_channel(255 * (1 - t)))
    if normalized < 0.75:
        t = (normalized - 0.5) / 0.25
        return Color(round_channel(255 * t), 255, 0)
    t = (normalized - 0.75) / 0.25
    return Color(255, round_channel(255 * (1 - t)), 0)

"""Descriptive statistics over metric series."""

from __future__ import annotations

import math
from typing import List, Sequence

from models.records import METRICS, MetricStatistic, Reading, metric_series
from models.rounding import round_half_up


def _first_time_matching(readings: Sequence[Reading], metric: str, target: float) -> str:
    # First match in input order; exact comparison against the un-rounded extremum.
    for reading in readings:
        if reading.metric(metric) == target:
            return reading.time
    return "N/A"


def summarize_metric(readings: Sequence[Reading], metric: str) -> MetricStatistic | None:
    """Summarize a single metric, or ``None`` when there are no values."""

    values = metric_series(readings, metric)
    if not values:
        return None

    count = len(values)
    mean = sum(values) / count
    minimum = min(values)
    maximum = max(values)
    variance = sum((value - mean) ** 2 for value in values) / count

    return MetricStatistic(
        metric=metric,
        average=round_half_up(mean),
        min_value=round_half_up(minimum),
        max_value=round_half_up(maximum),
        time_at_min=_first_time_matching(readings, metric, minimum),
        time_at_max=_first_time_matching(readings, metric, maximum),
        variance=round_half_up(variance),
        std_deviation=round_half_up(math.sqrt(variance)),
    )


def compute_statistics(
    readings: Sequence[Reading],
    metrics: Sequence[str] = METRICS,
) -> List[MetricStatistic]:
    """Compute one :class:`MetricStatistic` per metric.

    An empty reading sequence produces an empty list; no metric can be
    summarized without data. Values are used as given: non-finite inputs are
    expected to have been coerced upstream by the normalizer.
    """

    readings = list(readings)
    if not readings:
        return []

    results: List[MetricStatistic] = []
    for metric in metrics:
        statistic = summarize_metric(readings, metric)
        if statistic is not None:
            results.append(statistic)
    return results

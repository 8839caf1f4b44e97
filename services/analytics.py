"""Service layer wiring reading sources to the analytic functions."""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Callable, List, Optional, Sequence, Tuple

from models.records import Heatmap, MetricStatistic, Reading, SensorObservation
from services.interpolation import build_heatmap
from services.normalizer import observations_for_slice, slice_has_readings
from services.predictor import predict_temperature
from services.statistics import compute_statistics
from settings import get_settings
from storage.csv_source import CsvReadingSource, build_default_csv_source
from storage.firebase import FirebaseReadingSource, build_default_firebase_source

logger = logging.getLogger(__name__)

HeatmapBuilder = Callable[[Tuple[SensorObservation, ...], int, float], Heatmap]


class AnalyticsService:
    """Coordinates reading sources and the stateless analytic functions.

    Heatmaps are memoised by their inputs; the analytic functions themselves
    keep no state.
    """

    def __init__(
        self,
        csv_source: CsvReadingSource,
        firebase_source: FirebaseReadingSource,
        resolution: int = 100,
        power: float = 2.0,
        cache_size: int = 128,
    ) -> None:
        self.csv_source = csv_source
        self.firebase_source = firebase_source
        self.resolution = resolution
        self.power = power
        self._build_heatmap: HeatmapBuilder = lru_cache(maxsize=cache_size)(build_heatmap)

    def statistics(self, readings: Sequence[Reading]) -> List[MetricStatistic]:
        results = compute_statistics(readings)
        logger.debug("Computed statistics", extra={"record_count": len(readings)})
        return results

    def predict(self, readings: Sequence[Reading], target_time: str) -> Optional[float]:
        prediction = predict_temperature(readings, target_time)
        if prediction is None:
            logger.info(
                "No prediction available",
                extra={"time_bucket": target_time, "record_count": len(readings)},
            )
        return prediction

    def observations(
        self, readings: Sequence[Reading], time: str, date: Optional[str] = None
    ) -> List[SensorObservation]:
        return observations_for_slice(readings, time, date)

    def heatmap(
        self,
        readings: Sequence[Reading],
        time: str,
        date: Optional[str] = None,
        resolution: Optional[int] = None,
        power: Optional[float] = None,
    ) -> Optional[Heatmap]:
        """Interpolate one time-slice, or ``None`` when the slice is empty."""
        if not slice_has_readings(readings, time, date):
            return None

        observations = tuple(self.observations(readings, time, date))
        grid_resolution = resolution or self.resolution
        grid_power = power or self.power
        heatmap = self._build_heatmap(observations, grid_resolution, grid_power)
        logger.debug(
            "Built heatmap",
            extra={
                "time_bucket": time,
                "resolution": grid_resolution,
                "point_count": len(heatmap.points),
            },
        )
        return heatmap

    def cache_info(self):
        return self._build_heatmap.cache_info()  # type: ignore[attr-defined]

    def shutdown(self) -> None:
        """Release the HTTP client held by the Firebase source."""
        self._build_heatmap.cache_clear()  # type: ignore[attr-defined]
        self.firebase_source.close()


@lru_cache
def build_default_service() -> AnalyticsService:
    """Factory that wires the service with sources from settings."""
    settings = get_settings()
    return AnalyticsService(
        csv_source=build_default_csv_source(),
        firebase_source=build_default_firebase_source(),
        resolution=settings.heatmap_resolution,
        power=settings.idw_power,
        cache_size=settings.heatmap_cache_size,
    )

"""Pydantic schemas for the HTTP API layer."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from models.records import GridPoint, MetricStatistic, Reading


class ReadingModel(BaseModel):
    """A normalized reading as exchanged over HTTP."""

    model_config = ConfigDict(from_attributes=True)

    date: str
    time: str
    device_id: str
    bmp_temp_c: float = 0.0
    humidity_pct: float = 0.0
    pressure_hpa: float = 0.0
    heat_index: float = 0.0

    def to_domain(self) -> Reading:
        return Reading(
            date=self.date,
            time=self.time,
            device_id=self.device_id,
            bmp_temp_c=self.bmp_temp_c,
            humidity_pct=self.humidity_pct,
            pressure_hpa=self.pressure_hpa,
            heat_index=self.heat_index,
        )


class ReadingsResponse(BaseModel):
    success: bool = True
    data: List[ReadingModel]
    total_records: int = Field(..., ge=0)
    source: str
    raw_readings: Optional[int] = None
    filtered_records: Optional[int] = None
    is_filtered: bool = False
    time_buckets: List[str] = Field(default_factory=list)


class StatisticsRequest(BaseModel):
    data: List[ReadingModel]


class MetricStatisticModel(BaseModel):
    """Summary statistics for one metric."""

    model_config = ConfigDict(from_attributes=True)

    metric: str
    average: float
    min_value: float
    max_value: float
    time_at_min: str
    time_at_max: str
    variance: float
    std_deviation: float

    @classmethod
    def from_domain(cls, statistic: MetricStatistic) -> "MetricStatisticModel":
        return cls.model_validate(statistic)


class StatisticsResponse(BaseModel):
    success: bool = True
    statistics: List[MetricStatisticModel]


class PredictionRequest(BaseModel):
    data: List[ReadingModel]
    target_time: str = Field(..., min_length=1, description="Time bucket formatted HH-MM-SS.")


class PredictionResponse(BaseModel):
    success: bool = True
    prediction: float
    target_time: str


class HeatmapRequest(BaseModel):
    data: List[ReadingModel]
    time: str = Field(..., min_length=1, description="Time bucket of the slice to interpolate.")
    date: Optional[str] = None
    resolution: Optional[int] = Field(default=None, ge=1, le=1000)
    power: Optional[float] = Field(default=None, gt=0)


class GridPointModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    latitude: float
    longitude: float
    value: float
    color: str

    @classmethod
    def from_domain(cls, point: GridPoint, color: str) -> "GridPointModel":
        return cls(
            latitude=point.latitude,
            longitude=point.longitude,
            value=point.value,
            color=color,
        )


class SensorObservationModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    device_id: str
    latitude: float
    longitude: float
    temperature: float


class HeatmapResponse(BaseModel):
    success: bool = True
    time: str
    resolution: int
    power: float
    min_temperature: float
    max_temperature: float
    sensors: List[SensorObservationModel]
    points: List[GridPointModel]

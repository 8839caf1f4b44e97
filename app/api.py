"""HTTP route definitions for the service."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.schemas import (
    GridPointModel,
    HeatmapRequest,
    HeatmapResponse,
    MetricStatisticModel,
    PredictionRequest,
    PredictionResponse,
    ReadingModel,
    ReadingsResponse,
    SensorObservationModel,
    StatisticsRequest,
    StatisticsResponse,
)
from models.records import Reading
from services.analytics import AnalyticsService, build_default_service
from services.interpolation import color_for_value
from services.normalizer import available_time_buckets, filter_complete_timestamps
from storage.errors import ReadingSourceError

router = APIRouter()


def get_service() -> AnalyticsService:
    return build_default_service()


def _to_domain(data: List[ReadingModel]) -> List[Reading]:
    return [item.to_domain() for item in data]


@router.get(
    "/sensors",
    response_model=ReadingsResponse,
    summary="Fetch and normalize readings from the realtime database.",
)
def get_sensor_readings(
    filter_complete: bool = Query(
        False, description="Only keep time-slices reported by every device."
    ),
    service: AnalyticsService = Depends(get_service),
) -> ReadingsResponse:
    try:
        result = service.firebase_source.fetch()
    except ReadingSourceError as exc:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=str(exc),
        ) from exc

    if result.is_null:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No data found")

    readings = result.readings
    filtered = filter_complete_timestamps(readings) if filter_complete else readings
    return ReadingsResponse(
        data=[ReadingModel.model_validate(reading) for reading in filtered],
        total_records=len(readings),
        source=service.firebase_source.name,
        raw_readings=result.raw_count,
        filtered_records=len(filtered),
        is_filtered=filter_complete,
        time_buckets=available_time_buckets(filtered),
    )


@router.get(
    "/heatmap-data",
    response_model=ReadingsResponse,
    summary="Load readings from the transformed CSV export.",
)
def get_heatmap_data(
    service: AnalyticsService = Depends(get_service),
) -> ReadingsResponse:
    try:
        readings = service.csv_source.load()
    except FileNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(exc),
        ) from exc
    return ReadingsResponse(
        data=[ReadingModel.model_validate(reading) for reading in readings],
        total_records=len(readings),
        source=service.csv_source.name,
        time_buckets=available_time_buckets(readings),
    )


@router.post(
    "/sensors/stats",
    response_model=StatisticsResponse,
    summary="Compute per-metric summary statistics.",
)
async def post_statistics(
    request: StatisticsRequest,
    service: AnalyticsService = Depends(get_service),
) -> StatisticsResponse:
    statistics = service.statistics(_to_domain(request.data))
    return StatisticsResponse(
        statistics=[MetricStatisticModel.from_domain(stat) for stat in statistics]
    )


@router.post(
    "/predict",
    response_model=PredictionResponse,
    summary="Predict the temperature at a time of day.",
)
async def post_prediction(
    request: PredictionRequest,
    service: AnalyticsService = Depends(get_service),
) -> PredictionResponse:
    try:
        prediction = service.predict(_to_domain(request.data), request.target_time)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    if prediction is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Unable to predict temperature",
        )
    return PredictionResponse(prediction=prediction, target_time=request.target_time)


@router.post(
    "/heatmap",
    response_model=HeatmapResponse,
    summary="Interpolate one time-slice across the sensor triangle.",
)
def post_heatmap(
    request: HeatmapRequest,
    service: AnalyticsService = Depends(get_service),
) -> HeatmapResponse:
    readings = _to_domain(request.data)
    heatmap = service.heatmap(
        readings,
        time=request.time,
        date=request.date,
        resolution=request.resolution,
        power=request.power,
    )
    if heatmap is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"No readings for time {request.time!r}.",
        )

    low, high = heatmap.min_temperature, heatmap.max_temperature
    points = [
        GridPointModel.from_domain(point, color_for_value(point.value, low, high).css())
        for point in heatmap.points
    ]
    sensors = [
        SensorObservationModel.model_validate(observation)
        for observation in service.observations(readings, request.time, request.date)
    ]
    return HeatmapResponse(
        time=request.time,
        resolution=heatmap.resolution,
        power=heatmap.power,
        min_temperature=low,
        max_temperature=high,
        sensors=sensors,
        points=points,
    )


@router.get(
    "/health",
    summary="Health check endpoint.",
    status_code=status.HTTP_200_OK,
)
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@router.get(
    "/",
    summary="Root endpoint mirrors health information.",
    status_code=status.HTTP_200_OK,
)
async def root() -> dict[str, str]:
    return {"status": "ok", "detail": "See /health for service status."}

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Iterator, List

import json

import httpx
import pytest
from fastapi.testclient import TestClient

from app import api
from app.main import create_app
from services.analytics import AnalyticsService, build_default_service
from storage.csv_source import CsvReadingSource
from storage.firebase import FirebaseReadingSource, build_default_firebase_source

CSV_BODY = (
    ",date,time,device_id,bmp_temp_c,humidity_pct,pressure_hpa,heat_index\n"
    "0,18-11-2025,12-00-00,DEVICE_001,27.5,60.0,1008.0,29.9\n"
    "1,18-11-2025,12-00-00,DEVICE_002,28.1,58.0,1008.2,30.4\n"
    "2,18-11-2025,12-00-00,DEVICE_003,29.4,55.0,1007.9,31.7\n"
)

RAW_BOARDS = {
    "DEVICE_001": {"18-11-2025_06-00-05": {"bmp_temp_c": 24.0, "humidity_pct": 70, "pressure_hpa": 1009}},
    "DEVICE_002": {"18-11-2025_06-00-09": {"bmp_temp_c": 24.6, "humidity_pct": 69, "pressure_hpa": 1009}},
    "DEVICE_003": {
        "18-11-2025_06-00-30": {"bmp_temp_c": 25.1, "humidity_pct": 67, "pressure_hpa": 1008},
        "18-11-2025_06-05-30": {"bmp_temp_c": 25.4, "humidity_pct": 66, "pressure_hpa": 1008},
    },
}


def _reading(time: str, device_id: str, temp: float) -> Dict[str, Any]:
    return {
        "date": "18-11-2025",
        "time": time,
        "device_id": device_id,
        "bmp_temp_c": temp,
        "humidity_pct": 60.0,
        "pressure_hpa": 1010.0,
        "heat_index": temp + 2.0,
    }


@pytest.fixture
def firebase_payload() -> Dict[str, Any]:
    return {"status": 200, "body": RAW_BOARDS}


@pytest.fixture
def api_client(tmp_path: Path, monkeypatch, firebase_payload) -> Iterator[TestClient]:
    csv_path = tmp_path / "readings.csv"
    csv_path.write_text(CSV_BODY, encoding="utf-8")

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            firebase_payload["status"],
            content=json.dumps(firebase_payload["body"]).encode("utf-8"),
            headers={"content-type": "application/json"},
        )

    services: List[AnalyticsService] = []

    def build_test_service() -> AnalyticsService:
        if not services:
            firebase = FirebaseReadingSource(
                base_url="https://boards.example.test",
                node="NEW_BOARDS",
                client=httpx.Client(transport=httpx.MockTransport(handler)),
            )
            services.append(
                AnalyticsService(
                    csv_source=CsvReadingSource(csv_path),
                    firebase_source=firebase,
                    resolution=30,
                )
            )
        return services[0]

    def cache_clear() -> None:
        services.clear()

    build_test_service.cache_clear = cache_clear  # type: ignore[attr-defined]

    monkeypatch.setattr("app.main.build_default_service", build_test_service)
    monkeypatch.setattr("app.api.build_default_service", build_test_service)

    app = create_app()
    with TestClient(app) as client:
        yield client


def test_lifespan_shuts_down_service_and_clears_cache() -> None:
    app = create_app()

    with TestClient(app):
        service_during = build_default_service()

    service_after = build_default_service()
    try:
        assert service_after is not service_during
    finally:
        service_after.shutdown()
        build_default_service.cache_clear()
        build_default_firebase_source.cache_clear()


def test_health(api_client: TestClient) -> None:
    assert api_client.get("/health").json() == {"status": "ok"}
    assert api_client.get("/").json()["status"] == "ok"


def test_heatmap_data_reads_csv(api_client: TestClient) -> None:
    response = api_client.get("/heatmap-data")

    assert response.status_code == 200
    payload = response.json()
    assert payload["success"] is True
    assert payload["source"] == "csv"
    assert payload["total_records"] == 3
    assert payload["time_buckets"] == ["12-00-00"]
    assert payload["data"][0]["device_id"] == "DEVICE_001"


def test_heatmap_data_missing_file(api_client: TestClient, tmp_path: Path) -> None:
    (tmp_path / "readings.csv").unlink()

    response = api_client.get("/heatmap-data")

    assert response.status_code == 500
    assert "readings.csv" in response.json()["detail"]


def test_sensors_fetches_and_filters(api_client: TestClient) -> None:
    response = api_client.get("/sensors")
    assert response.status_code == 200
    payload = response.json()
    assert payload["raw_readings"] == 4
    assert payload["total_records"] == 4
    assert payload["is_filtered"] is False

    filtered = api_client.get("/sensors", params={"filter_complete": "true"}).json()
    assert filtered["is_filtered"] is True
    assert filtered["filtered_records"] == 3
    assert filtered["time_buckets"] == ["06-00-00"]


def test_sensors_upstream_failure(api_client: TestClient, firebase_payload) -> None:
    firebase_payload["status"] = 500
    firebase_payload["body"] = {"error": "boom"}

    response = api_client.get("/sensors")

    assert response.status_code == 502
    assert "500" in response.json()["detail"]


def test_sensors_empty_database(api_client: TestClient, firebase_payload) -> None:
    firebase_payload["body"] = None

    response = api_client.get("/sensors")

    assert response.status_code == 404
    assert response.json()["detail"] == "No data found"


def test_statistics_endpoint(api_client: TestClient) -> None:
    data = [
        _reading("06-00-00", "DEVICE_001", 20.0),
        _reading("12-00-00", "DEVICE_001", 25.0),
        _reading("18-00-00", "DEVICE_001", 22.5),
    ]

    response = api_client.post("/sensors/stats", json={"data": data})

    assert response.status_code == 200
    statistics = response.json()["statistics"]
    assert [stat["metric"] for stat in statistics] == [
        "bmp_temp_c",
        "pressure_hpa",
        "humidity_pct",
        "heat_index",
    ]
    temperature = statistics[0]
    assert temperature["average"] == 22.5
    assert temperature["time_at_max"] == "12-00-00"
    assert temperature["variance"] == 4.17
    assert temperature["std_deviation"] == 2.04


def test_statistics_endpoint_empty(api_client: TestClient) -> None:
    response = api_client.post("/sensors/stats", json={"data": []})

    assert response.status_code == 200
    assert response.json()["statistics"] == []


def test_statistics_endpoint_rejects_invalid_body(api_client: TestClient) -> None:
    response = api_client.post("/sensors/stats", json={"data": "nope"})

    assert response.status_code == 422


def test_predict_endpoint(api_client: TestClient) -> None:
    data = [
        _reading("06-00-00", "DEVICE_001", 20.0),
        _reading("12-00-00", "DEVICE_001", 25.0),
        _reading("18-00-00", "DEVICE_001", 22.5),
    ]

    response = api_client.post("/predict", json={"data": data, "target_time": "12-00-00"})

    assert response.status_code == 200
    assert response.json() == {"success": True, "prediction": 25.0, "target_time": "12-00-00"}


def test_predict_without_data(api_client: TestClient) -> None:
    response = api_client.post("/predict", json={"data": [], "target_time": "12-00-00"})

    assert response.status_code == 400
    assert response.json()["detail"] == "Unable to predict temperature"


def test_predict_with_malformed_time(api_client: TestClient) -> None:
    data = [_reading("06-00-00", "DEVICE_001", 20.0)]

    response = api_client.post("/predict", json={"data": data, "target_time": "noon"})

    assert response.status_code == 400
    assert "noon" in response.json()["detail"]


def test_heatmap_endpoint(api_client: TestClient) -> None:
    data = [
        _reading("12-00-00", "DEVICE_001", 27.5),
        _reading("12-00-00", "DEVICE_002", 28.1),
        _reading("12-00-00", "DEVICE_003", 29.4),
        _reading("13-00-00", "DEVICE_001", 40.0),
    ]

    response = api_client.post("/heatmap", json={"data": data, "time": "12-00-00"})

    assert response.status_code == 200
    payload = response.json()
    assert payload["resolution"] == 30
    assert payload["power"] == 2.0
    assert payload["min_temperature"] == 27.5
    assert payload["max_temperature"] == 29.4
    assert [sensor["temperature"] for sensor in payload["sensors"]] == [27.5, 28.1, 29.4]
    assert payload["points"]
    for point in payload["points"]:
        assert 27.5 <= point["value"] <= 29.4
        assert point["color"].startswith("rgb(")


def test_heatmap_endpoint_is_cached(api_client: TestClient) -> None:
    data = [
        _reading("12-00-00", "DEVICE_001", 27.5),
        _reading("12-00-00", "DEVICE_002", 28.1),
        _reading("12-00-00", "DEVICE_003", 29.4),
    ]
    body = {"data": data, "time": "12-00-00", "resolution": 10}

    first = api_client.post("/heatmap", json=body).json()
    second = api_client.post("/heatmap", json=body).json()

    assert first == second
    assert api.get_service().cache_info().hits == 1


def test_heatmap_endpoint_unknown_slice(api_client: TestClient) -> None:
    data = [_reading("12-00-00", "DEVICE_001", 27.5)]

    response = api_client.post("/heatmap", json={"data": data, "time": "23-00-00"})

    assert response.status_code == 400
    assert "23-00-00" in response.json()["detail"]


def test_heatmap_endpoint_validates_resolution(api_client: TestClient) -> None:
    data = [_reading("12-00-00", "DEVICE_001", 27.5)]

    response = api_client.post("/heatmap", json={"data": data, "time": "12-00-00", "resolution": 0})

    assert response.status_code == 422


@pytest.mark.parametrize("body", [{}, {"DEVICE_001": {}}])
def test_sensors_empty_object_returns_empty_list(api_client: TestClient, firebase_payload, body) -> None:
    firebase_payload["body"] = body

    response = api_client.get("/sensors")

    assert response.status_code == 200
    payload = response.json()
    assert payload["data"] == []
    assert payload["raw_readings"] == 0
    assert payload["total_records"] == 0

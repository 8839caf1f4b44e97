from __future__ import annotations

from typing import Any, Dict, List, Optional

import httpx
import pytest
import typer
from typer.testing import CliRunner

from cli.app import app
from cli.client import ApiClient
from cli.config import CLIConfig, load_config

READINGS = [
    {
        "date": "18-11-2025",
        "time": "12-00-00",
        "device_id": "DEVICE_001",
        "bmp_temp_c": 27.5,
        "humidity_pct": 60.0,
        "pressure_hpa": 1008.0,
        "heat_index": 29.9,
    }
]


class StubClient:
    def __init__(self, config) -> None:
        self.config = config
        self.sources: List[tuple[str, bool]] = []
        self.heatmap_calls: List[tuple[str, Optional[int]]] = []
        self.closed = False

    def get_readings(self, source: str, filter_complete: bool = False) -> List[Dict[str, Any]]:
        self.sources.append((source, filter_complete))
        return READINGS

    def get_statistics(self, readings: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        return [
            {
                "metric": "bmp_temp_c",
                "average": 27.5,
                "min_value": 27.5,
                "max_value": 27.5,
                "time_at_min": "12-00-00",
                "time_at_max": "12-00-00",
                "variance": 0.0,
                "std_deviation": 0.0,
            }
        ]

    def predict(self, readings: List[Dict[str, Any]], target_time: str) -> Dict[str, Any]:
        return {"success": True, "prediction": 26.4, "target_time": target_time}

    def heatmap(self, readings, time: str, resolution: Optional[int] = None) -> Dict[str, Any]:
        self.heatmap_calls.append((time, resolution))
        return {
            "time": time,
            "resolution": resolution or 100,
            "power": 2.0,
            "min_temperature": 27.5,
            "max_temperature": 29.4,
            "sensors": [
                {"device_id": "DEVICE_001", "temperature": 27.5, "latitude": 19.12, "longitude": 72.83}
            ],
            "points": [{"latitude": 19.12, "longitude": 72.83, "value": 28.0, "color": "rgb(0, 255, 0)"}],
        }

    def close(self) -> None:
        self.closed = True


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture()
def stub(monkeypatch) -> StubClient:
    instance = StubClient(config=None)

    def factory(config):
        instance.config = config
        return instance

    monkeypatch.setattr("cli.app.ApiClient", factory)
    return instance


def test_stats_command(runner: CliRunner, stub: StubClient) -> None:
    result = runner.invoke(app, ["stats"])

    assert result.exit_code == 0
    assert "Statistics (1 records)" in result.stdout
    assert "max_value: 27.5 at 12-00-00" in result.stdout
    assert stub.sources == [("csv", False)]
    assert stub.closed is True


def test_stats_command_firebase_complete_only(runner: CliRunner, stub: StubClient) -> None:
    result = runner.invoke(app, ["--source", "firebase", "stats", "--complete-only"])

    assert result.exit_code == 0
    assert stub.sources == [("firebase", True)]


def test_unknown_source_is_rejected(runner: CliRunner, stub: StubClient) -> None:
    result = runner.invoke(app, ["--source", "ftp", "predict", "12-00-00"])

    assert result.exit_code != 0
    assert stub.sources == []


def test_predict_command(runner: CliRunner, stub: StubClient) -> None:
    result = runner.invoke(app, ["predict", "15-30-00"])

    assert result.exit_code == 0
    assert "target_time: 15-30-00" in result.stdout
    assert "prediction: 26.4" in result.stdout


def test_heatmap_command(runner: CliRunner, stub: StubClient) -> None:
    result = runner.invoke(app, ["-b", "http://analytics:9000/", "heatmap", "12-00-00", "-r", "50"])

    assert result.exit_code == 0
    assert "point_count: 1" in result.stdout
    assert "DEVICE_001: 27.5" in result.stdout
    assert stub.heatmap_calls == [("12-00-00", 50)]
    assert stub.config.base_url == "http://analytics:9000"


def test_load_config_reads_environment(monkeypatch) -> None:
    monkeypatch.setenv("API_BASE_URL", "http://env-host:8080/")
    monkeypatch.setenv("CLI_TIMEOUT", "-3")
    monkeypatch.setenv("CLI_READING_SOURCE", "FIREBASE")

    config = load_config()

    assert config == CLIConfig(base_url="http://env-host:8080", timeout=30.0, source="firebase")


def test_api_client_reports_http_errors(capsys) -> None:
    client = ApiClient(CLIConfig(base_url="http://testserver"))
    client.close()
    client._client = httpx.Client(  # type: ignore[attr-defined]
        base_url="http://testserver",
        transport=httpx.MockTransport(
            lambda request: httpx.Response(400, json={"detail": "Unable to predict temperature"})
        ),
    )

    with pytest.raises(typer.Exit):
        client.predict([], "12-00-00")

    assert "Unable to predict temperature" in capsys.readouterr().err
    client.close()

from __future__ import annotations

from typing import Any, Dict, List, Optional

import httpx
import typer

from cli.config import CLIConfig

_READING_PATHS = {"csv": "/heatmap-data", "firebase": "/sensors"}


class ApiClient:
    """Minimal HTTP client for the sensor analytics service."""

    def __init__(self, config: CLIConfig) -> None:
        self._config = config
        self._client = httpx.Client(base_url=config.base_url, timeout=config.timeout)

    def close(self) -> None:
        self._client.close()

    def get_readings(self, source: str, filter_complete: bool = False) -> List[Dict[str, Any]]:
        path = _READING_PATHS.get(source)
        if path is None:
            raise typer.BadParameter(f"Unknown reading source {source!r}.")
        params = {"filter_complete": "true"} if filter_complete and source == "firebase" else None
        payload = self._request("GET", path, params=params)
        data = payload.get("data")
        if not isinstance(data, list):
            raise typer.BadParameter("Unexpected response payload when fetching readings.")
        return data

    def get_statistics(self, readings: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        payload = self._request("POST", "/sensors/stats", json={"data": readings})
        return payload.get("statistics") or []

    def predict(self, readings: List[Dict[str, Any]], target_time: str) -> Dict[str, Any]:
        return self._request(
            "POST", "/predict", json={"data": readings, "target_time": target_time}
        )

    def heatmap(
        self,
        readings: List[Dict[str, Any]],
        time: str,
        resolution: Optional[int] = None,
    ) -> Dict[str, Any]:
        body: Dict[str, Any] = {"data": readings, "time": time}
        if resolution is not None:
            body["resolution"] = resolution
        return self._request("POST", "/heatmap", json=body)

    def _request(self, method: str, path: str, **kwargs: Any) -> Dict[str, Any]:
        try:
            response = self._client.request(method, path, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._handle_http_error(exc)
        except httpx.RequestError as exc:
            typer.secho(f"Request to {exc.request.url} failed: {exc}", fg=typer.colors.RED, err=True)
            raise typer.Exit(code=1)
        return response.json()

    @staticmethod
    def _handle_http_error(exc: httpx.HTTPStatusError) -> None:
        detail: str | None = None
        try:
            data = exc.response.json()
            detail = data.get("detail")
        except Exception:  # noqa: BLE001 - best effort parsing
            detail = exc.response.text.strip()
        message = (
            f"Request failed with status {exc.response.status_code}: {detail or 'no detail provided.'}"
        )
        typer.secho(message, fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

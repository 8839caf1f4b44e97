"""Readings fetched from the Firebase realtime database REST endpoint."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, List, Mapping, Optional

import httpx

from models.records import Reading
from services.normalizer import normalize_raw_readings
from settings import get_settings
from storage.errors import ReadingSourceError

logger = logging.getLogger(__name__)


@dataclass
class FetchResult:
    readings: List[Reading]
    raw_count: int
    # The database answered with JSON null: nothing stored under the node.
    is_null: bool = False


def count_raw_readings(raw: Any) -> int:
    if not isinstance(raw, Mapping):
        return 0
    return sum(len(device) for device in raw.values() if isinstance(device, Mapping))


class FirebaseReadingSource:

    name = "firebase"

    def __init__(
        self,
        base_url: str,
        node: str,
        client: Optional[httpx.Client] = None,
        timeout: float = 10.0,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.node = node
        self._client = client or httpx.Client(timeout=timeout)

    @property
    def url(self) -> str:
        return f"{self.base_url}/{self.node}.json"

    def close(self) -> None:
        self._client.close()

    def fetch(self) -> FetchResult:
        """Fetch and normalize every stored reading.

        An empty database (a JSON ``null`` body) yields no readings rather than
        an error.
        """
        try:
            response = self._client.get(self.url)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            logger.warning(
                "Firebase request failed", extra={"source": self.name, "status": status}
            )
            raise ReadingSourceError(
                f"Failed to fetch data from Firebase (status {status}).",
                status_code=status,
            ) from exc
        except httpx.RequestError as exc:
            logger.warning("Firebase unreachable: %s", exc, extra={"source": self.name})
            raise ReadingSourceError(f"Failed to reach Firebase: {exc}") from exc

        try:
            raw = response.json()
        except ValueError as exc:
            raise ReadingSourceError("Firebase returned an invalid JSON body.") from exc

        readings = normalize_raw_readings(raw)
        raw_count = count_raw_readings(raw)
        logger.info(
            "Fetched readings from Firebase",
            extra={"source": self.name, "record_count": len(readings)},
        )
        return FetchResult(readings=readings, raw_count=raw_count, is_null=raw is None)

    def load(self) -> List[Reading]:
        return self.fetch().readings


@lru_cache
def build_default_firebase_source() -> FirebaseReadingSource:
    settings = get_settings()
    return FirebaseReadingSource(
        base_url=settings.firebase_url,
        node=settings.firebase_node,
        timeout=settings.firebase_timeout,
    )

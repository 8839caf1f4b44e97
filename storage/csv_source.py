"""Readings stored as the transformed CSV export."""

from __future__ import annotations

import csv
import logging
from functools import lru_cache
from pathlib import Path
from typing import List, Optional, TextIO

from models.records import Reading
from services.normalizer import coerce_metric
from settings import get_settings

logger = logging.getLogger(__name__)

# ,date,time,device_id,bmp_temp_c,humidity_pct,pressure_hpa,heat_index
_COLUMN_COUNT = 8


def parse_readings(handle: TextIO) -> List[Reading]:
    """Parse a header-led CSV whose first column is a row index."""

    reader = csv.reader(handle)
    next(reader, None)

    readings: List[Reading] = []
    for row_number, row in enumerate(reader, start=2):
        if not any(cell.strip() for cell in row):
            continue
        if len(row) < _COLUMN_COUNT:
            logger.warning("Skipping row %d with %d columns", row_number, len(row))
            continue
        _, date, time, device_id, temp, humidity, pressure, heat = row[:_COLUMN_COUNT]
        readings.append(
            Reading(
                date=date.strip(),
                time=time.strip(),
                device_id=device_id.strip(),
                bmp_temp_c=coerce_metric(temp),
                humidity_pct=coerce_metric(humidity),
                pressure_hpa=coerce_metric(pressure),
                heat_index=coerce_metric(heat),
            )
        )
    return readings


class CsvReadingSource:

    name = "csv"

    def __init__(self, path: Path) -> None:
        self.path = path

    def load(self) -> List[Reading]:
        if not self.path.exists():
            raise FileNotFoundError(f"Sensor data file {str(self.path)!r} not found.")
        with self.path.open("r", encoding="utf-8", newline="") as handle:
            readings = parse_readings(handle)
        logger.info(
            "Loaded readings from CSV",
            extra={"source": self.name, "record_count": len(readings)},
        )
        return readings


@lru_cache
def build_default_csv_source(path: Optional[str] = None) -> CsvReadingSource:
    settings = get_settings()
    csv_path = settings.csv_path if path is None else path
    return CsvReadingSource(Path(csv_path or "sensor_data.csv"))

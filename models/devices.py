"""Fixed device identities and their geographic positions."""

from __future__ import annotations

from typing import Dict, Tuple

REQUIRED_DEVICES: Tuple[str, ...] = ("DEVICE_001", "DEVICE_002", "DEVICE_003")

# (latitude, longitude); polygon order follows REQUIRED_DEVICES.
SENSOR_COORDS: Dict[str, Tuple[float, float]] = {
    "DEVICE_001": (19.12472788735068, 72.83437872855019),
    "DEVICE_002": (19.124989833718722, 72.8363659669012),
    "DEVICE_003": (19.122903829356257, 72.83612121915581),
}

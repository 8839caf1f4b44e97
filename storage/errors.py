from __future__ import annotations

from typing import Optional


class ReadingSourceError(RuntimeError):
    """Raised when a reading source cannot deliver data."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code

"""
Time Adapter Interface.

Protocol-based interface for time operations.
All engine timestamps (subscription bought dates, answer grading times)
are taken from this port so tests can pin them.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Protocol


class TimePort(Protocol):
    """Time provider interface. All timestamps are UTC."""

    def now_utc(self) -> datetime:
        """Get current UTC time."""
        ...

    def today(self) -> date:
        """Get the current UTC calendar date."""
        ...

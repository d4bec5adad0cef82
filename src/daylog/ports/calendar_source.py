"""Calendar exception source interface."""

from typing import Protocol

from daylog.core.calendar import CalendarException


class CalendarSource(Protocol):
    """Interface for loading the business-day exception table."""

    def fetch(self) -> list[CalendarException]:
        """Fetch all exception records."""
        ...

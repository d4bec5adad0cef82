"""Adapters - I/O implementations of ports."""

from .csv_calendar import CsvCalendarSource, CalendarSourceError
from .file_state import FileStateStore, StateIOError

__all__ = [
    "CsvCalendarSource",
    "CalendarSourceError",
    "FileStateStore",
    "StateIOError",
]

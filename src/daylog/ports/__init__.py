"""Ports - interfaces/protocols for external dependencies."""

from .calendar_source import CalendarSource
from .state_store import StateStore

__all__ = [
    "CalendarSource",
    "StateStore",
]

"""Functional core - pure business logic with no I/O."""

from .calendar import BusinessCalendar, CalendarException, parse_calendar_csv
from .tasks import (
    CarryStub,
    DateBucket,
    Store,
    Task,
    TaskStatus,
    create_task,
    mark_carry,
    mark_done,
    on_detail_edited,
)
from .carry import carry_forward, propagate, rebuild_next
from .codec import parse, serialize
from .views import TodayView, build_today_view, format_today_view

__all__ = [
    # Calendar
    "BusinessCalendar",
    "CalendarException",
    "parse_calendar_csv",
    # Tasks
    "CarryStub",
    "DateBucket",
    "Store",
    "Task",
    "TaskStatus",
    "create_task",
    "mark_carry",
    "mark_done",
    "on_detail_edited",
    # Carry forward
    "carry_forward",
    "propagate",
    "rebuild_next",
    # Codec
    "parse",
    "serialize",
    # Views
    "TodayView",
    "build_today_view",
    "format_today_view",
]

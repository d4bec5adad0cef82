"""Pure business-day logic - no I/O dependencies."""

import csv
import io
from dataclasses import dataclass
from datetime import date, timedelta

# Scans give up once the candidate is more than this far from the start.
SCAN_LIMIT = timedelta(days=7)

DATE_HEADERS = ("date", "日付")
FLAG_HEADERS = ("business_day", "is_business_day", "稼働日")


@dataclass(frozen=True)
class CalendarException:
    """A single calendar record overriding the weekday rule."""

    date: str
    is_business_day: bool


def _as_date(value: date | str) -> date:
    if isinstance(value, date):
        return value
    return date.fromisoformat(value)


class BusinessCalendar:
    """Resolves business days against a sparse exception table."""

    def __init__(self, exceptions: list[CalendarException] | None = None):
        self._flags: dict[str, bool] = {}
        for record in exceptions or []:
            self._flags[record.date] = record.is_business_day

    def __len__(self) -> int:
        return len(self._flags)

    def is_business_day(self, day: date | str) -> bool:
        """Exception flag if recorded, otherwise Monday-Friday."""
        d = _as_date(day)
        flag = self._flags.get(d.isoformat())
        if flag is not None:
            return flag
        return d.weekday() < 5

    def next_business_day(self, day: date | str) -> str:
        """
        First business day after `day`.

        The scan is bounded: after each unsuccessful step, once the candidate
        is more than 7 days past the start it is returned as-is, even if it
        is not a business day.
        """
        start = _as_date(day)
        candidate = start
        while True:
            candidate += timedelta(days=1)
            if self.is_business_day(candidate):
                return candidate.isoformat()
            if candidate - start > SCAN_LIMIT:
                return candidate.isoformat()

    def previous_business_day(self, day: date | str) -> str:
        """Last business day before `day`, with the same 7-day bound."""
        start = _as_date(day)
        candidate = start
        while True:
            candidate -= timedelta(days=1)
            if self.is_business_day(candidate):
                return candidate.isoformat()
            if start - candidate > SCAN_LIMIT:
                return candidate.isoformat()


def _find_column(headers: list[str], names: tuple[str, ...], default: int) -> int:
    lowered = [h.strip().lower() for h in headers]
    for name in names:
        if name in lowered:
            return lowered.index(name)
    return default


def parse_calendar_csv(text: str) -> list[CalendarException]:
    """
    Parse a calendar CSV into exception records.

    The first row is a header. A row counts as a business day only when its
    flag cell is exactly "1". Rows with a missing or invalid date are skipped;
    unreadable input yields an empty list.

    Pure function - no I/O.
    """
    text = text.lstrip("\ufeff")
    try:
        rows = list(csv.reader(io.StringIO(text)))
    except csv.Error:
        return []

    if not rows:
        return []

    headers = rows[0]
    date_col = _find_column(headers, DATE_HEADERS, 0)
    flag_col = _find_column(headers, FLAG_HEADERS, 1)

    records = []
    for row in rows[1:]:
        if len(row) <= max(date_col, flag_col):
            continue
        day = row[date_col].strip()
        try:
            date.fromisoformat(day)
        except ValueError:
            continue
        records.append(CalendarException(date=day, is_business_day=row[flag_col].strip() == "1"))
    return records

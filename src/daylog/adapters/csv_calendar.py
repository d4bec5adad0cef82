"""CSV calendar source adapter - local file or HTTP."""

import logging
from pathlib import Path

import requests

from daylog.core.calendar import CalendarException, parse_calendar_csv

logger = logging.getLogger(__name__)

FETCH_TIMEOUT = 10


class CalendarSourceError(Exception):
    """Raised when the calendar CSV cannot be read."""

    pass


class CsvCalendarSource:
    """
    Business-day calendar stored as CSV.

    Implements CalendarSource protocol. `location` is a filesystem path or an
    http(s) URL. No business logic - just I/O.
    """

    def __init__(self, location: str | Path, session: requests.Session | None = None):
        self.location = str(location)
        self._session = session or requests.Session()

    @property
    def is_remote(self) -> bool:
        return self.location.startswith(("http://", "https://"))

    def _read_text(self) -> str:
        if self.is_remote:
            try:
                resp = self._session.get(self.location, timeout=FETCH_TIMEOUT)
                resp.raise_for_status()
            except requests.RequestException as e:
                raise CalendarSourceError(f"Failed to fetch calendar {self.location}: {e}") from e
            resp.encoding = resp.encoding or "utf-8"
            return resp.text

        path = Path(self.location).expanduser()
        try:
            return path.read_text(encoding="utf-8-sig")
        except (OSError, UnicodeDecodeError) as e:
            raise CalendarSourceError(f"Failed to read calendar {path}: {e}") from e

    def fetch(self) -> list[CalendarException]:
        """Fetch and parse all exception records."""
        records = parse_calendar_csv(self._read_text())
        logger.info(f"Calendar data loaded: {len(records)} records from {self.location}")
        return records

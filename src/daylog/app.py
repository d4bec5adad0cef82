"""Shared application layer between CLI and Telegram.

`TaskLogController` owns the only mutable state (the store, the current date
and the current file) and wires the pure core to the storage adapters.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .adapters.csv_calendar import CalendarSourceError, CsvCalendarSource
from .adapters.file_state import FileStateStore, StateIOError
from .config import DATA_DIR, Config
from .core.calendar import BusinessCalendar
from .core.carry import carry_forward
from .core.codec import parse, serialize
from .core.tasks import DateBucket, Store, Task, create_task, mark_carry, mark_done, on_detail_edited
from .core.views import TodayView, build_today_view
from .ports import CalendarSource, StateStore

logger = logging.getLogger(__name__)


@dataclass
class AppState:
    """Everything the controller mutates."""

    store: Store = field(default_factory=Store)
    current_date: str = field(default_factory=lambda: date.today().isoformat())
    current_path: Path | None = None


def local_today(tz_name: str, now: datetime | None = None) -> str:
    """Current date in the configured timezone, as an ISO string."""
    now = now or datetime.now(timezone.utc)
    try:
        return now.astimezone(ZoneInfo(tz_name)).date().isoformat()
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning(f"Unknown timezone {tz_name!r}, using host local time")
        return now.astimezone().date().isoformat()


def load_calendar(source: CalendarSource | None) -> BusinessCalendar:
    """Load the exception table, degrading to the weekday rule on any failure."""
    if source is None:
        return BusinessCalendar()
    try:
        return BusinessCalendar(source.fetch())
    except CalendarSourceError as e:
        logger.warning(f"Calendar unavailable, using weekday rule: {e}")
        return BusinessCalendar()


def get_calendar(config: Config) -> BusinessCalendar:
    """Build the business calendar from config."""
    location = config.calendar_location
    source = CsvCalendarSource(location)
    if not source.is_remote and not Path(location).expanduser().exists():
        logger.info(f"No calendar at {location}, using weekday rule")
        return BusinessCalendar()
    return load_calendar(source)


class TaskLogController:
    """Applies user actions to the application state."""

    def __init__(
        self,
        calendar: BusinessCalendar | None = None,
        state_store: StateStore | None = None,
        state: AppState | None = None,
        fallback_dir: Path | None = None,
    ):
        self.calendar = calendar or BusinessCalendar()
        self.state_store = state_store
        self.state = state or AppState()
        self.fallback_dir = fallback_dir or DATA_DIR
        if self.state.current_path is None and isinstance(state_store, FileStateStore):
            self.state.current_path = state_store.path

    @classmethod
    def from_config(cls, config: Config, current_date: str | None = None) -> "TaskLogController":
        state = AppState(current_date=current_date or local_today(config.timezone))
        return cls(
            calendar=get_calendar(config),
            state_store=FileStateStore(config.state_path),
            state=state,
        )

    @property
    def store(self) -> Store:
        return self.state.store

    @property
    def current_bucket(self) -> DateBucket:
        return self.store.bucket(self.state.current_date)

    def _task_at(self, index: int) -> Task:
        tasks = self.current_bucket.tasks
        if not 0 <= index < len(tasks):
            raise IndexError(f"No task #{index} on {self.state.current_date}")
        return tasks[index]

    # ============== User actions ==============

    def go_to(self, day: str) -> None:
        self.state.current_date = date.fromisoformat(day).isoformat()

    def add_task(self, title: str) -> Task | None:
        """Append a task to the current day. Blank titles are ignored."""
        task = create_task(title)
        if task is not None:
            self.current_bucket.tasks.append(task)
        return task

    def edit_detail(self, index: int, detail: str) -> Task:
        task = self._task_at(index)
        on_detail_edited(task, detail)
        return task

    def mark_done(self, index: int) -> Task:
        task = self._task_at(index)
        mark_done(task)
        return task

    def mark_carry(self, index: int) -> Task:
        task = self._task_at(index)
        mark_carry(task)
        return task

    def today_view(self) -> TodayView:
        return build_today_view(self.store, self.calendar, self.state.current_date)

    # ============== Load / save ==============

    def open(self, path: Path | str) -> None:
        """Switch to another state file and load it."""
        store = FileStateStore(path)
        self.load(store)
        self.state_store = store
        self.state.current_path = store.path

    def load(self, state_store: StateStore | None = None) -> None:
        """
        Replace the whole store with persisted state.

        On failure the StateIOError propagates and the store is unchanged.
        """
        state_store = state_store or self.state_store
        if state_store is None:
            raise StateIOError("No state file configured")
        text = state_store.read()
        self.state.store = parse(text)
        logger.info(f"Loaded {len(self.store)} day(s)")

    def prepare_save(self) -> str:
        """Run the carry-forward pass and serialize the result."""
        carry_forward(self.store, self.calendar)
        return serialize(self.store)

    @property
    def fallback_path(self) -> Path:
        return self.fallback_dir / f"tasks_{self.state.current_date}.yaml"

    def save(self) -> str:
        """Carry forward and write the store. Only explicit saves do this."""
        return self._write(self.prepare_save())

    def persist(self) -> str:
        """Write the store as-is, without carrying anything forward."""
        return self._write(serialize(self.store))

    def _write(self, content: str) -> str:
        """
        Write serialized text to the state store.

        If the write fails, the text is written to the fallback file instead
        and a StateIOError naming it is raised.
        """
        if self.state_store is None:
            raise StateIOError("No state file configured", content=content)
        try:
            self.state_store.write(content)
        except StateIOError as e:
            logger.error(f"Save failed: {e}")
            fallback = FileStateStore(self.fallback_path)
            try:
                fallback.write(content)
            except StateIOError as fallback_error:
                logger.error(f"Fallback save failed: {fallback_error}")
                raise StateIOError(f"{e}; fallback also failed", content=content) from e
            raise StateIOError(
                f"{e}; saved a copy to {fallback.path}",
                fallback_path=fallback.path,
                content=content,
            ) from e
        logger.info(f"Saved {len(self.store)} day(s)")
        return content

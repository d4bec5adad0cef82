"""Pure task domain logic - no I/O dependencies."""

from dataclasses import dataclass, field
from enum import Enum


class TaskStatus(str, Enum):
    """Lifecycle of a task within one day."""

    TODO = "todo"
    DOING = "doing"
    DONE = "done"
    CARRY = "carry"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def coerce(cls, value: str) -> "TaskStatus | str":
        """Known statuses become members; anything else is kept verbatim."""
        try:
            return cls(value)
        except ValueError:
            return value


@dataclass
class Task:
    """A task tracked on a single day."""

    title: str
    detail: str = ""
    status: TaskStatus | str = TaskStatus.TODO


@dataclass
class CarryStub:
    """A carried task stripped of its status."""

    title: str
    detail: str = ""


@dataclass
class DateBucket:
    """One day's task list plus its derived carry stubs."""

    date: str
    tasks: list[Task] = field(default_factory=list)
    next: list[CarryStub] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.tasks and not self.next


class Store:
    """All buckets keyed by ISO date. Buckets are created on first access."""

    def __init__(self, buckets: dict[str, DateBucket] | None = None):
        self._buckets: dict[str, DateBucket] = dict(buckets or {})

    def bucket(self, day: str) -> DateBucket:
        """Get the bucket for a date, creating an empty one if needed."""
        if day not in self._buckets:
            self._buckets[day] = DateBucket(date=day)
        return self._buckets[day]

    def get(self, day: str) -> DateBucket | None:
        """Get a bucket without creating it."""
        return self._buckets.get(day)

    def dates(self) -> list[str]:
        return sorted(self._buckets)

    def __iter__(self):
        for day in self.dates():
            yield self._buckets[day]

    def __contains__(self, day: str) -> bool:
        return day in self._buckets

    def __len__(self) -> int:
        return len(self._buckets)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Store):
            return NotImplemented
        return self._buckets == other._buckets

    def non_empty(self) -> "Store":
        """Copy of this store without empty buckets."""
        return Store({b.date: b for b in self if not b.is_empty})


# ============== Lifecycle ==============


def create_task(title: str) -> Task | None:
    """New todo task, or None when the title is blank."""
    if not title.strip():
        return None
    return Task(title=title)


def on_detail_edited(task: Task, detail: str) -> None:
    """Set the detail; a todo task with a non-blank detail becomes doing."""
    task.detail = detail
    if task.status == TaskStatus.TODO and detail.strip():
        task.status = TaskStatus.DOING


def mark_done(task: Task) -> None:
    if task.status == TaskStatus.DONE:
        return
    task.status = TaskStatus.DONE


def mark_carry(task: Task) -> None:
    """Carry always wins, even over done."""
    task.status = TaskStatus.CARRY

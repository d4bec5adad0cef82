"""Text format for the persisted task store.

The format looks like YAML but is produced and read by hand:

    2024-06-03:
      tasks:
        - task: Report
          detail: "first draft"
          status: carry
      next:
        - task: Report
          detail: "first draft"

The parser is a tolerant line scanner. Unrecognised lines are skipped and it
never raises, whatever the input.
"""

import re
from enum import Enum, auto

from .tasks import CarryStub, DateBucket, Store, Task, TaskStatus

EMPTY_MARKER = "    []"

_DATE_LINE = re.compile(r"^(\d{4}-\d{2}-\d{2}):")
_TASK_LINE = re.compile(r"^-\s*task:(.*)$")
_DETAIL_LINE = re.compile(r'^detail:\s*"(.*)$')
_STATUS_LINE = re.compile(r"^status:(.*)$")


# ============== Serialization ==============


def _item_lines(title: str, detail: str) -> list[str]:
    return [
        f"    - task: {title}",
        f'      detail: "{detail or ""}"',
    ]


def serialize_bucket(bucket: DateBucket) -> list[str]:
    lines = [f"{bucket.date}:", "  tasks:"]
    if not bucket.tasks:
        lines.append(EMPTY_MARKER)
    for task in bucket.tasks:
        lines.extend(_item_lines(task.title, task.detail))
        lines.append(f"      status: {task.status}")

    lines.append("  next:")
    if not bucket.next:
        lines.append(EMPTY_MARKER)
    for stub in bucket.next:
        lines.extend(_item_lines(stub.title, stub.detail))
    return lines


def serialize(store: Store) -> str:
    """
    Render the store as text, dates ascending.

    Buckets with no tasks and no carry stubs are omitted. Details are
    double-quoted without escaping.
    """
    lines: list[str] = []
    for bucket in store:
        if bucket.is_empty:
            continue
        lines.extend(serialize_bucket(bucket))
    if not lines:
        return ""
    return "\n".join(lines) + "\n"


# ============== Parsing ==============


class ParserState(Enum):
    """Where the scanner is within the document."""

    AWAITING_DATE = auto()
    IN_BUCKET = auto()
    IN_TASKS = auto()
    IN_NEXT = auto()


class StateParser:
    """Line-by-line state machine building a Store."""

    def __init__(self):
        self.store = Store()
        self.state = ParserState.AWAITING_DATE
        self.bucket: DateBucket | None = None
        self.item: Task | CarryStub | None = None

    def feed(self, raw: str) -> None:
        line = raw.strip()
        if not line or line.startswith("#"):
            return

        match = _DATE_LINE.match(line)
        if match:
            self.bucket = self.store.bucket(match.group(1))
            self.state = ParserState.IN_BUCKET
            self.item = None
            return

        if self.bucket is None:
            return

        if line == "tasks:":
            self.state = ParserState.IN_TASKS
            self.item = None
        elif line == "next:":
            self.state = ParserState.IN_NEXT
            self.item = None
        elif line == "[]":
            return
        elif match := _TASK_LINE.match(raw.lstrip()):
            # Titles are kept verbatim past the single separator space.
            title = match.group(1)
            self._start_item(title[1:] if title.startswith(" ") else title)
        elif match := _DETAIL_LINE.match(line):
            if self.item is not None:
                content = match.group(1)
                if content.endswith('"'):
                    content = content[:-1]
                self.item.detail = content.strip()
        elif match := _STATUS_LINE.match(line):
            if isinstance(self.item, Task):
                self.item.status = TaskStatus.coerce(match.group(1).strip())

    def _start_item(self, title: str) -> None:
        if self.state == ParserState.IN_TASKS:
            self.item = Task(title=title)
            self.bucket.tasks.append(self.item)
        elif self.state == ParserState.IN_NEXT:
            self.item = CarryStub(title=title)
            self.bucket.next.append(self.item)
        else:
            self.item = None


def parse(text: str) -> Store:
    """Parse persisted text into a Store. Best effort; never raises."""
    parser = StateParser()
    for raw in text.splitlines():
        parser.feed(raw)
    return parser.store

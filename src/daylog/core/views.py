"""Read-only projections of the store for display."""

from dataclasses import dataclass, field
from datetime import date

from .calendar import BusinessCalendar
from .tasks import Store, Task, TaskStatus

STATUS_MARKERS = {
    TaskStatus.TODO: " ",
    TaskStatus.DOING: "~",
    TaskStatus.DONE: "x",
    TaskStatus.CARRY: ">",
}


@dataclass
class TodayView:
    """What the Today screen shows for one date."""

    date: str
    previous_date: str
    prev: list[Task] = field(default_factory=list)
    today: list[tuple[int, Task]] = field(default_factory=list)
    has_tasks: bool = False

    @property
    def show_today(self) -> bool:
        """Show the today group if it has open tasks or the day is still blank."""
        return bool(self.today) or not self.has_tasks


def build_today_view(store: Store, calendar: BusinessCalendar, day: str) -> TodayView:
    """
    Project the store onto the Today screen.

    `prev` holds the previous business day's finished tasks; `today` holds the
    current day's unfinished tasks with their bucket index. Never creates
    buckets.
    """
    previous_date = calendar.previous_business_day(day)
    view = TodayView(date=day, previous_date=previous_date)

    prev_bucket = store.get(previous_date)
    if prev_bucket is not None:
        view.prev = [t for t in prev_bucket.tasks if t.status == TaskStatus.DONE]

    bucket = store.get(day)
    if bucket is not None:
        view.has_tasks = bool(bucket.tasks)
        view.today = [(i, t) for i, t in enumerate(bucket.tasks) if t.status != TaskStatus.DONE]
    return view


def format_task_line(index: int | None, task: Task) -> str:
    marker = STATUS_MARKERS.get(task.status, "?")
    prefix = f"{index}. " if index is not None else "- "
    line = f"{prefix}[{marker}] {task.title}"
    if task.detail:
        line += f" — {task.detail}"
    return line


def format_today_view(view: TodayView) -> str:
    """Render a TodayView as Markdown text."""
    heading = date.fromisoformat(view.date).strftime("%A, %b %d")
    lines = [f"## Today ({heading})"]

    if view.prev:
        lines.append("")
        lines.append(f"### Done on {view.previous_date}")
        lines.extend(format_task_line(None, t) for t in view.prev)

    if view.show_today:
        lines.append("")
        lines.append("### Today")
        if view.today:
            lines.extend(format_task_line(i, t) for i, t in view.today)
        else:
            lines.append("No tasks yet.")
    else:
        lines.append("")
        lines.append("All tasks done.")

    return "\n".join(lines)

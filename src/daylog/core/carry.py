"""End-of-day carry-forward - pure logic over the in-memory store."""

import logging
from datetime import date

from .calendar import BusinessCalendar
from .tasks import CarryStub, DateBucket, Store, Task, TaskStatus

logger = logging.getLogger(__name__)


def rebuild_next(bucket: DateBucket) -> None:
    """Replace the bucket's carry stubs with one per task currently in carry."""
    bucket.next = [
        CarryStub(title=t.title, detail=t.detail)
        for t in bucket.tasks
        if t.status == TaskStatus.CARRY
    ]


def propagate(store: Store, bucket: DateBucket, calendar: BusinessCalendar) -> bool:
    """
    Seed the next business day with the bucket's carry stubs.

    A target day that already has tasks is left untouched. Returns True when
    tasks were added.
    """
    if not bucket.next:
        return False

    target_date = calendar.next_business_day(bucket.date)
    existing = store.get(target_date)
    if existing is not None and existing.tasks:
        logger.debug(f"Skipping carry {bucket.date} -> {target_date}: target already has tasks")
        return False

    target = store.bucket(target_date)
    for stub in bucket.next:
        target.tasks.append(Task(title=stub.title, detail=stub.detail, status=TaskStatus.TODO))
    logger.debug(f"Carried {len(bucket.next)} task(s) {bucket.date} -> {target_date}")
    return True


def carry_forward(store: Store, calendar: BusinessCalendar) -> None:
    """
    Rebuild every bucket's carry stubs and propagate them, oldest date first.

    Only buckets present when the pass starts are processed. Running the pass
    again does not re-seed a target that the previous pass already filled.
    """
    for day in store.dates():
        bucket = store.bucket(day)
        rebuild_next(bucket)
        try:
            date.fromisoformat(day)
        except ValueError:
            logger.debug(f"Not propagating bucket with invalid date key {day!r}")
            continue
        propagate(store, bucket, calendar)

"""Schedule view: jobs with an active reminder, ordered by deadline.

Filters:
- event type: all, or one ``ReminderEvent``
- urgency: all, urgent (0-3 days), week (0-7 days), overdue (< 0 days),
  or archived (archived jobs regardless of reminder)
"""

from __future__ import annotations

import logging
import math
from datetime import datetime, timezone
from enum import Enum
from typing import Iterable, Optional

from jobtracker.models import JobRecord, ReminderEvent

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 24 * 60 * 60
URGENT_DAYS = 3
WEEK_DAYS = 7


class EventTypeFilter(str, Enum):
    ALL = "all"
    TO_APPLY = "to_apply"
    WRITTEN_TEST = "written_test"
    INTERVIEW = "interview"
    TO_OFFER = "to_offer"


class UrgencyFilter(str, Enum):
    ALL = "all"
    URGENT = "urgent"
    WEEK = "week"
    OVERDUE = "overdue"
    ARCHIVED = "archived"


# ── Date Parsing ────────────────────────────────────────────────────────────


def parse_deadline(value: Optional[str]) -> Optional[datetime]:
    """Parse a deadline string into an aware datetime.

    Handles ISO 8601 dates and datetimes (with or without ``Z``) plus a few
    common day formats. Returns None if the value cannot be parsed.
    """
    if not value:
        return None

    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        parsed = None

    if parsed is None:
        for fmt in ["%Y/%m/%d", "%Y.%m.%d", "%Y年%m月%d日", "%b %d, %Y", "%B %d, %Y", "%m/%d/%Y"]:
            try:
                parsed = datetime.strptime(text, fmt)
                break
            except ValueError:
                continue

    if parsed is None:
        logger.debug("Could not parse deadline: %r", value)
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def days_until(deadline: Optional[str], now: Optional[datetime] = None) -> Optional[int]:
    """Whole days from ``now`` to the deadline, rounded up; None if unknown."""
    parsed = parse_deadline(deadline)
    if parsed is None:
        return None
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return math.ceil((parsed - now).total_seconds() / SECONDS_PER_DAY)


# ── Filters ─────────────────────────────────────────────────────────────────


def _matches_urgency(days: int, urgency: UrgencyFilter) -> bool:
    if urgency is UrgencyFilter.URGENT:
        return 0 <= days <= URGENT_DAYS
    if urgency is UrgencyFilter.WEEK:
        return 0 <= days <= WEEK_DAYS
    if urgency is UrgencyFilter.OVERDUE:
        return days < 0
    return True


def _matches_event(job: JobRecord, event_filter: EventTypeFilter) -> bool:
    if event_filter is EventTypeFilter.ALL:
        return True
    return job.reminder_event is ReminderEvent(event_filter.value)


def schedule_jobs(
    jobs: Iterable[JobRecord],
    event_filter: EventTypeFilter = EventTypeFilter.ALL,
    urgency_filter: UrgencyFilter = UrgencyFilter.ALL,
    now: Optional[datetime] = None,
) -> list[JobRecord]:
    """Jobs for the schedule view, soonest deadline first."""
    jobs = list(jobs)
    if urgency_filter is UrgencyFilter.ARCHIVED:
        return [job for job in jobs if job.is_archived]

    dated: list[tuple[datetime, JobRecord]] = []
    for job in jobs:
        if not job.in_schedule or not _matches_event(job, event_filter):
            continue
        deadline = parse_deadline(job.position.deadline)
        if deadline is None:
            continue
        if not _matches_urgency(days_until(job.position.deadline, now), urgency_filter):
            continue
        dated.append((deadline, job))

    dated.sort(key=lambda pair: pair[0])
    return [job for _, job in dated]


def urgency_counts(jobs: Iterable[JobRecord], now: Optional[datetime] = None) -> dict[str, int]:
    """Badge counts per urgency bucket for the filter bar."""
    jobs = list(jobs)
    counts = {
        bucket.value: len(schedule_jobs(jobs, urgency_filter=bucket, now=now))
        for bucket in UrgencyFilter
    }
    return counts

"""Tests for the schedule view filters."""

from datetime import datetime, timezone

from conftest import make_job
from jobtracker.models import Position, ReminderEvent
from jobtracker.schedule import (
    EventTypeFilter,
    UrgencyFilter,
    days_until,
    parse_deadline,
    schedule_jobs,
    urgency_counts,
)

NOW = datetime(2026, 3, 1, tzinfo=timezone.utc)


def _reminder_job(job_id, deadline, event=ReminderEvent.TO_APPLY, **changes):
    return make_job(
        job_id,
        position=Position(title=job_id, deadline=deadline),
        has_reminder=True,
        reminder_event=event,
        **changes,
    )


def _jobs():
    return [
        _reminder_job("week", "2026-03-06", ReminderEvent.INTERVIEW),
        _reminder_job("urgent", "2026-03-03"),
        _reminder_job("overdue", "2026-02-27", ReminderEvent.TO_OFFER),
        _reminder_job("later", "2026-04-01", ReminderEvent.WRITTEN_TEST),
        _reminder_job("archived", "2026-03-02", is_archived=True),
        make_job("no-reminder", position=Position(deadline="2026-03-02")),
    ]


def test_parse_deadline_formats():
    assert parse_deadline("2026-03-06") == datetime(2026, 3, 6, tzinfo=timezone.utc)
    assert parse_deadline("2026-03-06T12:00:00Z").hour == 12
    assert parse_deadline("2026/03/06").day == 6
    assert parse_deadline("2026年3月6日").month == 3
    assert parse_deadline("soon") is None
    assert parse_deadline(None) is None


def test_days_until_rounds_up():
    assert days_until("2026-03-03", NOW) == 2
    assert days_until("2026-03-01T06:00:00+00:00", NOW) == 1
    assert days_until("2026-02-28", NOW) == -1
    assert days_until(None, NOW) is None


def test_schedule_is_sorted_and_excludes_unscheduled():
    ids = [j.id for j in schedule_jobs(_jobs(), now=NOW)]
    assert ids == ["overdue", "urgent", "week", "later"]


def test_urgency_filters():
    jobs = _jobs()

    def by(urgency):
        return [j.id for j in schedule_jobs(jobs, urgency_filter=urgency, now=NOW)]

    assert by(UrgencyFilter.URGENT) == ["urgent"]
    assert by(UrgencyFilter.WEEK) == ["urgent", "week"]
    assert by(UrgencyFilter.OVERDUE) == ["overdue"]
    assert by(UrgencyFilter.ARCHIVED) == ["archived"]


def test_event_filter():
    jobs = schedule_jobs(_jobs(), event_filter=EventTypeFilter.INTERVIEW, now=NOW)
    assert [j.id for j in jobs] == ["week"]


def test_urgency_counts():
    counts = urgency_counts(_jobs(), now=NOW)
    assert counts == {"all": 4, "urgent": 1, "week": 2, "overdue": 1, "archived": 1}

"""Tests for the notification queue."""

from conftest import FakeTimer
from jobtracker.models import NotificationAction, Severity
from jobtracker.notifications import NotificationQueue


def test_enqueue_schedules_removal(queue):
    notification = queue.enqueue("已保存", Severity.SUCCESS)

    assert queue.items == [notification]
    timer = FakeTimer.instances[-1]
    assert timer.interval == 3.0
    assert timer.daemon
    assert timer.started

    timer.fire()
    assert len(queue) == 0


def test_zero_duration_stays_until_dismissed(queue):
    notification = queue.enqueue("请确认", duration=0)

    assert FakeTimer.instances == []
    assert notification.duration == 0
    assert queue.dismiss(notification.id)
    assert len(queue) == 0


def test_dismiss_cancels_timer(queue):
    notification = queue.enqueue("hello", duration=5)
    timer = FakeTimer.instances[-1]

    assert queue.dismiss(notification.id)
    assert timer.cancelled
    assert not queue.dismiss(notification.id)


def test_custom_default_duration():
    queue = NotificationQueue(default_duration=1.5, timer_factory=FakeTimer)
    queue.enqueue("x")
    assert FakeTimer.instances[-1].interval == 1.5


def test_action_is_kept(queue):
    clicked = []
    action = NotificationAction(label="去查看", callback=lambda: clicked.append(True))

    notification = queue.enqueue("已添加", Severity.SUCCESS, action=action)
    notification.action.callback()

    assert clicked == [True]


def test_clear_cancels_everything(queue):
    queue.enqueue("a")
    queue.enqueue("b")
    queue.clear()

    assert len(queue) == 0
    assert all(timer.cancelled for timer in FakeTimer.instances)

"""Application state: folders, jobs, chat sessions, notifications, UI flags.

``AppStore`` is constructed explicitly and handed to whoever needs it;
tests build independent instances. Every mutation runs synchronously and
then notifies subscribed listeners (persistence, front ends).

Invariants kept by the store:
- every folder's ``job_count`` equals its live count of non-archived jobs
- at least one folder exists once any folder does; the last one cannot
  be deleted
- reminder, reminder event and deadline are cleared together
- deleting the active chat session clears the live transcript

Operations on ids that do not exist are no-ops returning False.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, fields, replace
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Iterable, Optional

from jobtracker.models import (
    AIAnalysis,
    ChatMessage,
    ChatSession,
    Company,
    Folder,
    FolderColor,
    JobRecord,
    JobStatus,
    MessageAuthor,
    Notification,
    NotificationAction,
    Position,
    ReminderEvent,
    Severity,
    User,
    coerce_enum,
    new_id,
    now_ms,
)
from jobtracker.notifications import NotificationQueue
from jobtracker.schedule import EventTypeFilter, UrgencyFilter, schedule_jobs

logger = logging.getLogger(__name__)

DEFAULT_SESSION_TITLE = "新对话"
SESSION_TITLE_LENGTH = 20

Listener = Callable[["AppStore"], Any]


class Tab(str, Enum):
    BOOKMARK = "bookmark"
    AI = "ai"
    SCHEDULE = "schedule"


@dataclass
class UIState:
    """Transient presentation flags; never persisted."""

    active_tab: Tab = Tab.BOOKMARK
    folder_modal_open: bool = False
    path_picker_open: bool = False
    detail_drawer_open: bool = False
    login_modal_open: bool = False
    settings_modal_open: bool = False


def _truncate(text: str, limit: int = SESSION_TITLE_LENGTH) -> str:
    text = " ".join((text or "").split())
    return text if len(text) <= limit else text[:limit] + "…"


def _first_user_text(messages: Iterable[ChatMessage]) -> str:
    for message in messages:
        if message.author is MessageAuthor.USER and message.content.strip():
            return message.content
    return ""


def derive_session_title(messages: list[ChatMessage]) -> str:
    """Title from the first parsed job, else the first user message."""
    for message in messages:
        job = message.parsed_job
        if job is not None:
            label = f"{job.company.name} {job.position.title}".strip()
            if label:
                return _truncate(label)
    first = _first_user_text(messages)
    return _truncate(first) if first else DEFAULT_SESSION_TITLE


# Fields whose patch values may arrive as plain dicts or strings
_NESTED_FIELDS: dict[str, Callable[[Any], Any]] = {
    "company": Company.from_dict,
    "position": Position.from_dict,
    "ai_analysis": AIAnalysis.from_dict,
}
_PATCHABLE_FIELDS = {f.name for f in fields(JobRecord)} - {"id"}


class AppStore:
    def __init__(
        self,
        folders: Optional[Iterable[Folder]] = None,
        jobs: Optional[Iterable[JobRecord]] = None,
        *,
        notifications: Optional[NotificationQueue] = None,
    ):
        self.folders: list[Folder] = list(folders or [])
        self.jobs: list[JobRecord] = list(jobs or [])
        self.selected_folder_id: Optional[str] = self.folders[0].id if self.folders else None
        self.selected_job_id: Optional[str] = None

        self.messages: list[ChatMessage] = []
        self.sessions: list[ChatSession] = []
        self.current_session_id: Optional[str] = None
        self.pending_job: Optional[JobRecord] = None

        self.user: Optional[User] = None
        self.event_type_filter = EventTypeFilter.ALL
        self.urgency_filter = UrgencyFilter.ALL
        self.ui = UIState()
        self.notifications = notifications or NotificationQueue()

        self._listeners: list[Listener] = []
        self._recount()

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener(store)`` after every mutation; returns an unsubscribe."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _changed(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception as exc:
                logger.error("Store listener %r failed: %s", listener, exc)

    # ------------------------------------------------------------------
    # Folders
    # ------------------------------------------------------------------

    def get_folder(self, folder_id: str) -> Optional[Folder]:
        return next((f for f in self.folders if f.id == folder_id), None)

    def add_folder(self, name: str, color: FolderColor | str = FolderColor.BLUE) -> Folder:
        folder = Folder(
            id=new_id("folder"),
            name=name.strip(),
            color=coerce_enum(FolderColor, color, FolderColor.BLUE),
            job_count=0,
        )
        self.folders.append(folder)
        if self.selected_folder_id is None:
            self.selected_folder_id = folder.id
        logger.info("Added folder %s (%s)", folder.name, folder.id)
        self._changed()
        return folder

    def delete_folder(self, folder_id: str) -> bool:
        """Delete a folder, moving its jobs into the first remaining folder.

        Refused for the last remaining folder.
        """
        if self.get_folder(folder_id) is None:
            logger.debug("delete_folder: no folder %s", folder_id)
            return False
        if len(self.folders) == 1:
            logger.warning("Refusing to delete the last folder %s", folder_id)
            return False

        self.folders = [f for f in self.folders if f.id != folder_id]
        target = self.folders[0]
        moved = 0
        for index, job in enumerate(self.jobs):
            if job.folder_id == folder_id:
                self.jobs[index] = replace(job, folder_id=target.id)
                moved += 1

        if self.selected_folder_id == folder_id:
            self.selected_folder_id = target.id
        self._recount()
        logger.info("Deleted folder %s, moved %d jobs to %s", folder_id, moved, target.id)
        self._changed()
        return True

    def rename_folder(self, folder_id: str, name: str) -> bool:
        folder = self.get_folder(folder_id)
        if folder is None:
            logger.debug("rename_folder: no folder %s", folder_id)
            return False
        folder.name = name.strip()
        self._changed()
        return True

    def select_folder(self, folder_id: Optional[str]) -> None:
        self.selected_folder_id = folder_id
        self._changed()

    def folder_job_count(self, folder_id: str) -> int:
        """Live count of non-archived jobs in a folder."""
        return sum(1 for j in self.jobs if j.folder_id == folder_id and not j.is_archived)

    def _recount(self) -> None:
        counts = Counter(j.folder_id for j in self.jobs if not j.is_archived)
        for folder in self.folders:
            folder.job_count = counts.get(folder.id, 0)

    # ------------------------------------------------------------------
    # Jobs
    # ------------------------------------------------------------------

    def get_job(self, job_id: str) -> Optional[JobRecord]:
        return next((j for j in self.jobs if j.id == job_id), None)

    def _index_of(self, job_id: str) -> Optional[int]:
        for index, job in enumerate(self.jobs):
            if job.id == job_id:
                return index
        return None

    def _replace_job(self, job_id: str, **changes: Any) -> bool:
        index = self._index_of(job_id)
        if index is None:
            logger.debug("No job %s, ignoring update", job_id)
            return False
        self.jobs[index] = replace(self.jobs[index], **changes)
        self._recount()
        self._changed()
        return True

    def add_job(self, job: JobRecord) -> JobRecord:
        self.jobs.append(job)
        self._recount()
        logger.info("Added job %r", job)
        self._changed()
        return job

    def update_job(self, job_id: str, patch: dict[str, Any]) -> bool:
        """Shallow-merge top-level fields into a job.

        Nested values (company, position, ai_analysis) replace the whole
        sub-record. Unknown field names are ignored.
        """
        changes: dict[str, Any] = {}
        for key, value in patch.items():
            if key not in _PATCHABLE_FIELDS:
                logger.warning("update_job: ignoring unknown field %r", key)
                continue
            if key in _NESTED_FIELDS and isinstance(value, dict):
                value = _NESTED_FIELDS[key](value)
            elif key == "reminder_event" and value is not None:
                value = coerce_enum(ReminderEvent, value, None)
            changes[key] = value
        return self._replace_job(job_id, **changes)

    def update_job_status(self, job_id: str, status: JobStatus | str) -> bool:
        job = self.get_job(job_id)
        if job is None:
            logger.debug("update_job_status: no job %s", job_id)
            return False
        status = coerce_enum(JobStatus, status, job.position.status)
        return self._replace_job(job_id, position=replace(job.position, status=status))

    def move_job_to_folder(self, job_id: str, folder_id: str) -> bool:
        if self.get_folder(folder_id) is None:
            logger.debug("move_job_to_folder: no folder %s", folder_id)
            return False
        return self._replace_job(job_id, folder_id=folder_id)

    def archive_job(self, job_id: str) -> bool:
        return self._replace_job(job_id, is_archived=True)

    def delete_job(self, job_id: str) -> bool:
        index = self._index_of(job_id)
        if index is None:
            logger.debug("delete_job: no job %s", job_id)
            return False
        del self.jobs[index]
        if self.selected_job_id == job_id:
            self.selected_job_id = None
        self._recount()
        logger.info("Deleted job %s", job_id)
        self._changed()
        return True

    def set_reminder(
        self,
        job_id: str,
        deadline: str,
        event: ReminderEvent | str = ReminderEvent.TO_APPLY,
    ) -> bool:
        job = self.get_job(job_id)
        if job is None:
            logger.debug("set_reminder: no job %s", job_id)
            return False
        return self._replace_job(
            job_id,
            has_reminder=True,
            reminder_event=coerce_enum(ReminderEvent, event, ReminderEvent.TO_APPLY),
            position=replace(job.position, deadline=deadline),
        )

    def clear_reminder(self, job_id: str) -> bool:
        """Drop the reminder, its event and the deadline in one step."""
        job = self.get_job(job_id)
        if job is None:
            logger.debug("clear_reminder: no job %s", job_id)
            return False
        return self._replace_job(
            job_id,
            has_reminder=False,
            reminder_event=None,
            position=replace(job.position, deadline=None),
        )

    def select_job(self, job_id: Optional[str]) -> None:
        self.selected_job_id = job_id
        self._changed()

    # ------------------------------------------------------------------
    # Selectors
    # ------------------------------------------------------------------

    def filtered_jobs(self) -> list[JobRecord]:
        """Jobs in the selected folder, or all jobs when none is selected."""
        if not self.selected_folder_id:
            return list(self.jobs)
        return [j for j in self.jobs if j.folder_id == self.selected_folder_id]

    def selected_job(self) -> Optional[JobRecord]:
        if not self.selected_job_id:
            return None
        return self.get_job(self.selected_job_id)

    def schedule_jobs(self, now: Optional[datetime] = None) -> list[JobRecord]:
        return schedule_jobs(self.jobs, self.event_type_filter, self.urgency_filter, now)

    def set_schedule_filters(
        self,
        event_type: EventTypeFilter | str | None = None,
        urgency: UrgencyFilter | str | None = None,
    ) -> None:
        if event_type is not None:
            self.event_type_filter = coerce_enum(EventTypeFilter, event_type, EventTypeFilter.ALL)
        if urgency is not None:
            self.urgency_filter = coerce_enum(UrgencyFilter, urgency, UrgencyFilter.ALL)
        self._changed()

    # ------------------------------------------------------------------
    # Chat transcript and sessions
    # ------------------------------------------------------------------

    def get_session(self, session_id: str) -> Optional[ChatSession]:
        return next((s for s in self.sessions if s.id == session_id), None)

    def _start_session(self) -> ChatSession:
        session = ChatSession(id=new_id("session"), title=DEFAULT_SESSION_TITLE, messages=[])
        self.sessions.insert(0, session)
        self.current_session_id = session.id
        return session

    def _sync_current_session(self) -> None:
        """Mirror the live transcript into the active session."""
        session = self.get_session(self.current_session_id) if self.current_session_id else None
        if session is None:
            return
        session.messages = list(self.messages)
        session.updated_at = now_ms()
        auto_titles = {"", DEFAULT_SESSION_TITLE, _truncate(_first_user_text(session.messages))}
        if session.title in auto_titles:
            session.title = derive_session_title(session.messages)

    def add_message(self, message: ChatMessage) -> ChatMessage:
        """Append to the live transcript; starts a session if none is active."""
        if self.current_session_id is None or self.get_session(self.current_session_id) is None:
            self._start_session()
        self.messages.append(message)
        self._sync_current_session()
        self._changed()
        return message

    def hide_message(self, message_id: str) -> bool:
        for index, message in enumerate(self.messages):
            if message.id == message_id:
                self.messages[index] = replace(message, hidden=True)
                self._sync_current_session()
                self._changed()
                return True
        logger.debug("hide_message: no message %s", message_id)
        return False

    def visible_messages(self) -> list[ChatMessage]:
        return [m for m in self.messages if not m.hidden]

    def clear_messages(self) -> None:
        """Detach from the active session and start with an empty transcript."""
        self.messages = []
        self.current_session_id = None
        self.pending_job = None
        self._changed()

    def new_session(self) -> ChatSession:
        """Flush the current transcript into its session and start a fresh one."""
        self._sync_current_session()
        self.messages = []
        self.pending_job = None
        session = self._start_session()
        logger.debug("Started chat session %s", session.id)
        self._changed()
        return session

    def load_session(self, session_id: str) -> bool:
        session = self.get_session(session_id)
        if session is None:
            logger.debug("load_session: no session %s", session_id)
            return False
        self._sync_current_session()
        self.current_session_id = session.id
        self.messages = list(session.messages)
        self.pending_job = None
        self._changed()
        return True

    def update_session(self, session_id: str, title: str) -> bool:
        session = self.get_session(session_id)
        if session is None:
            logger.debug("update_session: no session %s", session_id)
            return False
        session.title = title.strip()
        session.updated_at = now_ms()
        self._changed()
        return True

    def delete_session(self, session_id: str) -> bool:
        if self.get_session(session_id) is None:
            logger.debug("delete_session: no session %s", session_id)
            return False
        self.sessions = [s for s in self.sessions if s.id != session_id]
        if self.current_session_id == session_id:
            self.current_session_id = None
            self.messages = []
            self.pending_job = None
        self._changed()
        return True

    def set_pending_job(self, job: Optional[JobRecord]) -> None:
        self.pending_job = job
        self._changed()

    # ------------------------------------------------------------------
    # Notifications, user and UI flags
    # ------------------------------------------------------------------

    def notify(
        self,
        message: str,
        severity: Severity | str = Severity.INFO,
        action: Optional[NotificationAction] = None,
        duration: Optional[float] = None,
    ) -> Notification:
        severity = coerce_enum(Severity, severity, Severity.INFO)
        return self.notifications.enqueue(message, severity, action, duration)

    def dismiss(self, notification_id: str) -> bool:
        return self.notifications.dismiss(notification_id)

    def set_user(self, user: Optional[User]) -> None:
        self.user = user
        self._changed()

    def set_active_tab(self, tab: Tab | str) -> None:
        self.ui.active_tab = coerce_enum(Tab, tab, Tab.BOOKMARK)

    def set_ui(self, **flags: bool) -> None:
        for name, value in flags.items():
            if not hasattr(self.ui, name) or name == "active_tab":
                raise ValueError(f"Unknown UI flag: {name}")
            setattr(self.ui, name, bool(value))

    # ------------------------------------------------------------------
    # Persisted subset
    # ------------------------------------------------------------------

    def snapshot(self) -> dict:
        """The part of the state that survives restarts, as plain data."""
        return {
            "folders": [f.to_dict() for f in self.folders],
            "jobs": [j.to_dict() for j in self.jobs],
            "chat_sessions": [s.to_dict() for s in self.sessions],
            "current_session_id": self.current_session_id,
            "messages": [m.to_dict() for m in self.messages],
            "user": self.user.to_dict() if self.user else None,
        }

    def restore(self, data: dict) -> None:
        """Replace the persisted subset from a snapshot."""
        self.folders = [Folder.from_dict(f) for f in data.get("folders") or []]
        self.jobs = [JobRecord.from_dict(j) for j in data.get("jobs") or []]
        self.sessions = [ChatSession.from_dict(s) for s in data.get("chat_sessions") or []]
        self.messages = [ChatMessage.from_dict(m) for m in data.get("messages") or []]
        session_id = data.get("current_session_id")
        self.current_session_id = session_id if self.get_session(session_id or "") else None
        user = data.get("user")
        self.user = User.from_dict(user) if isinstance(user, dict) else None

        if self.get_folder(self.selected_folder_id or "") is None:
            self.selected_folder_id = self.folders[0].id if self.folders else None
        self.selected_job_id = None
        self.pending_job = None
        self._recount()
        self._changed()

    @classmethod
    def from_snapshot(cls, data: dict, **kwargs: Any) -> AppStore:
        store = cls(**kwargs)
        store.restore(data)
        return store

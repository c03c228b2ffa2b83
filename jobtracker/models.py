"""Data models for the job tracker."""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional


class CompanyType(str, Enum):
    """Broad employer category shown on a job card."""

    INTERNET = "internet"
    STATE_OWNED = "state_owned"
    FOREIGN = "foreign"
    FINANCE = "finance"
    OTHER = "other"


# Labels the model is prompted to answer with
COMPANY_TYPE_LABELS: dict[str, CompanyType] = {
    "互联网": CompanyType.INTERNET,
    "国企": CompanyType.STATE_OWNED,
    "外企": CompanyType.FOREIGN,
    "金融": CompanyType.FINANCE,
    "其他": CompanyType.OTHER,
}


class JobStatus(str, Enum):
    NEW = "new"
    IN_PROGRESS = "in_progress"
    OFFER = "offer"
    REJECTED = "rejected"


class ReminderEvent(str, Enum):
    """Which application stage a reminder deadline refers to."""

    TO_APPLY = "to_apply"
    WRITTEN_TEST = "written_test"
    INTERVIEW = "interview"
    TO_OFFER = "to_offer"


class FolderColor(str, Enum):
    MINT = "mint"
    PEACH = "peach"
    BLUE = "blue"
    LAVENDER = "lavender"
    CORAL = "coral"


class MessageAuthor(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class Severity(str, Enum):
    SUCCESS = "success"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


def new_id(prefix: str) -> str:
    """A short random id such as ``job-3f2a9c0d41be``."""
    return f"{prefix}-{uuid.uuid4().hex[:12]}"


def now_ms() -> int:
    return int(time.time() * 1000)


def coerce_enum(enum_cls: type[Enum], value: Any, default: Enum) -> Any:
    """Map a raw value (enum member, value string or label) onto ``enum_cls``."""
    if isinstance(value, enum_cls):
        return value
    if value is None:
        return default
    text = str(value).strip()
    if enum_cls is CompanyType and text in COMPANY_TYPE_LABELS:
        return COMPANY_TYPE_LABELS[text]
    normalized = text.lower().replace("-", "_").replace(" ", "_")
    for member in enum_cls:
        if normalized in (member.value, member.name.lower()):
            return member
    return default


def _str(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return "\n".join(_str_list(value))
    return str(value).strip()


def _str_list(value: Any) -> list[str]:
    if isinstance(value, str):
        return [value.strip()] if value.strip() else []
    if not isinstance(value, (list, tuple)):
        return []
    return [str(item).strip() for item in value if item is not None and str(item).strip()]


def _optional_str(value: Any) -> Optional[str]:
    text = _str(value)
    return text or None


def _mapping(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


# ── Job records ────────────────────────────────────────────────────────────


@dataclass
class Company:
    name: str = ""
    type: CompanyType = CompanyType.OTHER

    def to_dict(self) -> dict:
        return {"name": self.name, "type": self.type.value}

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> Company:
        data = _mapping(data)
        return cls(
            name=_str(data.get("name")),
            type=coerce_enum(CompanyType, data.get("type"), CompanyType.OTHER),
        )


@dataclass
class Position:
    title: str = ""
    salary: str = ""
    location: str = ""
    status: JobStatus = JobStatus.NEW
    education: str = ""
    experience: str = ""
    deadline: Optional[str] = None  # ISO date or datetime

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "salary": self.salary,
            "location": self.location,
            "status": self.status.value,
            "education": self.education,
            "experience": self.experience,
            "deadline": self.deadline,
        }

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> Position:
        data = _mapping(data)
        return cls(
            title=_str(data.get("title")),
            salary=_str(data.get("salary")),
            location=_str(data.get("location")),
            status=coerce_enum(JobStatus, data.get("status"), JobStatus.NEW),
            education=_str(data.get("education")),
            experience=_str(data.get("experience")),
            deadline=_optional_str(data.get("deadline")),
        )


@dataclass
class Suggestions:
    resume: str = ""
    interview: str = ""
    negotiation: str = ""

    def to_dict(self) -> dict:
        return {
            "resume": self.resume,
            "interview": self.interview,
            "negotiation": self.negotiation,
        }

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> Suggestions:
        if isinstance(data, (list, tuple)):
            data = "\n\n".join(_str_list(data))
        if isinstance(data, str):
            # A bare text answer is kept as the resume advice
            return cls(resume=data.strip())
        data = _mapping(data)
        return cls(
            resume=_str(data.get("resume")),
            interview=_str(data.get("interview")),
            negotiation=_str(data.get("negotiation")),
        )


@dataclass
class AIAnalysis:
    responsibilities: list[str] = field(default_factory=list)
    requirements: list[str] = field(default_factory=list)
    suggestions: Suggestions = field(default_factory=Suggestions)

    def to_dict(self) -> dict:
        return {
            "responsibilities": list(self.responsibilities),
            "requirements": list(self.requirements),
            "suggestions": self.suggestions.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> AIAnalysis:
        data = _mapping(data)
        return cls(
            responsibilities=_str_list(data.get("responsibilities")),
            requirements=_str_list(data.get("requirements")),
            suggestions=Suggestions.from_dict(data.get("suggestions")),
        )


@dataclass
class JobRecord:
    """One tracked job posting.

    A record with ``has_reminder`` set and a ``position.deadline`` shows up
    in the schedule view. The store clears reminder, event and deadline
    together, so a record never carries a countdown without a reminder.
    """

    id: str
    folder_id: str = ""
    company: Company = field(default_factory=Company)
    position: Position = field(default_factory=Position)
    ai_analysis: AIAnalysis = field(default_factory=AIAnalysis)
    created_at: int = field(default_factory=now_ms)
    apply_link: Optional[str] = None
    schedule_link: Optional[str] = None
    has_reminder: bool = False
    reminder_event: Optional[ReminderEvent] = None
    is_archived: bool = False

    @property
    def in_schedule(self) -> bool:
        return self.has_reminder and bool(self.position.deadline) and not self.is_archived

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "folder_id": self.folder_id,
            "company": self.company.to_dict(),
            "position": self.position.to_dict(),
            "ai_analysis": self.ai_analysis.to_dict(),
            "created_at": self.created_at,
            "apply_link": self.apply_link,
            "schedule_link": self.schedule_link,
            "has_reminder": self.has_reminder,
            "reminder_event": self.reminder_event.value if self.reminder_event else None,
            "is_archived": self.is_archived,
        }

    @classmethod
    def from_dict(cls, data: dict) -> JobRecord:
        event = data.get("reminder_event")
        return cls(
            id=_str(data.get("id")) or new_id("job"),
            folder_id=_str(data.get("folder_id")),
            company=Company.from_dict(data.get("company")),
            position=Position.from_dict(data.get("position")),
            ai_analysis=AIAnalysis.from_dict(data.get("ai_analysis")),
            created_at=int(data.get("created_at") or now_ms()),
            apply_link=_optional_str(data.get("apply_link")),
            schedule_link=_optional_str(data.get("schedule_link")),
            has_reminder=bool(data.get("has_reminder", False)),
            reminder_event=coerce_enum(ReminderEvent, event, None) if event else None,
            is_archived=bool(data.get("is_archived", False)),
        )

    def __repr__(self) -> str:
        return (
            f"JobRecord(id={self.id!r}, company={self.company.name!r}, "
            f"title={self.position.title!r}, folder_id={self.folder_id!r})"
        )


@dataclass
class Folder:
    """A user-defined bucket of jobs.

    ``job_count`` is a cached view of the live count of non-archived jobs
    pointing at this folder; the store rewrites it after every mutation.
    """

    id: str
    name: str
    color: FolderColor = FolderColor.BLUE
    job_count: int = 0

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "color": self.color.value,
            "job_count": self.job_count,
        }

    @classmethod
    def from_dict(cls, data: dict) -> Folder:
        return cls(
            id=_str(data.get("id")) or new_id("folder"),
            name=_str(data.get("name")),
            color=coerce_enum(FolderColor, data.get("color"), FolderColor.BLUE),
            job_count=int(data.get("job_count") or 0),
        )


# ── Chat ───────────────────────────────────────────────────────────────────


@dataclass
class ChatMessage:
    id: str
    author: MessageAuthor
    content: str = ""
    image: Optional[str] = None  # data URL
    parsed_job: Optional[JobRecord] = None
    hidden: bool = False
    timestamp: int = field(default_factory=now_ms)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "author": self.author.value,
            "content": self.content,
            "image": self.image,
            "parsed_job": self.parsed_job.to_dict() if self.parsed_job else None,
            "hidden": self.hidden,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: dict) -> ChatMessage:
        parsed = data.get("parsed_job")
        return cls(
            id=_str(data.get("id")) or new_id("msg"),
            author=coerce_enum(MessageAuthor, data.get("author"), MessageAuthor.USER),
            content=data.get("content") or "",
            image=data.get("image") or None,
            parsed_job=JobRecord.from_dict(parsed) if isinstance(parsed, dict) else None,
            hidden=bool(data.get("hidden", False)),
            timestamp=int(data.get("timestamp") or now_ms()),
        )


@dataclass
class ChatSession:
    id: str
    title: str = ""
    messages: list[ChatMessage] = field(default_factory=list)
    updated_at: int = field(default_factory=now_ms)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "messages": [m.to_dict() for m in self.messages],
            "updated_at": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> ChatSession:
        return cls(
            id=_str(data.get("id")) or new_id("session"),
            title=_str(data.get("title")),
            messages=[ChatMessage.from_dict(m) for m in data.get("messages") or []],
            updated_at=int(data.get("updated_at") or now_ms()),
        )


# ── Notifications & users ──────────────────────────────────────────────────


@dataclass
class NotificationAction:
    label: str
    callback: Callable[[], Any]


@dataclass
class Notification:
    id: str
    message: str
    severity: Severity = Severity.INFO
    action: Optional[NotificationAction] = None
    duration: float = 3.0  # seconds; 0 keeps it until dismissed


@dataclass
class User:
    id: str
    nickname: str
    email: str = ""
    avatar: Optional[str] = None
    created_at: int = field(default_factory=now_ms)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "nickname": self.nickname,
            "email": self.email,
            "avatar": self.avatar,
            "created_at": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> User:
        return cls(
            id=_str(data.get("id")) or new_id("user"),
            nickname=_str(data.get("nickname")),
            email=_str(data.get("email")),
            avatar=_optional_str(data.get("avatar")),
            created_at=int(data.get("created_at") or now_ms()),
        )

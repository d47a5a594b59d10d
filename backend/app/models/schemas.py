"""Request/response schemas — the validation layer for every API payload.

Commands (CreateTask, UpdateCategory, ...) validate untyped JSON bodies,
TaskQuery validates list filters from the query string, and the *Out models
shape what handlers return inside the {"data": ...} envelope.
"""

from __future__ import annotations

import re
from datetime import date, datetime, timezone
from typing import Annotated, Generic, Literal, TypeVar

from app.models.task import TaskPriority, TaskStatus
from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict, Field, field_validator

_UUID_RE = re.compile(r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$")
HEX_COLOR_RE = re.compile(r"^#([A-Fa-f0-9]{6}|[A-Fa-f0-9]{3})$")
_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
_ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

TITLE_MAX = 255
DESCRIPTION_MAX = 5000
CATEGORY_NAME_MAX = 100
PASSWORD_MIN = 6

TaskSort = Literal["due_date", "created_at", "priority"]
SortOrder = Literal["asc", "desc"]
SuggestionType = Literal["description", "priority", "improve"]


def _check_uuid(value: str) -> str:
    if not _UUID_RE.match(value):
        raise ValueError("Invalid uuid")
    return value


def _check_hex_color(value: str) -> str:
    if not HEX_COLOR_RE.match(value):
        raise ValueError("Invalid hex color")
    return value


def _check_email(value: str) -> str:
    if not _EMAIL_RE.match(value):
        raise ValueError("Invalid email address")
    return value


def _check_iso_date(value):
    # Calendar dates only, written YYYY-MM-DD; no timestamps or epoch numbers
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    if not isinstance(value, str) or not _ISO_DATE_RE.match(value):
        raise ValueError("Invalid date")
    return value


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything is stored in UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


UuidStr = Annotated[str, AfterValidator(_check_uuid)]
HexColor = Annotated[str, AfterValidator(_check_hex_color)]
EmailStr = Annotated[str, AfterValidator(_check_email)]
UtcDatetime = Annotated[datetime, AfterValidator(_as_utc)]
IsoDate = Annotated[date, BeforeValidator(_check_iso_date)]

Title = Annotated[str, Field(min_length=1, max_length=TITLE_MAX)]
Description = Annotated[str, Field(max_length=DESCRIPTION_MAX)]
CategoryName = Annotated[str, Field(min_length=1, max_length=CATEGORY_NAME_MAX)]


# === Task commands ===


class CreateTask(BaseModel):
    title: Title
    description: Description | None = None
    status: TaskStatus = "todo"
    priority: TaskPriority = "medium"
    due_date: IsoDate | None = None
    category_id: UuidStr | None = None


class UpdateTask(BaseModel):
    """Partial update. Only fields present in the payload are applied.

    description, due_date and category_id accept an explicit null to clear
    them; title, status and priority do not.
    """

    title: Title | None = None
    description: Description | None = None
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    due_date: IsoDate | None = None
    category_id: UuidStr | None = None

    @field_validator("title", "status", "priority", mode="before")
    @classmethod
    def _not_null(cls, value):
        if value is None:
            raise ValueError("may not be null")
        return value

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


class TaskQuery(BaseModel):
    """Filters and ordering for GET /api/tasks."""

    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    category_id: UuidStr | None = None
    sort: TaskSort | None = None
    order: SortOrder = "desc"


# === Category commands ===


class CreateCategory(BaseModel):
    name: CategoryName
    color: HexColor | None = None


class UpdateCategory(BaseModel):
    name: CategoryName | None = None
    color: HexColor | None = None

    @field_validator("name", mode="before")
    @classmethod
    def _not_null(cls, value):
        if value is None:
            raise ValueError("may not be null")
        return value

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


# === Auth commands ===


class LoginRequest(BaseModel):
    email: EmailStr
    password: str

    @field_validator("password")
    @classmethod
    def _required(cls, value: str) -> str:
        if not value:
            raise ValueError("Password is required")
        return value


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str

    @field_validator("password")
    @classmethod
    def _long_enough(cls, value: str) -> str:
        if len(value) < PASSWORD_MIN:
            raise ValueError(f"Password must be at least {PASSWORD_MIN} characters")
        return value


class ForgotPasswordRequest(BaseModel):
    email: EmailStr


class ResetPasswordRequest(BaseModel):
    password: str
    access_token: str | None = None  # Recovery token carried by the emailed link

    @field_validator("password")
    @classmethod
    def _long_enough(cls, value: str) -> str:
        if len(value) < PASSWORD_MIN:
            raise ValueError(f"Password must be at least {PASSWORD_MIN} characters")
        return value


# === AI commands ===


class SuggestRequest(BaseModel):
    type: SuggestionType
    title: Title
    description: Description | None = None
    due_date: IsoDate | None = None


# === Responses ===


class TaskOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    description: str | None = None
    status: TaskStatus
    priority: TaskPriority
    due_date: date | None = None
    category_id: str | None = None
    completed_at: UtcDatetime | None = None
    created_at: UtcDatetime
    updated_at: UtcDatetime


class CategoryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    color: str | None = None
    created_at: UtcDatetime
    updated_at: UtcDatetime


class SuggestionOut(BaseModel):
    suggestion: str
    type: SuggestionType


class DateRange(BaseModel):
    start: UtcDatetime
    end: UtcDatetime


class WeeklySummaryOut(BaseModel):
    summary: str
    task_count: int = Field(serialization_alias="taskCount")
    date_range: DateRange = Field(serialization_alias="dateRange")


class MessageOut(BaseModel):
    message: str


# === Envelope ===

T = TypeVar("T")


class Envelope(BaseModel, Generic[T]):
    """Success shape: {"data": T}."""

    data: T


class ErrorDetail(BaseModel):
    message: str
    code: str


class ErrorEnvelope(BaseModel):
    """Failure shape: {"error": {"message", "code"}}."""

    error: ErrorDetail

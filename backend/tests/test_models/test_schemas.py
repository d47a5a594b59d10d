"""Tests for request/response schemas (validation layer)."""

from datetime import date, datetime, timezone

import pytest
from app.api.errors import first_error_message
from app.models.schemas import (
    CategoryOut,
    CreateCategory,
    CreateTask,
    DateRange,
    LoginRequest,
    RegisterRequest,
    ResetPasswordRequest,
    SuggestRequest,
    TaskQuery,
    UpdateCategory,
    UpdateTask,
    WeeklySummaryOut,
)
from pydantic import ValidationError

CATEGORY_ID = "6f1c2b9e-3d4a-4e5f-8a7b-1c2d3e4f5a6b"


def _message(model, payload) -> str:
    with pytest.raises(ValidationError) as exc_info:
        model.model_validate(payload)
    return first_error_message(exc_info.value.errors())


# === CreateTask ===


class TestCreateTask:

    def test_defaults_status_and_priority(self):
        task = CreateTask.model_validate({"title": "Write report"})
        assert task.status == "todo"
        assert task.priority == "medium"
        assert task.description is None
        assert task.due_date is None
        assert task.category_id is None

    def test_full_payload(self):
        task = CreateTask.model_validate({
            "title": "Write report",
            "description": "Quarterly numbers",
            "status": "in_progress",
            "priority": "high",
            "due_date": "2025-03-01",
            "category_id": CATEGORY_ID,
        })
        assert task.due_date == date(2025, 3, 1)
        assert task.category_id == CATEGORY_ID

    @pytest.mark.parametrize("title", ["", "a" * 256])
    def test_title_length_out_of_range(self, title):
        with pytest.raises(ValidationError):
            CreateTask.model_validate({"title": title})

    @pytest.mark.parametrize("title", ["a", "a" * 255])
    def test_title_length_boundaries_accepted(self, title):
        assert CreateTask.model_validate({"title": title}).title == title

    def test_missing_title_message(self):
        assert _message(CreateTask, {}) == "title: Field required"

    def test_description_too_long(self):
        with pytest.raises(ValidationError):
            CreateTask.model_validate({"title": "t", "description": "x" * 5001})

    def test_invalid_status(self):
        message = _message(CreateTask, {"title": "t", "status": "archived"})
        assert message.startswith("status:")

    def test_invalid_category_uuid(self):
        assert _message(CreateTask, {"title": "t", "category_id": "not-a-uuid"}) == "category_id: Invalid uuid"

    def test_invalid_due_date(self):
        with pytest.raises(ValidationError):
            CreateTask.model_validate({"title": "t", "due_date": "next tuesday"})

    @pytest.mark.parametrize("value", [0, 1717200000, "2025-06-01T00:00:00", "2025-6-1", "20250601"])
    def test_due_date_must_be_calendar_date_string(self, value):
        assert _message(CreateTask, {"title": "t", "due_date": value}) == "due_date: Invalid date"

    def test_due_date_rejects_impossible_day(self):
        with pytest.raises(ValidationError):
            CreateTask.model_validate({"title": "t", "due_date": "2025-02-30"})

    def test_due_date_strictness_applies_to_updates_and_suggestions(self):
        assert _message(UpdateTask, {"due_date": "2025-06-01T09:30:00"}) == "due_date: Invalid date"
        assert _message(SuggestRequest, {"type": "priority", "title": "t", "due_date": 0}) == "due_date: Invalid date"


    def test_unknown_keys_ignored(self):
        task = CreateTask.model_validate({"title": "t", "user_id": "someone-else"})
        assert "user_id" not in task.model_dump()


# === UpdateTask ===


class TestUpdateTask:

    def test_only_supplied_fields_in_changes(self):
        update = UpdateTask.model_validate({"priority": "low"})
        assert update.changes() == {"priority": "low"}

    def test_explicit_null_clears_nullable_fields(self):
        update = UpdateTask.model_validate({"description": None, "due_date": None, "category_id": None})
        assert update.changes() == {"description": None, "due_date": None, "category_id": None}

    @pytest.mark.parametrize("field", ["title", "status", "priority"])
    def test_null_rejected_for_required_fields(self, field):
        assert _message(UpdateTask, {field: None}) == f"{field}: may not be null"

    def test_empty_title_rejected(self):
        with pytest.raises(ValidationError):
            UpdateTask.model_validate({"title": ""})

    def test_empty_payload_is_valid(self):
        assert UpdateTask.model_validate({}).changes() == {}


# === TaskQuery ===


class TestTaskQuery:

    def test_order_defaults_to_desc(self):
        query = TaskQuery.model_validate({})
        assert query.order == "desc"
        assert query.sort is None

    @pytest.mark.parametrize("sort", ["due_date", "created_at", "priority"])
    def test_allowed_sorts(self, sort):
        assert TaskQuery.model_validate({"sort": sort}).sort == sort

    @pytest.mark.parametrize("sort", ["title", "updated_at", "random"])
    def test_rejects_unknown_sort(self, sort):
        with pytest.raises(ValidationError):
            TaskQuery.model_validate({"sort": sort})

    def test_rejects_unknown_order(self):
        with pytest.raises(ValidationError):
            TaskQuery.model_validate({"order": "sideways"})

    def test_filters(self):
        query = TaskQuery.model_validate({"status": "done", "priority": "high", "category_id": CATEGORY_ID})
        assert (query.status, query.priority, query.category_id) == ("done", "high", CATEGORY_ID)


# === Categories ===


class TestCategorySchemas:

    @pytest.mark.parametrize("color", ["red", "#gggggg", "123456", "#12345", "#1234567"])
    def test_invalid_colors(self, color):
        assert _message(CreateCategory, {"name": "Work", "color": color}) == "color: Invalid hex color"

    @pytest.mark.parametrize("color", ["#fff", "#FFFFFF", "#123abc"])
    def test_valid_colors(self, color):
        assert CreateCategory.model_validate({"name": "Work", "color": color}).color == color

    def test_color_optional(self):
        assert CreateCategory.model_validate({"name": "Work"}).color is None

    @pytest.mark.parametrize("name", ["", "n" * 101])
    def test_name_length(self, name):
        with pytest.raises(ValidationError):
            CreateCategory.model_validate({"name": name})

    def test_update_color_nullable(self):
        assert UpdateCategory.model_validate({"color": None}).changes() == {"color": None}

    def test_update_name_not_nullable(self):
        assert _message(UpdateCategory, {"name": None}) == "name: may not be null"


# === Auth / AI commands ===


class TestAuthSchemas:

    def test_login_invalid_email(self):
        assert _message(LoginRequest, {"email": "nope", "password": "x"}) == "email: Invalid email address"

    def test_login_requires_password(self):
        assert _message(LoginRequest, {"email": "a@b.co", "password": ""}) == "password: Password is required"

    def test_register_short_password(self):
        message = _message(RegisterRequest, {"email": "a@b.co", "password": "12345"})
        assert message == "password: Password must be at least 6 characters"

    def test_reset_password_accepts_recovery_token(self):
        req = ResetPasswordRequest.model_validate({"password": "123456", "access_token": "recovery"})
        assert req.access_token == "recovery"


def test_suggest_request_type_enum():
    with pytest.raises(ValidationError):
        SuggestRequest.model_validate({"type": "poem", "title": "t"})
    assert SuggestRequest.model_validate({"type": "improve", "title": "t"}).description is None


# === Responses ===


def test_naive_datetimes_serialized_as_utc():
    naive = datetime(2025, 1, 2, 3, 4, 5)
    out = CategoryOut(id="c1", name="Work", created_at=naive, updated_at=naive)
    assert out.created_at.tzinfo == timezone.utc
    assert out.model_dump(mode="json")["created_at"].endswith("Z")


def test_weekly_summary_uses_wire_aliases():
    now = datetime.now(timezone.utc)
    out = WeeklySummaryOut(summary="s", task_count=2, date_range=DateRange(start=now, end=now))
    dumped = out.model_dump(by_alias=True)
    assert dumped["taskCount"] == 2
    assert set(dumped["dateRange"]) == {"start", "end"}

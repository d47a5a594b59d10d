"""Tests for the Task API endpoints."""

BOB_ID = "22222222-2222-4222-8222-222222222222"


def _create(client, **fields) -> dict:
    payload = {"title": "Task"} | fields
    resp = client.post("/api/tasks", json=payload)
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]


def _titles(resp) -> list[str]:
    assert resp.status_code == 200, resp.text
    return [t["title"] for t in resp.json()["data"]]


# === Create / read ===


def test_create_task_defaults(alice):
    task = _create(alice, title="Write report")
    assert task["title"] == "Write report"
    assert task["status"] == "todo"
    assert task["priority"] == "medium"
    assert task["description"] is None
    assert task["completed_at"] is None
    assert task["id"]


def test_create_task_ignores_client_supplied_owner(alice, bob):
    task = _create(alice, title="Mine", user_id=BOB_ID)
    assert bob.get(f"/api/tasks/{task['id']}").status_code == 404
    assert alice.get(f"/api/tasks/{task['id']}").status_code == 200


def test_create_done_task_is_stamped(alice):
    task = _create(alice, status="done")
    assert task["completed_at"] is not None


def test_create_requires_title(alice):
    resp = alice.post("/api/tasks", json={"description": "no title"})
    assert resp.status_code == 400
    assert resp.json() == {"error": {"message": "title: Field required", "code": "VALIDATION_ERROR"}}


def test_create_title_too_long(alice):
    resp = alice.post("/api/tasks", json={"title": "x" * 256})
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "VALIDATION_ERROR"


def test_create_invalid_json(alice):
    resp = alice.post("/api/tasks", content=b"{not json", headers={"Content-Type": "application/json"})
    assert resp.status_code == 400
    assert resp.json()["error"] == {"message": "Invalid JSON body", "code": "VALIDATION_ERROR"}


def test_create_without_body(alice):
    resp = alice.post("/api/tasks")
    assert resp.status_code == 400
    assert resp.json()["error"]["message"] == "Invalid JSON body"


def test_get_task(alice):
    task = _create(alice, title="Lookup")
    resp = alice.get(f"/api/tasks/{task['id']}")
    assert resp.status_code == 200
    assert resp.json()["data"]["title"] == "Lookup"


def test_get_missing_task(alice):
    resp = alice.get("/api/tasks/00000000-0000-4000-8000-000000000000")
    assert resp.status_code == 404
    assert resp.json()["error"] == {"message": "Task not found", "code": "NOT_FOUND"}


# === Ownership isolation ===


class TestOwnership:

    def test_other_users_task_is_not_found(self, alice, bob):
        task = _create(alice, title="Private")
        for method in ("get", "delete"):
            resp = getattr(bob, method)(f"/api/tasks/{task['id']}")
            assert resp.status_code == 404
            assert resp.json()["error"]["code"] == "NOT_FOUND"
        resp = bob.put(f"/api/tasks/{task['id']}", json={"title": "Hijacked"})
        assert resp.status_code == 404
        assert alice.get(f"/api/tasks/{task['id']}").json()["data"]["title"] == "Private"

    def test_list_only_returns_own_tasks(self, alice, bob):
        _create(alice, title="A1")
        _create(alice, title="A2")
        _create(bob, title="B1")
        assert sorted(_titles(alice.get("/api/tasks"))) == ["A1", "A2"]
        assert _titles(bob.get("/api/tasks")) == ["B1"]

    def test_x_user_id_header_is_ignored(self, alice, bob):
        _create(alice, title="A1")
        resp = bob.get("/api/tasks", headers={"x-user-id": "11111111-1111-4111-8111-111111111111"})
        assert _titles(resp) == []

    def test_cannot_attach_foreign_category(self, alice, bob):
        category = bob.post("/api/categories", json={"name": "Bob's"}).json()["data"]
        resp = alice.post("/api/tasks", json={"title": "t", "category_id": category["id"]})
        assert resp.status_code == 400
        assert resp.json()["error"] == {"message": "Category not found", "code": "VALIDATION_ERROR"}


# === Update ===


class TestUpdate:

    def test_partial_update_keeps_other_fields(self, alice):
        task = _create(alice, title="Original", description="keep me", priority="high")
        resp = alice.put(f"/api/tasks/{task['id']}", json={"title": "Renamed"})
        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["title"] == "Renamed"
        assert data["description"] == "keep me"
        assert data["priority"] == "high"

    def test_explicit_null_clears_description(self, alice):
        task = _create(alice, description="temporary", due_date="2025-06-01")
        data = alice.put(f"/api/tasks/{task['id']}", json={"description": None, "due_date": None}).json()["data"]
        assert data["description"] is None
        assert data["due_date"] is None

    def test_null_title_rejected(self, alice):
        task = _create(alice)
        resp = alice.put(f"/api/tasks/{task['id']}", json={"title": None})
        assert resp.status_code == 400
        assert resp.json()["error"]["message"] == "title: may not be null"

    def test_updated_at_refreshed(self, alice):
        task = _create(alice)
        data = alice.put(f"/api/tasks/{task['id']}", json={"priority": "low"}).json()["data"]
        assert data["updated_at"] >= task["updated_at"]
        assert data["created_at"] == task["created_at"]

    def test_completed_at_follows_status(self, alice):
        task = _create(alice)
        url = f"/api/tasks/{task['id']}"

        done = alice.put(url, json={"status": "done"}).json()["data"]
        assert done["completed_at"] is not None

        renamed = alice.put(url, json={"title": "Still done"}).json()["data"]
        assert renamed["completed_at"] == done["completed_at"]

        reopened = alice.put(url, json={"status": "in_progress"}).json()["data"]
        assert reopened["completed_at"] is None

    def test_invalid_status_rejected(self, alice):
        task = _create(alice)
        resp = alice.put(f"/api/tasks/{task['id']}", json={"status": "archived"})
        assert resp.status_code == 400


# === Delete ===


def test_delete_task(alice):
    task = _create(alice)
    resp = alice.delete(f"/api/tasks/{task['id']}")
    assert resp.status_code == 204
    assert resp.content == b""
    assert alice.get(f"/api/tasks/{task['id']}").status_code == 404
    assert alice.delete(f"/api/tasks/{task['id']}").status_code == 404


# === Filters and sorting ===


class TestListQuery:

    def test_default_order_newest_first(self, alice):
        for title in ("first", "second", "third"):
            _create(alice, title=title)
        assert _titles(alice.get("/api/tasks")) == ["third", "second", "first"]

    def test_created_at_ascending(self, alice):
        for title in ("first", "second", "third"):
            _create(alice, title=title)
        assert _titles(alice.get("/api/tasks?sort=created_at&order=asc")) == ["first", "second", "third"]

    def test_filter_by_status_and_priority(self, alice):
        _create(alice, title="a", status="done", priority="high")
        _create(alice, title="b", status="done", priority="low")
        _create(alice, title="c", status="todo", priority="high")
        assert _titles(alice.get("/api/tasks?status=done&priority=high")) == ["a"]

    def test_filter_by_category(self, alice):
        category = alice.post("/api/categories", json={"name": "Work"}).json()["data"]
        _create(alice, title="work", category_id=category["id"])
        _create(alice, title="home")
        assert _titles(alice.get(f"/api/tasks?category_id={category['id']}")) == ["work"]

    def test_priority_sorts_by_rank(self, alice):
        _create(alice, title="m", priority="medium")
        _create(alice, title="h", priority="high")
        _create(alice, title="l", priority="low")
        assert _titles(alice.get("/api/tasks?sort=priority&order=desc")) == ["h", "m", "l"]
        assert _titles(alice.get("/api/tasks?sort=priority&order=asc")) == ["l", "m", "h"]

    def test_due_date_nulls_last(self, alice):
        _create(alice, title="none")
        _create(alice, title="late", due_date="2025-12-31")
        _create(alice, title="early", due_date="2025-01-15")
        assert _titles(alice.get("/api/tasks?sort=due_date&order=asc")) == ["early", "late", "none"]
        assert _titles(alice.get("/api/tasks?sort=due_date&order=desc")) == ["late", "early", "none"]

    def test_empty_params_are_ignored(self, alice):
        _create(alice, title="a")
        assert _titles(alice.get("/api/tasks?status=&sort=&order=")) == ["a"]

    def test_invalid_sort_rejected(self, alice):
        resp = alice.get("/api/tasks?sort=title")
        assert resp.status_code == 400
        assert resp.json()["error"]["code"] == "VALIDATION_ERROR"
        assert resp.json()["error"]["message"].startswith("sort:")

    def test_invalid_category_filter_rejected(self, alice):
        resp = alice.get("/api/tasks?category_id=not-a-uuid")
        assert resp.status_code == 400
        assert resp.json()["error"]["message"] == "category_id: Invalid uuid"


def test_due_date_timestamp_rejected(alice):
    resp = alice.post("/api/tasks", json={"title": "t", "due_date": "2025-06-01T00:00:00"})
    assert resp.status_code == 400
    assert resp.json()["error"] == {"message": "due_date: Invalid date", "code": "VALIDATION_ERROR"}

"""Task API endpoints — CRUD over the caller's tasks.

GET    /api/tasks — list (filters: status, priority, category_id; sort, order)
POST   /api/tasks — create
GET    /api/tasks/{id} — single task
PUT    /api/tasks/{id} — partial update
DELETE /api/tasks/{id} — delete
"""

from __future__ import annotations

import logging

from app.api.deps import get_current_user, get_task_query, get_task_repository
from app.auth.provider import AuthUser
from app.models.schemas import CreateTask, Envelope, TaskOut, TaskQuery, UpdateTask
from app.models.task import utcnow
from app.repositories.tasks import TaskRepository
from fastapi import APIRouter, Depends, Response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/tasks", tags=["tasks"])


def apply_completion_stamp(changes: dict) -> dict:
    """Stamp completed_at when status moves to done, clear it for any other status."""
    if "status" not in changes:
        return changes
    if changes["status"] == "done":
        changes["completed_at"] = utcnow()
    else:
        changes["completed_at"] = None
    return changes


@router.get("", response_model=Envelope[list[TaskOut]])
async def list_tasks(
    query: TaskQuery = Depends(get_task_query),
    user: AuthUser = Depends(get_current_user),
    repo: TaskRepository = Depends(get_task_repository),
):
    tasks = repo.list(user.id, query)
    return Envelope(data=[TaskOut.model_validate(t) for t in tasks])


@router.post("", response_model=Envelope[TaskOut], status_code=201)
async def create_task(
    payload: CreateTask,
    user: AuthUser = Depends(get_current_user),
    repo: TaskRepository = Depends(get_task_repository),
):
    data = payload.model_dump()
    if data["status"] == "done":
        data["completed_at"] = utcnow()
    task = repo.create(user.id, data)
    logger.info("Task %s created", task.id)
    return Envelope(data=TaskOut.model_validate(task))


@router.get("/{task_id}", response_model=Envelope[TaskOut])
async def get_task(
    task_id: str,
    user: AuthUser = Depends(get_current_user),
    repo: TaskRepository = Depends(get_task_repository),
):
    return Envelope(data=TaskOut.model_validate(repo.get(user.id, task_id)))


@router.put("/{task_id}", response_model=Envelope[TaskOut])
async def update_task(
    task_id: str,
    payload: UpdateTask,
    user: AuthUser = Depends(get_current_user),
    repo: TaskRepository = Depends(get_task_repository),
):
    changes = apply_completion_stamp(payload.changes())
    task = repo.update(user.id, task_id, changes)
    return Envelope(data=TaskOut.model_validate(task))


@router.delete("/{task_id}", status_code=204)
async def delete_task(
    task_id: str,
    user: AuthUser = Depends(get_current_user),
    repo: TaskRepository = Depends(get_task_repository),
) -> Response:
    repo.delete(user.id, task_id)
    return Response(status_code=204)

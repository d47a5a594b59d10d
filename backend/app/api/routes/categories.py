"""Category API endpoints — CRUD over the caller's categories.

Identity comes from the session only; an x-user-id header is ignored.
"""

from __future__ import annotations

from app.api.deps import get_category_repository, get_current_user
from app.auth.provider import AuthUser
from app.models.schemas import CategoryOut, CreateCategory, Envelope, UpdateCategory
from app.repositories.categories import CategoryRepository
from fastapi import APIRouter, Depends, Response

router = APIRouter(prefix="/api/categories", tags=["categories"])


@router.get("", response_model=Envelope[list[CategoryOut]])
async def list_categories(
    user: AuthUser = Depends(get_current_user),
    repo: CategoryRepository = Depends(get_category_repository),
):
    return Envelope(data=[CategoryOut.model_validate(c) for c in repo.list(user.id)])


@router.post("", response_model=Envelope[CategoryOut], status_code=201)
async def create_category(
    payload: CreateCategory,
    user: AuthUser = Depends(get_current_user),
    repo: CategoryRepository = Depends(get_category_repository),
):
    category = repo.create(user.id, payload.model_dump())
    return Envelope(data=CategoryOut.model_validate(category))


@router.get("/{category_id}", response_model=Envelope[CategoryOut])
async def get_category(
    category_id: str,
    user: AuthUser = Depends(get_current_user),
    repo: CategoryRepository = Depends(get_category_repository),
):
    return Envelope(data=CategoryOut.model_validate(repo.get(user.id, category_id)))


@router.put("/{category_id}", response_model=Envelope[CategoryOut])
async def update_category(
    category_id: str,
    payload: UpdateCategory,
    user: AuthUser = Depends(get_current_user),
    repo: CategoryRepository = Depends(get_category_repository),
):
    category = repo.update(user.id, category_id, payload.changes())
    return Envelope(data=CategoryOut.model_validate(category))


@router.delete("/{category_id}", status_code=204)
async def delete_category(
    category_id: str,
    user: AuthUser = Depends(get_current_user),
    repo: CategoryRepository = Depends(get_category_repository),
) -> Response:
    repo.delete(user.id, category_id)
    return Response(status_code=204)

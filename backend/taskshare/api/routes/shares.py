"""Share Routes — owner-only management of a task's share list."""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from taskshare.api.dependencies import get_current_user
from taskshare.api.routes.tasks import task_response
from taskshare.core.domain_types import Role, TaskId
from taskshare.infrastructure.database import get_db
from taskshare.models.user import User
from taskshare.schemas.task import ShareCreate, ShareUpdate, TaskResponse
from taskshare.services.sharing_service import SharingService

router = APIRouter(prefix="/api/v1/tasks/{task_id}/shares", tags=["shares"])


@router.post(
    "", response_model=TaskResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_share(
    task_id: UUID,
    body: ShareCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    task = await SharingService(db).add_share(user, TaskId(task_id), body.email, body.role)
    return task_response(task, Role.OWNER)


@router.patch("/{target}", response_model=TaskResponse)
async def change_role(
    task_id: UUID,
    target: str,
    body: ShareUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    task = await SharingService(db).change_role(user, TaskId(task_id), target, body.role)
    return task_response(task, Role.OWNER)


@router.delete("/{target}", response_model=TaskResponse)
async def revoke_share(
    task_id: UUID,
    target: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    task = await SharingService(db).revoke_share(user, TaskId(task_id), target)
    return task_response(task, Role.OWNER)

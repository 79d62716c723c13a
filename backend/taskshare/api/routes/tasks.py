"""Task Routes — CRUD over tasks the caller owns or is shared on."""

from uuid import UUID

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from taskshare.api.dependencies import get_current_user
from taskshare.core.access_control import capabilities_of
from taskshare.core.domain_types import Capability, Role, TaskId
from taskshare.infrastructure.database import get_db
from taskshare.models.task import Task
from taskshare.models.user import User
from taskshare.schemas.task import (
    ShareEntryResponse, TaskCreate, TaskListResponse, TaskResponse, TaskUpdate,
)
from taskshare.services.task_service import TaskService

router = APIRouter(prefix="/api/v1/tasks", tags=["tasks"])


def task_response(task: Task, role: Role) -> TaskResponse:
    """Shape a task for one caller. Share list is visible to share managers only."""
    caps = capabilities_of(role)
    shares = None
    if Capability.MANAGE_SHARES in caps:
        shares = [
            ShareEntryResponse(identity=s.identity, role=s.role)
            for s in sorted(task.shares, key=lambda s: s.identity)
        ]
    return TaskResponse(
        id=task.id,
        title=task.title,
        completed=task.completed,
        owner=task.owner,
        role=role.value,
        capabilities=sorted(c.value for c in caps),
        shares=shares,
        created_at=task.created_at,
        updated_at=task.updated_at,
    )


@router.post(
    "", response_model=TaskResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_task(
    body: TaskCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    task = await TaskService(db).create_task(user, body.title)
    return task_response(task, Role.OWNER)


@router.get("", response_model=TaskListResponse)
async def list_tasks(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    visible = await TaskService(db).list_tasks(user)
    return TaskListResponse(tasks=[task_response(t, r) for t, r in visible])


@router.get("/{task_id}", response_model=TaskResponse)
async def get_task(
    task_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    task, role = await TaskService(db).get_task(user, TaskId(task_id))
    return task_response(task, role)


@router.patch("/{task_id}", response_model=TaskResponse)
async def update_task(
    task_id: UUID,
    body: TaskUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    task, role = await TaskService(db).update_task(
        user, TaskId(task_id), title=body.title, completed=body.completed,
    )
    return task_response(task, role)


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task(
    task_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await TaskService(db).delete_task(user, TaskId(task_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)

"""Task Service — create, list, read, edit and delete tasks behind the access table.

Invariants:
    - Every operation on an existing task calls require_capability before touching it
    - A missing task is ResourceNotFoundError; an existing task the actor has no
      role on is ForbiddenError
    - owner is written once, at creation, from the actor's identity
    - Title/completion edits are last-write-wins (no version check)
"""

import logging

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from taskshare.core.access_control import require_capability, role_of
from taskshare.core.domain_types import Capability, Role, TaskId
from taskshare.core.errors import InvalidInputError, ResourceNotFoundError
from taskshare.models.task import Task, TaskShare
from taskshare.models.user import User
from taskshare.services.entitlement_gate import EntitlementGate

logger = logging.getLogger(__name__)

MAX_TITLE_LENGTH = 500


def _clean_title(title: str) -> str:
    cleaned = title.strip()
    if not cleaned:
        raise InvalidInputError("Title cannot be empty", "title")
    if len(cleaned) > MAX_TITLE_LENGTH:
        raise InvalidInputError(
            f"Title cannot exceed {MAX_TITLE_LENGTH} characters", "title",
        )
    return cleaned


async def load_task(db: AsyncSession, task_id: TaskId) -> Task:
    """Fetch a task with its shares or raise ResourceNotFoundError."""
    result = await db.execute(select(Task).where(Task.id == task_id))
    task = result.scalar_one_or_none()
    if task is None:
        raise ResourceNotFoundError("Task", str(task_id))
    return task


class TaskService:

    def __init__(self, db: AsyncSession):
        self.db = db
        self.gate = EntitlementGate(db)

    async def create_task(self, actor: User, title: str) -> Task:
        cleaned = _clean_title(title)
        await self.gate.check_create_quota(actor)
        task = Task(title=cleaned, owner=actor.email, completed=False, shares=[])
        self.db.add(task)
        await self.db.commit()
        logger.info("Task created", extra={"actor": actor.email, "task_id": str(task.id)})
        return task

    async def list_tasks(self, actor: User) -> list[tuple[Task, Role]]:
        """Tasks the actor owns or has a share entry on, with the actor's role."""
        shared_ids = select(TaskShare.task_id).where(TaskShare.identity == actor.email)
        result = await self.db.execute(
            select(Task)
            .where(or_(Task.owner == actor.email, Task.id.in_(shared_ids)))
            .order_by(Task.created_at),
        )
        return [(task, role_of(task, actor.email)) for task in result.scalars().all()]

    async def get_task(self, actor: User, task_id: TaskId) -> tuple[Task, Role]:
        task = await load_task(self.db, task_id)
        role = require_capability(task, actor.email, Capability.READ)
        return task, role

    async def update_task(
        self,
        actor: User,
        task_id: TaskId,
        title: str | None = None,
        completed: bool | None = None,
    ) -> tuple[Task, Role]:
        if title is None and completed is None:
            raise InvalidInputError("Nothing to update", "body")
        task = await load_task(self.db, task_id)
        role = require_capability(task, actor.email, Capability.EDIT)

        if title is not None:
            task.title = _clean_title(title)
        if completed is not None:
            task.completed = completed
        await self.db.commit()

        logger.info(
            "Task updated",
            extra={"actor": actor.email, "task_id": str(task_id), "role": role.value},
        )
        return task, role

    async def delete_task(self, actor: User, task_id: TaskId) -> None:
        task = await load_task(self.db, task_id)
        require_capability(task, actor.email, Capability.DELETE)
        await self.db.delete(task)
        await self.db.commit()
        logger.info("Task deleted", extra={"actor": actor.email, "task_id": str(task_id)})

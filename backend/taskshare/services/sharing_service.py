"""Sharing Service — owner-only mutation of a task's share list.

Invariants:
    - Order of checks: task exists → actor holds MANAGE_SHARES → core sharing
      rules → plan allows the requested role → persist
    - The owner column is never written here
    - A concurrent duplicate insert that slips past the in-memory check is
      caught by uq_task_share_identity and reported as DuplicateShareError
    - Each call commits exactly once
"""

import logging
from typing import Callable

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from taskshare.core import sharing
from taskshare.core.access_control import require_capability
from taskshare.core.domain_types import Capability, TaskId
from taskshare.core.errors import DuplicateShareError
from taskshare.core.identity import normalize_identity
from taskshare.core.sharing import TaskSnapshot
from taskshare.models.task import Task
from taskshare.models.user import User
from taskshare.services.entitlement_gate import EntitlementGate
from taskshare.services.task_service import load_task

logger = logging.getLogger(__name__)


class SharingService:

    def __init__(self, db: AsyncSession):
        self.db = db
        self.gate = EntitlementGate(db)

    async def add_share(self, actor: User, task_id: TaskId, target: str, role: str) -> Task:
        return await self._mutate(
            actor, task_id, target, "Share added",
            lambda snap: sharing.add_share(snap, target, role),
            granted=role,
        )

    async def change_role(self, actor: User, task_id: TaskId, target: str, new_role: str) -> Task:
        return await self._mutate(
            actor, task_id, target, "Share role changed",
            lambda snap: sharing.change_role(snap, target, new_role),
            granted=new_role,
        )

    async def revoke_share(self, actor: User, task_id: TaskId, target: str) -> Task:
        return await self._mutate(
            actor, task_id, target, "Share revoked",
            lambda snap: sharing.revoke_share(snap, target),
        )

    async def _mutate(
        self,
        actor: User,
        task_id: TaskId,
        target: str,
        event: str,
        apply: Callable[[TaskSnapshot], TaskSnapshot],
        granted: str | None = None,
    ) -> Task:
        task = await load_task(self.db, task_id)
        require_capability(task, actor.email, Capability.MANAGE_SHARES)

        updated = apply(TaskSnapshot.of(task))
        if granted is not None:
            self.gate.check_share_as_editor(actor, sharing.parse_share_role(granted))

        task.replace_shares(updated.shares)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise DuplicateShareError(normalize_identity(target, "target"))

        logger.info(
            event,
            extra={
                "actor": actor.email,
                "task_id": str(task_id),
                "target": normalize_identity(target, "target"),
                "role": granted,
            },
        )
        return task


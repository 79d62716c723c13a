"""Entitlement Gate (shell) — counts owned tasks and persists plan transitions.

Invariants:
    - apply_verified_payment is only called after PaymentVerifier.verify() is True
    - The plan UPDATE is conditional on plan = 'free', so re-applying is a no-op
    - check_create_quota is read-then-write relative to the insert that follows
      it; concurrent creates by one free user may overshoot the ceiling by one
"""

import logging
from datetime import datetime, timezone

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from taskshare.core import entitlements
from taskshare.core.domain_types import Plan, ShareRole
from taskshare.models.task import Task
from taskshare.models.user import User
from taskshare.services.identity_resolver import IdentityResolver

logger = logging.getLogger(__name__)


class EntitlementGate:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def owned_task_count(self, identity: str) -> int:
        result = await self.db.execute(
            select(func.count()).select_from(Task).where(Task.owner == identity),
        )
        return result.scalar_one()

    async def check_create_quota(self, user: User) -> None:
        if user.plan_tier == Plan.PAID:
            return
        owned = await self.owned_task_count(user.email)
        entitlements.check_create_quota(user.plan_tier, owned)

    def check_share_as_editor(self, user: User, role: ShareRole) -> None:
        entitlements.check_share_as_editor(user.plan_tier, role)

    async def apply_verified_payment(self, identity: str) -> User:
        user = await IdentityResolver(self.db).resolve(identity)
        next_plan = entitlements.apply_verified_payment(user.plan_tier)
        if user.plan_tier == next_plan:
            logger.info("Verified payment for already-paid user", extra={"actor": user.email})
            return user

        await self.db.execute(
            update(User)
            .where(User.id == user.id, User.plan == user.plan)
            .values(plan=next_plan.value, upgraded_at=datetime.now(timezone.utc))
            .execution_options(synchronize_session=False),
        )
        await self.db.commit()
        await self.db.refresh(user)
        logger.info("Plan upgraded", extra={"actor": user.email, "role": user.plan})
        return user

    async def plan_summary(self, user: User) -> dict:
        owned = await self.owned_task_count(user.email)
        return {
            "plan": user.plan_tier.value,
            "owned_tasks": owned,
            "task_quota": entitlements.task_quota(user.plan_tier),
            "remaining_task_slots": entitlements.remaining_task_slots(user.plan_tier, owned),
            "can_share_as_editor": user.plan_tier == Plan.PAID,
        }

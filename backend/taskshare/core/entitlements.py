"""Entitlement Gate — plan-tier quotas, feature gates and the free → paid transition.

Invariants:
    - Paid users are never quota-limited
    - Free users may own at most FREE_TASK_LIMIT tasks (create allowed iff count < limit)
    - Editor grants require a paid plan; viewer grants are allowed on every plan
    - apply_verified_payment is one-way and idempotent: paid stays paid

Design Decisions:
    - Functions take Plan + counts, not ORM rows: the shell does the counting
    - The quota check is read-then-write at the service layer; a free user racing
      two creates can end up one task over the ceiling (accepted bound)
"""

from taskshare.core.domain_types import Plan, ShareRole
from taskshare.core.errors import QuotaExceededError, UpgradeRequiredError

FREE_TASK_LIMIT = 3
EDITOR_SHARING_FEATURE = "share_as_editor"


def check_create_quota(plan: Plan, owned_count: int) -> None:
    """Raise QuotaExceededError when a free user already owns FREE_TASK_LIMIT tasks."""
    if Plan(plan) == Plan.PAID:
        return
    if owned_count >= FREE_TASK_LIMIT:
        raise QuotaExceededError(FREE_TASK_LIMIT)


def check_share_as_editor(plan: Plan, role: ShareRole) -> None:
    """Raise UpgradeRequiredError when a free user grants the editor role."""
    if ShareRole(role) == ShareRole.EDITOR and Plan(plan) == Plan.FREE:
        raise UpgradeRequiredError(EDITOR_SHARING_FEATURE)


def apply_verified_payment(plan: Plan) -> Plan:
    """Next plan after a verified payment. No downgrade path exists."""
    return Plan.PAID


def task_quota(plan: Plan) -> int | None:
    """Task ceiling for a plan, None meaning unlimited."""
    return None if Plan(plan) == Plan.PAID else FREE_TASK_LIMIT


def remaining_task_slots(plan: Plan, owned_count: int) -> int | None:
    quota = task_quota(plan)
    if quota is None:
        return None
    return max(quota - owned_count, 0)

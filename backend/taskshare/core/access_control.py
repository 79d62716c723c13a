"""Access Control Evaluator — role resolution and the capability table.

Invariants:
    - role_of is a pure function of (task.owner, task.shares, actor)
    - Owner check wins over any share entry for the same identity
    - PERMISSIONS is the only place capabilities are derived from roles
    - require_capability fails closed: unknown roles grant nothing

Design Decisions:
    - Operates on TaskLike (structural Protocol) so ORM rows and pure
      snapshots are evaluated by the same code
"""

from taskshare.core.domain_types import Capability, Role
from taskshare.core.errors import ErrorContext, ForbiddenError
from taskshare.core.identity import same_identity
from taskshare.core.repository_protocols import TaskLike


PERMISSIONS: dict[Role, frozenset[Capability]] = {
    Role.OWNER: frozenset({
        Capability.READ,
        Capability.EDIT,
        Capability.DELETE,
        Capability.MANAGE_SHARES,
    }),
    Role.EDITOR: frozenset({Capability.READ, Capability.EDIT}),
    Role.VIEWER: frozenset({Capability.READ}),
    Role.NONE: frozenset(),
}


def role_of(task: TaskLike, actor: str) -> Role:
    """Resolve the actor's role on a task."""
    if same_identity(task.owner, actor):
        return Role.OWNER
    for entry in task.shares:
        if same_identity(entry.identity, actor):
            return Role(getattr(entry.role, "value", entry.role))
    return Role.NONE


def capabilities_of(role: Role) -> frozenset[Capability]:
    return PERMISSIONS.get(role, frozenset())


def can(role: Role, capability: Capability) -> bool:
    return capability in capabilities_of(role)


def require_capability(
    task: TaskLike, actor: str, capability: Capability,
) -> Role:
    """Return the actor's role, or raise ForbiddenError if it lacks the capability."""
    role = role_of(task, actor)
    if not can(role, capability):
        task_id = getattr(task, "id", None)
        raise ForbiddenError(
            capability.value, role.value,
            ErrorContext(actor=actor, task_id=str(task_id) if task_id else None),
        )
    return role

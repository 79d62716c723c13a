"""Sharing Mutator — pure add/change/revoke over a task's share entries.

Invariants:
    - The owner never appears in its own share set (SelfShareError)
    - An identity appears at most once in the share set (DuplicateShareError)
    - Only editor/viewer are storable roles (InvalidRoleError)
    - revoke is idempotent: revoking an absent identity returns the set unchanged
    - Owner is never touched by any function here — snapshots are rebuilt with
      the same owner value
    - Every function returns a new TaskSnapshot; inputs are never mutated

Design Decisions:
    - add_share checks self-share before the role, so targeting the owner is
      SelfShareError whatever role was requested; then role, then duplicate
    - change_role checks role, then membership
    - Callers run the capability check (access_control) before these functions
      and the plan check (entitlements) after, on the validated role
"""

from dataclasses import dataclass, field, replace

from taskshare.core.domain_types import Identity, ShareRole
from taskshare.core.errors import (
    DuplicateShareError, InvalidRoleError, NotSharedError, SelfShareError,
)
from taskshare.core.identity import normalize_identity
from taskshare.core.repository_protocols import TaskLike


@dataclass(frozen=True)
class ShareEntry:
    """Value object: one non-owner identity and its role."""
    identity: Identity
    role: ShareRole


@dataclass(frozen=True)
class TaskSnapshot:
    """Immutable view of a task's access-relevant fields."""
    owner: Identity
    shares: tuple[ShareEntry, ...] = field(default_factory=tuple)

    @classmethod
    def of(cls, task: TaskLike) -> "TaskSnapshot":
        return cls(
            owner=Identity(task.owner),
            shares=tuple(
                ShareEntry(Identity(s.identity), parse_share_role(s.role))
                for s in task.shares
            ),
        )

    def find(self, identity: Identity) -> ShareEntry | None:
        for entry in self.shares:
            if entry.identity == identity:
                return entry
        return None


def parse_share_role(role: str | ShareRole) -> ShareRole:
    """Coerce a raw role into ShareRole or raise InvalidRoleError."""
    raw = getattr(role, "value", role)
    try:
        return ShareRole(raw)
    except ValueError:
        raise InvalidRoleError(str(raw)) from None


def add_share(snapshot: TaskSnapshot, target: str, role: str | ShareRole) -> TaskSnapshot:
    target_id = normalize_identity(target, "target")
    if target_id == snapshot.owner:
        raise SelfShareError()
    share_role = parse_share_role(role)
    if snapshot.find(target_id) is not None:
        raise DuplicateShareError(target_id)
    return replace(
        snapshot, shares=snapshot.shares + (ShareEntry(target_id, share_role),),
    )


def change_role(snapshot: TaskSnapshot, target: str, new_role: str | ShareRole) -> TaskSnapshot:
    share_role = parse_share_role(new_role)
    target_id = normalize_identity(target, "target")
    if snapshot.find(target_id) is None:
        raise NotSharedError(target_id)
    return replace(
        snapshot,
        shares=tuple(
            ShareEntry(e.identity, share_role) if e.identity == target_id else e
            for e in snapshot.shares
        ),
    )


def revoke_share(snapshot: TaskSnapshot, target: str) -> TaskSnapshot:
    target_id = normalize_identity(target, "target")
    return replace(
        snapshot,
        shares=tuple(e for e in snapshot.shares if e.identity != target_id),
    )

"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - Identity is always the normalized (trimmed, lower-case) email — build it
      with core.identity.normalize_identity, never by calling Identity() on raw input
    - TaskId wraps UUID: services take TaskId, routes wrap the parsed UUID path param
    - ShareRole is the subset of Role that can be stored on a share entry
    - All valid states encoded as Enums — no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

Identity = NewType("Identity", str)
TaskId = NewType("TaskId", UUID)


# ─── Enums ───────────────────────────────────────────────────────

class Role(str, Enum):
    """Permission level an actor holds on a task."""
    OWNER = "owner"
    EDITOR = "editor"
    VIEWER = "viewer"
    NONE = "none"


class ShareRole(str, Enum):
    """Roles grantable through a share entry. Owner is never shareable."""
    EDITOR = "editor"
    VIEWER = "viewer"


class Capability(str, Enum):
    """Operations gated by the access-control table."""
    READ = "read"
    EDIT = "edit"
    DELETE = "delete"
    MANAGE_SHARES = "manage_shares"


class Plan(str, Enum):
    """Entitlement tier. Transitions free -> paid only."""
    FREE = "free"
    PAID = "paid"

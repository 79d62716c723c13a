"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - External collaborators (email, payments) accessed through Protocol types
    - Implementations provided by shell via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - TaskLike lets ORM rows and core snapshots share one evaluator
    - Async in collaborator Protocols: implementations do IO, but core pure
      functions never await them — the shell orchestrates the calls
"""

from typing import Protocol, Sequence


class ShareEntryLike(Protocol):
    """Structural contract for a share entry (ORM row or core ShareEntry)."""
    identity: str
    role: str


class TaskLike(Protocol):
    """Structural contract for anything access control can evaluate."""
    owner: str

    @property
    def shares(self) -> Sequence[ShareEntryLike]: ...


class NotificationSink(Protocol):
    """Fire-and-forget outbound email. Returns False on delivery failure."""
    async def send(self, to_address: str, subject: str, html_body: str) -> bool: ...


class PaymentVerifier(Protocol):
    """Verifies a gateway callback. Only a True result may upgrade a plan."""
    def verify(self, order_id: str, payment_id: str, signature: str) -> bool: ...


class PasswordHasher(Protocol):
    """Opaque credential hashing, implemented by shell."""
    def hash(self, password: str) -> str: ...
    def verify(self, password_hash: str, password: str) -> bool: ...

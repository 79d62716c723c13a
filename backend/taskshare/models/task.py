"""Task ORM — the shared resource and its share entries.

Invariants:
    - owner is set at creation and never reassigned
    - (task_id, identity) is unique in task_shares: the database rejects a
      second entry for the same identity even under concurrent inserts
    - share rows live and die with their task (cascade delete-orphan)

Design Decisions:
    - Share entries as a child table rather than a JSON column: uniqueness is a
      real constraint, and role changes are single-row updates
    - replace_shares reconciles rows against a core TaskSnapshot so the sharing
      rules stay in core/sharing.py
"""

import uuid
from datetime import datetime, timezone
from typing import Iterable

from sqlalchemy import (
    String, Boolean, DateTime, ForeignKey, UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from taskshare.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Task(Base):
    __tablename__ = "tasks"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    completed: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False,
    )
    owner: Mapped[str] = mapped_column(
        String(254), nullable=False, index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow,
    )

    shares: Mapped[list["TaskShare"]] = relationship(
        "TaskShare", back_populates="task",
        cascade="all, delete-orphan", lazy="selectin",
    )

    def replace_shares(self, entries: Iterable) -> None:
        """Make share rows match `entries` (identity, role), touching only what changed."""
        wanted = {e.identity: getattr(e.role, "value", e.role) for e in entries}
        for share in list(self.shares):
            if share.identity not in wanted:
                self.shares.remove(share)
                continue
            role = wanted.pop(share.identity)
            if share.role != role:
                share.role = role
        for identity, role in wanted.items():
            self.shares.append(TaskShare(identity=identity, role=role))

    def __repr__(self) -> str:
        return f"<Task {self.id} owner={self.owner}>"


class TaskShare(Base):
    __tablename__ = "task_shares"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    task_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("tasks.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    identity: Mapped[str] = mapped_column(
        String(254), nullable=False, index=True,
    )
    role: Mapped[str] = mapped_column(String(10), nullable=False)

    __table_args__ = (
        UniqueConstraint("task_id", "identity", name="uq_task_share_identity"),
    )

    task: Mapped["Task"] = relationship("Task", back_populates="shares")

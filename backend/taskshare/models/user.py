"""User ORM — registered account with its plan tier.

Invariants:
    - email is the normalized identity and is unique
    - plan is "free" or "paid"; only the entitlement gate writes it
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, DateTime
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from taskshare.core.domain_types import Plan
from taskshare.db.base import Base


class User(Base):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    email: Mapped[str] = mapped_column(
        String(254), nullable=False, unique=True, index=True,
    )
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(512), nullable=False)
    plan: Mapped[str] = mapped_column(
        String(10), nullable=False, default=Plan.FREE.value,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    upgraded_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )

    @property
    def plan_tier(self) -> Plan:
        return Plan(self.plan)

    def __repr__(self) -> str:
        return f"<User {self.email} plan={self.plan}>"

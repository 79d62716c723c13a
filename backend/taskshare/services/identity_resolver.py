"""Identity Resolver — maps an authenticated identity to its canonical User row.

Invariants:
    - Lookups always use the normalized identity
    - resolve() raises ResourceNotFoundError; find() returns None
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from taskshare.core.errors import ResourceNotFoundError
from taskshare.core.identity import canonical_form, normalize_identity
from taskshare.models.user import User


class IdentityResolver:
    """Read-only access to users by identity."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find(self, identity: str) -> User | None:
        normalized = normalize_identity(identity)
        result = await self.db.execute(
            select(User).where(User.email == normalized),
        )
        return result.scalar_one_or_none()

    async def resolve(self, identity: str) -> User:
        user = await self.find(identity)
        if user is None:
            raise ResourceNotFoundError("User", canonical_form(identity))
        return user

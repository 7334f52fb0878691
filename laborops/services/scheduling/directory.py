from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from laborops.core.errors import NotFoundError
from laborops.models.user import User


class EmployeeDirectory:
    """Employee lookups (name, current hourly rate) backed by the users table."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, user_id: str) -> Optional[User]:
        if not user_id:
            return None
        return await self.db.get(User, user_id)

    async def require(self, user_id: str) -> User:
        user = await self.get(user_id)
        if not user:
            raise NotFoundError.for_id("Employee", user_id)
        return user

    async def hourly_rate(self, user_id: str) -> Optional[float]:
        """Current rate, or None when the employee or their rate is unknown."""
        user = await self.get(user_id)
        if not user or user.hourly_rate is None:
            return None
        return float(user.hourly_rate)

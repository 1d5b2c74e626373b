"""
User repository for resolving accounts owned by the host application.
"""

import structlog
from motor.motor_asyncio import AsyncIOMotorCollection

from ...models.user import User

logger = structlog.get_logger()


class UserRepository:
    """Repository for user lookups."""

    def __init__(self, collection: AsyncIOMotorCollection):
        """
        Initialize user repository.

        Args:
            collection: MongoDB collection for users
        """
        self.collection = collection

    async def get_by_email(self, email: str) -> User | None:
        """
        Get user by email address.

        Args:
            email: Email address

        Returns:
            User if found, None otherwise
        """
        user_dict = await self.collection.find_one({"email": email})

        if not user_dict:
            return None

        return User.from_document(user_dict)

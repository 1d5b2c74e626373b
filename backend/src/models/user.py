"""
User model as stored by the host application's auth layer.

The agent only reads users to resolve an email address to a user id.
"""

from pydantic import BaseModel, Field


class User(BaseModel):
    """User record (read-only subset)."""

    user_id: str = Field(..., description="Unique user identifier")
    email: str = Field(..., description="Account email address")
    name: str | None = Field(None, description="Display name")

    @classmethod
    def from_document(cls, document: dict) -> "User":
        """
        Build from a raw users-collection document.

        Auth libraries store the id either as an ``id`` string or only as the
        Mongo ``_id``; both resolve to ``user_id``.
        """
        user_id = document.get("id") or document.get("user_id") or document.get("_id")
        return cls(
            user_id=str(user_id),
            email=document["email"],
            name=document.get("name"),
        )

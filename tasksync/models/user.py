"""User data model for tasksync."""

from typing import Any, Optional, Union
from pydantic import BaseModel, Field, ValidationError


class User(BaseModel):
    """Authenticated user as reported by GET /auth/me."""

    id: Optional[Union[int, str]] = Field(None, description="Server-side user identifier")
    username: Optional[str] = Field(None, description="Login name")
    name: Optional[str] = Field(None, description="Display name")
    email: Optional[str] = Field(None, description="User email address")

    @property
    def display_name(self) -> str:
        return self.username or self.name or "User"

    class Config:
        """Pydantic configuration."""
        extra = "allow"
        frozen = True


def user_from_payload(payload: Any) -> Optional[User]:
    """Extract a User from a /auth/me (or login) response body.

    The server may answer with the user object itself or wrap it as
    ``{"user": {...}}``. ``{"user": null}``, an empty body, or anything that
    is not an object means nobody is logged in.

    Returns:
        User, or None when the payload does not describe a user
    """
    if not isinstance(payload, dict) or not payload:
        return None
    if "user" in payload:
        payload = payload["user"]
        if not isinstance(payload, dict) or not payload:
            return None
    try:
        user = User.model_validate(payload)
    except ValidationError:
        return None
    # A bare {"message": "..."} (e.g. an HTML page wrapped as text) is not a user.
    if user.id is None and not (user.username or user.name or user.email):
        return None
    return user

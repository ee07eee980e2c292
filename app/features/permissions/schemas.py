"""
Pydantic schemas for access control.
"""
from pydantic import BaseModel, ConfigDict, Field

from app.features.permissions.actions import Action


class RequestContext(BaseModel):
    """
    Who is asking, and inside which organization.

    ``role_id`` is filled when the caller's membership has already been
    resolved; the access check then skips its own membership lookup.
    """
    user_id: str | None = None
    org_id: str | None = None
    role_id: str | None = None

    model_config = ConfigDict(frozen=True)


class ActionCheckResponse(BaseModel):
    """Result of checking one action for the current user."""
    action: Action
    org_id: str
    allowed: bool = Field(..., description="Whether the current user may perform the action")

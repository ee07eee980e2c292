"""
Pydantic schemas for user-related responses.
"""
from datetime import datetime
from pydantic import BaseModel, EmailStr


class UserResponse(BaseModel):
    """Schema for the current user's own profile."""
    id: str
    email: EmailStr
    name: str
    is_active: bool
    is_admin: bool
    last_login_at: datetime | None = None
    created_at: datetime
    updated_at: datetime
    
    model_config = {"from_attributes": True}


class OrgUserResponse(BaseModel):
    """A member of an organization together with the role held there."""
    id: str
    email: EmailStr
    name: str
    role_id: str
    role_name: str

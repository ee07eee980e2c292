"""
Organization-related dependency injection functions.
"""
from typing import Annotated
from fastapi import Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database.engine import get_db
from app.core.errors import Forbidden
from app.features.users.models import User
from app.features.users.dependencies import get_current_user
from app.features.organizations.models import UserOrg
from app.features.permissions.schemas import RequestContext


async def get_request_context(
    org_id: str,
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)]
) -> RequestContext:
    """
    Verify the user is a member of the path's organization and build the request context.
    
    The membership row is read once here and its role carried on the
    context, so the action check that follows does not query it again.
    
    Raises:
        Forbidden: 403 if the user is not a member of the organization
    """
    membership = await db.scalar(
        select(UserOrg).where(UserOrg.user_id == user.id, UserOrg.org_id == org_id)
    )
    
    if membership is None:
        raise Forbidden("User does not have access to this organization")
    
    return RequestContext(user_id=user.id, org_id=org_id, role_id=membership.role_id)

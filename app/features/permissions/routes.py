"""
Access control API routes.
"""
from typing import Annotated
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database.engine import get_db
from app.features.organizations.dependencies import get_request_context
from app.features.permissions.actions import Action
from app.features.permissions.dependencies import is_action_permitted
from app.features.permissions.schemas import ActionCheckResponse, RequestContext


router = APIRouter()


@router.get("/{org_id}/actions/{action}", response_model=ActionCheckResponse)
async def check_action(
    org_id: str,
    action: Action,
    context: Annotated[RequestContext, Depends(get_request_context)],
    db: Annotated[AsyncSession, Depends(get_db)]
):
    """Check whether the current user may perform an action in the organization."""
    allowed = await is_action_permitted(db, action, context)
    return ActionCheckResponse(action=action, org_id=org_id, allowed=allowed)

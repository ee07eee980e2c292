"""
Action permission checking and FastAPI dependencies.

Implements:
- The access decision: direct user grants first, then role grants, scoped per organization
- A FastAPI dependency guarding routes with a single action
- Default role bootstrap for new organizations
"""
from typing import Annotated
from fastapi import Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database.engine import get_db
from app.core.errors import AppError, BadRequest, Forbidden, InternalError, Unauthenticated
from app.features.organizations.dependencies import get_request_context
from app.features.organizations.models import UserOrg
from app.features.permissions.actions import Action
from app.features.permissions.defaults import DEFAULT_ROLES
from app.features.permissions.models import Role, RoleAction, UserAction
from app.features.permissions.schemas import RequestContext
from app.utils import get_logger


log = get_logger(__name__)


# ============================================================================
# Grant lookups
# ============================================================================

async def get_user_role_id(db: AsyncSession, user_id: str, org_id: str) -> str | None:
    """Return the role the user holds in the organization, or None if not a member."""
    return await db.scalar(
        select(UserOrg.role_id)
        .where(UserOrg.user_id == user_id, UserOrg.org_id == org_id)
        .limit(1)
    )


async def has_user_action(db: AsyncSession, user_id: str, action: Action, org_id: str) -> bool:
    found = await db.scalar(
        select(UserAction.action_id)
        .where(
            UserAction.user_id == user_id,
            UserAction.action_id == action.value,
            UserAction.org_id == org_id,
        )
        .limit(1)
    )
    return found is not None


async def has_role_action(db: AsyncSession, role_id: str, action: Action, org_id: str) -> bool:
    found = await db.scalar(
        select(RoleAction.action_id)
        .where(
            RoleAction.role_id == role_id,
            RoleAction.action_id == action.value,
            RoleAction.org_id == org_id,
        )
        .limit(1)
    )
    return found is not None


# ============================================================================
# Access decision
# ============================================================================

async def is_action_permitted(db: AsyncSession, action: Action, context: RequestContext) -> bool:
    """
    Check whether the caller in ``context`` may perform ``action``.
    
    A direct user grant always wins; otherwise the role the caller holds in
    the organization decides. Every lookup is scoped to ``context.org_id``.
    Nothing is cached, so a revoked grant is honoured on the next call.
    
    Args:
        db: Database session
        action: Action being guarded
        context: Caller identity and organization, optionally with a pre-resolved role
    
    Returns:
        True if a matching grant exists, False otherwise
    
    Raises:
        Unauthenticated: No user in the context
        BadRequest: No organization in the context
        Forbidden: The user is not a member of the organization
        InternalError: The store failed while evaluating the grants
    """
    if not context.user_id:
        raise Unauthenticated("User not authenticated")
    
    if not context.org_id:
        raise BadRequest("Organization ID is required")
    
    user_id = context.user_id
    org_id = context.org_id
    
    try:
        role_id = context.role_id
        if role_id is None:
            role_id = await get_user_role_id(db, user_id, org_id)
            if role_id is None:
                raise Forbidden("User does not have access to this organization")
        
        if await has_user_action(db, user_id, action, org_id):
            log.debug("User %s granted %s in org %s via direct grant", user_id, action, org_id)
            return True
        
        allowed = await has_role_action(db, role_id, action, org_id)
        log.debug(
            "User %s %s %s in org %s via role %s",
            user_id, "granted" if allowed else "denied", action, org_id, role_id
        )
        return allowed
    
    except AppError:
        raise
    except Exception as e:
        log.error("Error checking user action permission", exc_info=True)
        raise InternalError("Error checking action permission") from e


# ============================================================================
# FastAPI Dependencies
# ============================================================================

def require_action(action: Action):
    """
    FastAPI dependency to require a specific action in the path's organization.
    
    Usage:
        @router.post("/{org_id}/sites")
        async def create_site(
            context: RequestContext = Depends(require_action(Action.CREATE_SITE))
        ):
            # Caller may create sites in org_id
            pass
    
    Returns:
        Dependency function that returns the request context if the action is permitted
    
    Raises:
        Forbidden: 403 if the action is not granted
    """
    async def action_dependency(
        context: Annotated[RequestContext, Depends(get_request_context)],
        db: Annotated[AsyncSession, Depends(get_db)],
    ) -> RequestContext:
        if not await is_action_permitted(db, action, context):
            raise Forbidden("User does not have permission to perform this action")
        return context
    
    return action_dependency


# ============================================================================
# Organization bootstrap
# ============================================================================

async def seed_default_roles(db: AsyncSession, org_id: str) -> dict[str, Role]:
    """
    Create the default roles of an organization with their action grants.
    
    Roles that already exist in the organization are left untouched, so this
    can be re-run to backfill organizations created before a default was added.
    The caller owns the transaction; rows are flushed but not committed.
    
    Returns:
        Dictionary mapping role names to Role objects
    """
    roles: dict[str, Role] = {}
    
    for role_name, role_config in DEFAULT_ROLES.items():
        existing = await db.scalar(
            select(Role).where(Role.org_id == org_id, Role.name == role_name)
        )
        if existing:
            log.debug("Role %r already exists in org %s, skipping", role_name, org_id)
            roles[role_name] = existing
            continue
        
        role = Role(
            org_id=org_id,
            name=role_name,
            description=role_config["description"],
            is_admin=role_config["is_admin"],
        )
        db.add(role)
        await db.flush()
        
        actions = list(Action) if role_config["actions"] == "ALL" else role_config["actions"]
        db.add_all(
            RoleAction(role_id=role.id, action_id=action.value, org_id=org_id)
            for action in actions
        )
        roles[role_name] = role
        log.info("Created role %r in org %s with %d actions", role_name, org_id, len(actions))
    
    await db.flush()
    return roles

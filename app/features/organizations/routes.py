"""
Organization management routes.

Every route scoped to an organization is guarded by the matching action.
"""
from typing import Annotated
from fastapi import APIRouter, Depends, status
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database.engine import get_db
from app.core.errors import BadRequest, Conflict, NotFound
from app.features.users.dependencies import get_current_user
from app.features.users.models import User
from app.features.users.schemas import OrgUserResponse
from app.features.organizations.models import Organization, UserOrg
from app.features.organizations.schemas import (
    OrganizationCreate,
    OrganizationUpdate,
    OrganizationResponse,
)
from app.features.permissions.actions import Action
from app.features.permissions.defaults import ADMIN_ROLE
from app.features.permissions.dependencies import require_action, seed_default_roles
from app.features.permissions.models import Role, UserAction
from app.features.permissions.schemas import RequestContext
from app.utils import get_logger


log = get_logger(__name__)
router = APIRouter()


async def get_org_or_404(db: AsyncSession, org_id: str) -> Organization:
    organization = await db.get(Organization, org_id)
    if organization is None:
        raise NotFound("Organization not found")
    return organization


# ============================================================================
# Organization Routes
# ============================================================================

@router.post("", response_model=OrganizationResponse, status_code=status.HTTP_201_CREATED)
async def create_organization(
    org_data: OrganizationCreate,
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)]
):
    """
    Create an organization.
    
    The creator becomes its first member, holding the Admin role that is
    granted every action in the new organization.
    """
    existing = await db.scalar(
        select(Organization).where(Organization.domain == org_data.domain)
    )
    if existing:
        raise Conflict("Organization with this domain already exists")
    
    organization = Organization(**org_data.model_dump())
    db.add(organization)
    await db.flush()
    
    roles = await seed_default_roles(db, organization.id)
    db.add(UserOrg(user_id=user.id, org_id=organization.id, role_id=roles[ADMIN_ROLE].id))
    
    await db.commit()
    await db.refresh(organization)
    log.info("User %s created org %s", user.id, organization.id)
    return organization


@router.get("", response_model=list[OrganizationResponse])
async def list_organizations(
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
    skip: int = 0,
    limit: int = 100
):
    """List the organizations the current user is a member of."""
    result = await db.execute(
        select(Organization)
        .join(UserOrg, UserOrg.org_id == Organization.id)
        .where(UserOrg.user_id == user.id)
        .order_by(Organization.name)
        .offset(skip)
        .limit(limit)
    )
    return result.scalars().all()


@router.get("/{org_id}", response_model=OrganizationResponse)
async def get_organization(
    org_id: str,
    context: Annotated[RequestContext, Depends(require_action(Action.GET_ORG))],
    db: Annotated[AsyncSession, Depends(get_db)]
):
    """Get an organization by ID."""
    return await get_org_or_404(db, org_id)


@router.patch("/{org_id}", response_model=OrganizationResponse)
async def update_organization(
    org_id: str,
    update_data: OrganizationUpdate,
    context: Annotated[RequestContext, Depends(require_action(Action.UPDATE_ORG))],
    db: Annotated[AsyncSession, Depends(get_db)]
):
    """Update an organization's name or domain."""
    organization = await get_org_or_404(db, org_id)
    
    for field, value in update_data.model_dump(exclude_unset=True).items():
        setattr(organization, field, value)
    
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise Conflict("Organization with this domain already exists")
    
    await db.refresh(organization)
    return organization


@router.delete("/{org_id}")
async def delete_organization(
    org_id: str,
    context: Annotated[RequestContext, Depends(require_action(Action.DELETE_ORG))],
    db: Annotated[AsyncSession, Depends(get_db)]
):
    """Delete an organization together with its sites, roles and grants."""
    organization = await get_org_or_404(db, org_id)
    await db.delete(organization)
    await db.commit()
    log.info("User %s deleted org %s", context.user_id, org_id)
    return {"message": "Organization deleted successfully"}


# ============================================================================
# Organization User Routes
# ============================================================================

def _org_users_query(org_id: str):
    return (
        select(User, UserOrg.role_id, Role.name)
        .join(UserOrg, UserOrg.user_id == User.id)
        .join(Role, Role.id == UserOrg.role_id)
        .where(UserOrg.org_id == org_id)
    )


def _to_org_user(row) -> OrgUserResponse:
    user, role_id, role_name = row
    return OrgUserResponse(
        id=user.id,
        email=user.email,
        name=user.name,
        role_id=role_id,
        role_name=role_name,
    )


@router.get("/{org_id}/users", response_model=list[OrgUserResponse])
async def list_organization_users(
    org_id: str,
    context: Annotated[RequestContext, Depends(require_action(Action.LIST_USERS))],
    db: Annotated[AsyncSession, Depends(get_db)],
    skip: int = 0,
    limit: int = 100
):
    """List the members of an organization with their roles."""
    result = await db.execute(
        _org_users_query(org_id).order_by(User.name).offset(skip).limit(limit)
    )
    return [_to_org_user(row) for row in result.all()]


@router.get("/{org_id}/users/{user_id}", response_model=OrgUserResponse)
async def get_organization_user(
    org_id: str,
    user_id: str,
    context: Annotated[RequestContext, Depends(require_action(Action.GET_USER))],
    db: Annotated[AsyncSession, Depends(get_db)]
):
    """Get one member of an organization."""
    result = await db.execute(_org_users_query(org_id).where(User.id == user_id))
    row = result.first()
    if row is None:
        raise NotFound("User not found in this organization")
    return _to_org_user(row)


@router.delete("/{org_id}/users/{user_id}")
async def remove_organization_user(
    org_id: str,
    user_id: str,
    context: Annotated[RequestContext, Depends(require_action(Action.DELETE_USER))],
    db: Annotated[AsyncSession, Depends(get_db)]
):
    """Remove a user from an organization."""
    if user_id == context.user_id:
        raise BadRequest("Cannot remove yourself from the organization")
    
    membership = await db.get(UserOrg, (user_id, org_id))
    if membership is None:
        raise NotFound("User not found in this organization")
    
    await db.delete(membership)
    # Direct grants are meaningless once the user leaves the organization
    await db.execute(
        delete(UserAction).where(UserAction.user_id == user_id, UserAction.org_id == org_id)
    )
    await db.commit()
    return {"message": "User removed from organization successfully"}

"""
Site management routes, scoped to an organization.
"""
from typing import Annotated
from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database.engine import get_db
from app.core.errors import NotFound
from app.features.gerbil.models import ExitNode
from app.features.permissions.actions import Action
from app.features.permissions.dependencies import require_action
from app.features.permissions.schemas import RequestContext
from app.features.sites.models import Site
from app.features.sites.schemas import SiteCreate, SiteUpdate, SiteResponse
from app.utils import get_logger


log = get_logger(__name__)
router = APIRouter()


async def get_site_or_404(db: AsyncSession, org_id: str, site_id: str) -> Site:
    """Fetch a site, treating sites of other organizations as missing."""
    site = await db.scalar(
        select(Site).where(Site.id == site_id, Site.org_id == org_id)
    )
    if site is None:
        raise NotFound(f"Site with ID {site_id} not found")
    return site


async def ensure_exit_node(db: AsyncSession, exit_node_id: int | None) -> None:
    if exit_node_id is not None and await db.get(ExitNode, exit_node_id) is None:
        raise NotFound("Exit node not found")


@router.post("/{org_id}/sites", response_model=SiteResponse, status_code=status.HTTP_201_CREATED)
async def create_site(
    org_id: str,
    site_data: SiteCreate,
    context: Annotated[RequestContext, Depends(require_action(Action.CREATE_SITE))],
    db: Annotated[AsyncSession, Depends(get_db)]
):
    """Create a site in the organization."""
    await ensure_exit_node(db, site_data.exit_node_id)
    
    site = Site(org_id=org_id, **site_data.model_dump())
    db.add(site)
    await db.commit()
    await db.refresh(site)
    log.info("Created site %s in org %s", site.id, org_id)
    return site


@router.get("/{org_id}/sites", response_model=list[SiteResponse])
async def list_sites(
    org_id: str,
    context: Annotated[RequestContext, Depends(require_action(Action.LIST_SITES))],
    db: Annotated[AsyncSession, Depends(get_db)],
    skip: int = 0,
    limit: int = 100
):
    """List the sites of the organization."""
    result = await db.execute(
        select(Site)
        .where(Site.org_id == org_id)
        .order_by(Site.name)
        .offset(skip)
        .limit(limit)
    )
    return result.scalars().all()


@router.get("/{org_id}/sites/{site_id}", response_model=SiteResponse)
async def get_site(
    org_id: str,
    site_id: str,
    context: Annotated[RequestContext, Depends(require_action(Action.GET_SITE))],
    db: Annotated[AsyncSession, Depends(get_db)]
):
    return await get_site_or_404(db, org_id, site_id)


@router.patch("/{org_id}/sites/{site_id}", response_model=SiteResponse)
async def update_site(
    org_id: str,
    site_id: str,
    update_data: SiteUpdate,
    context: Annotated[RequestContext, Depends(require_action(Action.UPDATE_SITE))],
    db: Annotated[AsyncSession, Depends(get_db)]
):
    site = await get_site_or_404(db, org_id, site_id)
    changes = update_data.model_dump(exclude_unset=True)
    
    if "exit_node_id" in changes:
        await ensure_exit_node(db, changes["exit_node_id"])
    
    for field, value in changes.items():
        setattr(site, field, value)
    
    await db.commit()
    await db.refresh(site)
    return site


@router.delete("/{org_id}/sites/{site_id}")
async def delete_site(
    org_id: str,
    site_id: str,
    context: Annotated[RequestContext, Depends(require_action(Action.DELETE_SITE))],
    db: Annotated[AsyncSession, Depends(get_db)]
):
    """Delete a site together with its resources and targets."""
    site = await get_site_or_404(db, org_id, site_id)
    await db.delete(site)
    await db.commit()
    return {"message": "Site deleted successfully"}

"""
Resource management routes, scoped to an organization.
"""
from typing import Annotated
from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database.engine import get_db
from app.core.errors import NotFound
from app.features.permissions.actions import Action
from app.features.permissions.dependencies import require_action
from app.features.permissions.schemas import RequestContext
from app.features.resources.models import Resource
from app.features.resources.schemas import ResourceCreate, ResourceUpdate, ResourceResponse
from app.features.sites.routes import get_site_or_404


router = APIRouter()


async def get_resource_or_404(db: AsyncSession, org_id: str, resource_id: str) -> Resource:
    resource = await db.scalar(
        select(Resource).where(Resource.id == resource_id, Resource.org_id == org_id)
    )
    if resource is None:
        raise NotFound(f"Resource with ID {resource_id} not found")
    return resource


@router.post(
    "/{org_id}/sites/{site_id}/resources",
    response_model=ResourceResponse,
    status_code=status.HTTP_201_CREATED
)
async def create_resource(
    org_id: str,
    site_id: str,
    resource_data: ResourceCreate,
    context: Annotated[RequestContext, Depends(require_action(Action.CREATE_RESOURCE))],
    db: Annotated[AsyncSession, Depends(get_db)]
):
    """Create a resource on one of the organization's sites."""
    await get_site_or_404(db, org_id, site_id)
    
    resource = Resource(site_id=site_id, org_id=org_id, **resource_data.model_dump())
    db.add(resource)
    await db.commit()
    await db.refresh(resource)
    return resource


@router.get("/{org_id}/sites/{site_id}/resources", response_model=list[ResourceResponse])
async def list_resources(
    org_id: str,
    site_id: str,
    context: Annotated[RequestContext, Depends(require_action(Action.LIST_RESOURCES))],
    db: Annotated[AsyncSession, Depends(get_db)],
    skip: int = 0,
    limit: int = 100
):
    """List the resources of a site."""
    await get_site_or_404(db, org_id, site_id)
    
    result = await db.execute(
        select(Resource)
        .where(Resource.site_id == site_id, Resource.org_id == org_id)
        .order_by(Resource.name)
        .offset(skip)
        .limit(limit)
    )
    return result.scalars().all()


@router.get("/{org_id}/resources/{resource_id}", response_model=ResourceResponse)
async def get_resource(
    org_id: str,
    resource_id: str,
    context: Annotated[RequestContext, Depends(require_action(Action.GET_RESOURCE))],
    db: Annotated[AsyncSession, Depends(get_db)]
):
    return await get_resource_or_404(db, org_id, resource_id)


@router.patch("/{org_id}/resources/{resource_id}", response_model=ResourceResponse)
async def update_resource(
    org_id: str,
    resource_id: str,
    update_data: ResourceUpdate,
    context: Annotated[RequestContext, Depends(require_action(Action.UPDATE_RESOURCE))],
    db: Annotated[AsyncSession, Depends(get_db)]
):
    resource = await get_resource_or_404(db, org_id, resource_id)
    
    for field, value in update_data.model_dump(exclude_unset=True).items():
        setattr(resource, field, value)
    
    await db.commit()
    await db.refresh(resource)
    return resource


@router.delete("/{org_id}/resources/{resource_id}")
async def delete_resource(
    org_id: str,
    resource_id: str,
    context: Annotated[RequestContext, Depends(require_action(Action.DELETE_RESOURCE))],
    db: Annotated[AsyncSession, Depends(get_db)]
):
    resource = await get_resource_or_404(db, org_id, resource_id)
    await db.delete(resource)
    await db.commit()
    return {"message": "Resource deleted successfully"}

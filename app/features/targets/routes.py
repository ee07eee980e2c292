"""
Target management routes, scoped to an organization through the owning resource.
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
from app.features.resources.routes import get_resource_or_404
from app.features.targets.models import Target
from app.features.targets.schemas import TargetCreate, TargetUpdate, TargetResponse


router = APIRouter()


async def get_target_or_404(db: AsyncSession, org_id: str, target_id: str) -> Target:
    target = await db.scalar(
        select(Target)
        .join(Resource, Resource.id == Target.resource_id)
        .where(Target.id == target_id, Resource.org_id == org_id)
    )
    if target is None:
        raise NotFound(f"Target with ID {target_id} not found")
    return target


@router.post(
    "/{org_id}/resources/{resource_id}/targets",
    response_model=TargetResponse,
    status_code=status.HTTP_201_CREATED
)
async def create_target(
    org_id: str,
    resource_id: str,
    target_data: TargetCreate,
    context: Annotated[RequestContext, Depends(require_action(Action.CREATE_TARGET))],
    db: Annotated[AsyncSession, Depends(get_db)]
):
    """Add a target to one of the organization's resources."""
    await get_resource_or_404(db, org_id, resource_id)
    
    values = target_data.model_dump()
    values["ip"] = str(values["ip"])
    target = Target(resource_id=resource_id, **values)
    db.add(target)
    await db.commit()
    await db.refresh(target)
    return target


@router.get("/{org_id}/resources/{resource_id}/targets", response_model=list[TargetResponse])
async def list_targets(
    org_id: str,
    resource_id: str,
    context: Annotated[RequestContext, Depends(require_action(Action.LIST_TARGETS))],
    db: Annotated[AsyncSession, Depends(get_db)]
):
    await get_resource_or_404(db, org_id, resource_id)
    
    result = await db.execute(
        select(Target).where(Target.resource_id == resource_id).order_by(Target.ip)
    )
    return result.scalars().all()


@router.get("/{org_id}/targets/{target_id}", response_model=TargetResponse)
async def get_target(
    org_id: str,
    target_id: str,
    context: Annotated[RequestContext, Depends(require_action(Action.GET_TARGET))],
    db: Annotated[AsyncSession, Depends(get_db)]
):
    return await get_target_or_404(db, org_id, target_id)


@router.patch("/{org_id}/targets/{target_id}", response_model=TargetResponse)
async def update_target(
    org_id: str,
    target_id: str,
    update_data: TargetUpdate,
    context: Annotated[RequestContext, Depends(require_action(Action.UPDATE_TARGET))],
    db: Annotated[AsyncSession, Depends(get_db)]
):
    target = await get_target_or_404(db, org_id, target_id)
    
    for field, value in update_data.model_dump(exclude_unset=True).items():
        setattr(target, field, str(value) if field == "ip" and value is not None else value)
    
    await db.commit()
    await db.refresh(target)
    return target


@router.delete("/{org_id}/targets/{target_id}")
async def delete_target(
    org_id: str,
    target_id: str,
    context: Annotated[RequestContext, Depends(require_action(Action.DELETE_TARGET))],
    db: Annotated[AsyncSession, Depends(get_db)]
):
    target = await get_target_or_404(db, org_id, target_id)
    await db.delete(target)
    await db.commit()
    return {"message": "Target deleted successfully"}

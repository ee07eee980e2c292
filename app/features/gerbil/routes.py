"""
Internal routes consumed by exit nodes.
"""
from typing import Annotated
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.database.engine import get_session_factory
from app.core.errors import BadRequest
from app.features.gerbil.config import build_exit_node_config
from app.features.gerbil.schemas import ExitNodeConfig


router = APIRouter()


@router.get("/get-config", response_model=ExitNodeConfig)
async def get_config(
    session_factory: Annotated[async_sessionmaker[AsyncSession], Depends(get_session_factory)],
    exit_node_id: Annotated[int | None, Query(alias="exitNodeId")] = None
):
    """Get the WireGuard configuration of an exit node."""
    if exit_node_id is None:
        raise BadRequest("Missing exitNodeId query parameter")
    
    return await build_exit_node_config(session_factory, exit_node_id)

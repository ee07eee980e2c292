"""
Exit node configuration builder.

Walks exit node -> sites -> resources -> targets and turns the result into a
WireGuard peer list. Sites are processed concurrently, and so are the
resources of each site; every fetch uses its own session because an
AsyncSession cannot run statements concurrently.
"""
import asyncio
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.errors import AppError, InternalError, NotFound
from app.features.gerbil.models import ExitNode
from app.features.gerbil.schemas import ExitNodeConfig, Peer
from app.features.resources.models import Resource
from app.features.sites.models import Site
from app.features.targets.models import Target
from app.utils import get_logger


log = get_logger(__name__)


async def get_target_ips(session_factory: async_sessionmaker[AsyncSession], resource_id: str) -> list[str]:
    async with session_factory() as session:
        ips = await session.scalars(
            select(Target.ip).where(Target.resource_id == resource_id)
        )
        return [f"{ip}/32" for ip in ips]


async def build_peer(
    session_factory: async_sessionmaker[AsyncSession],
    site_id: str,
    pub_key: str | None
) -> Peer:
    """Build the peer of one site; a site without targets still gets a peer."""
    async with session_factory() as session:
        resource_ids = (await session.scalars(
            select(Resource.id).where(Resource.site_id == site_id)
        )).all()
    
    async with asyncio.TaskGroup() as tg:
        tasks = [
            tg.create_task(get_target_ips(session_factory, resource_id))
            for resource_id in resource_ids
        ]
    
    allowed_ips = [ip for task in tasks for ip in task.result()]
    return Peer(public_key=pub_key, allowed_ips=allowed_ips)


async def build_exit_node_config(
    session_factory: async_sessionmaker[AsyncSession],
    exit_node_id: int
) -> ExitNodeConfig:
    """
    Build the WireGuard configuration of an exit node.
    
    Nothing is cached: each call reads the current topology. Reads are not
    wrapped in a transaction, so a topology change during the call may be
    partially visible.
    
    Args:
        session_factory: Factory opening independent database sessions
        exit_node_id: Exit node to build the configuration for
    
    Returns:
        The exit node's private key, listen port and address with one peer per site
    
    Raises:
        NotFound: The exit node does not exist; no site queries are issued
        InternalError: Any store failure; partial results are discarded
    """
    try:
        async with session_factory() as session:
            exit_node = await session.get(ExitNode, exit_node_id)
            if exit_node is None:
                raise NotFound("Exit node not found")
            
            sites = (await session.execute(
                select(Site.id, Site.pub_key).where(Site.exit_node_id == exit_node_id)
            )).all()
        
        # A failing site cancels its siblings
        async with asyncio.TaskGroup() as tg:
            tasks = [
                tg.create_task(build_peer(session_factory, site_id, pub_key))
                for site_id, pub_key in sites
            ]
        
        config = ExitNodeConfig(
            private_key=exit_node.private_key,
            listen_port=exit_node.listen_port,
            ip_address=exit_node.address,
            peers=[task.result() for task in tasks],
        )
    except AppError:
        raise
    except Exception as e:
        log.error("Error generating config for exit node %s", exit_node_id, exc_info=True)
        raise InternalError("An error occurred while generating configuration") from e
    
    log.debug("Built config for exit node %s with %d peers", exit_node_id, len(config.peers))
    return config

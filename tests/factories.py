"""
Helpers creating rows directly in the database.

Each helper flushes so generated ids are available; callers commit when the
rows must be visible to other sessions.
"""
from sqlalchemy.ext.asyncio import AsyncSession

from app.features.gerbil.models import ExitNode
from app.features.organizations.models import Organization, UserOrg
from app.features.permissions.actions import Action
from app.features.permissions.models import Role, RoleAction, UserAction
from app.features.resources.models import Resource
from app.features.sites.models import Site
from app.features.targets.models import Target
from app.features.users.models import User


async def create_user(db: AsyncSession, name: str = "alice") -> User:
    user = User(appwrite_id=f"aw-{name}", email=f"{name}@example.com", name=name)
    db.add(user)
    await db.flush()
    return user


async def create_org(db: AsyncSession, name: str = "Acme") -> Organization:
    org = Organization(name=name, domain=f"{name.lower()}.example.com")
    db.add(org)
    await db.flush()
    return org


async def create_role(db: AsyncSession, org: Organization, name: str = "Viewer", actions=()) -> Role:
    role = Role(org_id=org.id, name=name)
    db.add(role)
    await db.flush()
    for action in actions:
        db.add(RoleAction(role_id=role.id, action_id=action.value, org_id=org.id))
    await db.flush()
    return role


async def add_member(db: AsyncSession, user: User, org: Organization, role: Role) -> UserOrg:
    membership = UserOrg(user_id=user.id, org_id=org.id, role_id=role.id)
    db.add(membership)
    await db.flush()
    return membership


async def grant_user_action(db: AsyncSession, user: User, org: Organization, action: Action) -> UserAction:
    grant = UserAction(user_id=user.id, action_id=action.value, org_id=org.id)
    db.add(grant)
    await db.flush()
    return grant


async def create_exit_node(db: AsyncSession, name: str = "exit-1", **kwargs) -> ExitNode:
    values = dict(address="10.0.0.1/24", private_key="cHJpdmF0ZS1rZXk=", listen_port=51820)
    values.update(kwargs)
    exit_node = ExitNode(name=name, **values)
    db.add(exit_node)
    await db.flush()
    return exit_node


async def create_site(
    db: AsyncSession,
    org: Organization,
    exit_node: ExitNode | None = None,
    name: str = "site-1",
    pub_key: str | None = "c2l0ZS1wdWJrZXk=",
) -> Site:
    site = Site(
        org_id=org.id,
        exit_node_id=exit_node.exit_node_id if exit_node else None,
        name=name,
        pub_key=pub_key,
    )
    db.add(site)
    await db.flush()
    return site


async def create_resource(db: AsyncSession, site: Site, name: str = "web") -> Resource:
    resource = Resource(site_id=site.id, org_id=site.org_id, name=name)
    db.add(resource)
    await db.flush()
    return resource


async def create_target(db: AsyncSession, resource: Resource, ip: str) -> Target:
    target = Target(resource_id=resource.id, ip=ip, port=80, protocol="tcp")
    db.add(target)
    await db.flush()
    return target

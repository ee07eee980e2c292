import pytest
from sqlalchemy import delete, select

from app.core.errors import BadRequest, Forbidden, InternalError, Unauthenticated
from app.features.permissions.actions import Action
from app.features.permissions.defaults import ADMIN_ROLE, READ_ACTIONS
from app.features.permissions.dependencies import (
    is_action_permitted,
    require_action,
    seed_default_roles,
)
from app.features.permissions.models import RoleAction, UserAction
from app.features.permissions.schemas import RequestContext
from tests.factories import (
    add_member,
    create_org,
    create_role,
    create_user,
    grant_user_action,
)


class BrokenSession:
    """Session stand-in whose every query fails."""

    async def scalar(self, *args, **kwargs):
        raise ConnectionError("database unavailable")


@pytest.fixture
async def member(db):
    user = await create_user(db)
    org = await create_org(db)
    role = await create_role(db, org, "Viewer", actions=[Action.GET_SITE])
    await add_member(db, user, org, role)
    return user, org, role


async def test_direct_grant_allows_without_role_grant(db, member):
    user, org, _ = member
    await grant_user_action(db, user, org, Action.DELETE_SITE)

    context = RequestContext(user_id=user.id, org_id=org.id)
    assert await is_action_permitted(db, Action.DELETE_SITE, context) is True


async def test_direct_grant_wins_over_pre_resolved_role(db, member):
    user, org, _ = member
    other_role = await create_role(db, org, "Nobody")
    await grant_user_action(db, user, org, Action.UPDATE_ORG)

    context = RequestContext(user_id=user.id, org_id=org.id, role_id=other_role.id)
    assert await is_action_permitted(db, Action.UPDATE_ORG, context) is True


async def test_role_grant_allows(db, member):
    user, org, _ = member
    context = RequestContext(user_id=user.id, org_id=org.id)
    assert await is_action_permitted(db, Action.GET_SITE, context) is True


async def test_no_grant_denies_without_error(db, member):
    user, org, _ = member
    context = RequestContext(user_id=user.id, org_id=org.id)
    assert await is_action_permitted(db, Action.CREATE_SITE, context) is False


async def test_non_member_is_forbidden(db):
    user = await create_user(db)
    org = await create_org(db)

    with pytest.raises(Forbidden) as exc_info:
        await is_action_permitted(db, Action.GET_ORG, RequestContext(user_id=user.id, org_id=org.id))
    assert exc_info.value.status_code == 403


async def test_missing_user_is_unauthenticated_before_store_access():
    with pytest.raises(Unauthenticated):
        await is_action_permitted(BrokenSession(), Action.GET_ORG, RequestContext(org_id="org"))


async def test_missing_org_is_bad_request_before_store_access():
    with pytest.raises(BadRequest):
        await is_action_permitted(BrokenSession(), Action.GET_ORG, RequestContext(user_id="user"))


async def test_store_failure_is_internal_error_not_deny():
    context = RequestContext(user_id="user", org_id="org")
    with pytest.raises(InternalError) as exc_info:
        await is_action_permitted(BrokenSession(), Action.GET_ORG, context)
    assert exc_info.value.status_code == 500
    assert isinstance(exc_info.value.__cause__, ConnectionError)


async def test_pre_resolved_role_skips_membership_lookup(db):
    user = await create_user(db)
    org = await create_org(db)
    role = await create_role(db, org, "Editor", actions=[Action.UPDATE_SITE])

    # No membership row: the lookup would raise Forbidden
    context = RequestContext(user_id=user.id, org_id=org.id, role_id=role.id)
    assert await is_action_permitted(db, Action.UPDATE_SITE, context) is True


async def test_direct_grant_does_not_cross_organizations(db):
    user = await create_user(db)
    org_a = await create_org(db, "OrgA")
    org_b = await create_org(db, "OrgB")
    role_a = await create_role(db, org_a, "Viewer")
    role_b = await create_role(db, org_b, "Viewer")
    await add_member(db, user, org_a, role_a)
    await add_member(db, user, org_b, role_b)
    await grant_user_action(db, user, org_a, Action.DELETE_RESOURCE)

    assert await is_action_permitted(
        db, Action.DELETE_RESOURCE, RequestContext(user_id=user.id, org_id=org_a.id)
    ) is True
    assert await is_action_permitted(
        db, Action.DELETE_RESOURCE, RequestContext(user_id=user.id, org_id=org_b.id)
    ) is False


async def test_role_grant_does_not_cross_organizations(db):
    user = await create_user(db)
    org_a = await create_org(db, "OrgA")
    org_b = await create_org(db, "OrgB")
    role = await create_role(db, org_a, "Editor", actions=[Action.UPDATE_TARGET])

    context = RequestContext(user_id=user.id, org_id=org_b.id, role_id=role.id)
    assert await is_action_permitted(db, Action.UPDATE_TARGET, context) is False


async def test_repeated_checks_agree(db, member):
    user, org, _ = member
    context = RequestContext(user_id=user.id, org_id=org.id)

    for action in (Action.GET_SITE, Action.DELETE_SITE):
        first = await is_action_permitted(db, action, context)
        second = await is_action_permitted(db, action, context)
        assert first == second


async def test_revoked_grant_takes_effect_on_next_check(db, member):
    user, org, role = member
    context = RequestContext(user_id=user.id, org_id=org.id)
    assert await is_action_permitted(db, Action.GET_SITE, context) is True

    await db.execute(delete(RoleAction).where(RoleAction.role_id == role.id))
    await db.flush()

    assert await is_action_permitted(db, Action.GET_SITE, context) is False


async def test_require_action_returns_context_when_permitted(db, member):
    user, org, role = member
    context = RequestContext(user_id=user.id, org_id=org.id, role_id=role.id)

    dependency = require_action(Action.GET_SITE)
    assert await dependency(context=context, db=db) == context


async def test_require_action_forbids_when_denied(db, member):
    user, org, role = member
    context = RequestContext(user_id=user.id, org_id=org.id, role_id=role.id)

    dependency = require_action(Action.DELETE_ORG)
    with pytest.raises(Forbidden):
        await dependency(context=context, db=db)


async def test_seed_default_roles(db):
    org = await create_org(db)
    roles = await seed_default_roles(db, org.id)

    admin_actions = set(await db.scalars(
        select(RoleAction.action_id).where(RoleAction.role_id == roles[ADMIN_ROLE].id)
    ))
    member_actions = set(await db.scalars(
        select(RoleAction.action_id).where(RoleAction.role_id == roles["Member"].id)
    ))
    assert admin_actions == {action.value for action in Action}
    assert member_actions == {action.value for action in READ_ACTIONS}
    assert roles[ADMIN_ROLE].is_admin

    again = await seed_default_roles(db, org.id)
    assert {name: role.id for name, role in again.items()} == {name: role.id for name, role in roles.items()}


async def test_user_action_rows_are_scoped_by_org(db, member):
    user, org, _ = member
    await grant_user_action(db, user, org, Action.LIST_USERS)

    rows = (await db.scalars(select(UserAction).where(UserAction.user_id == user.id))).all()
    assert [(row.action_id, row.org_id) for row in rows] == [("listUsers", org.id)]

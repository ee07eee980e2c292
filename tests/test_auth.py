import time

import jwt
import pytest
from appwrite.exception import AppwriteException
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy import select

from app.core.errors import Forbidden, Unauthenticated
from app.features.users import auth, dependencies
from app.features.users.auth import verify_jwt_token
from app.features.users.dependencies import get_current_user
from app.features.users.models import User


def make_token(**claims):
    return jwt.encode(claims, "appwrite-signing-key-used-only-in-tests", algorithm="HS256")


def bearer(token):
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


def test_verify_jwt_token_returns_payload():
    payload = verify_jwt_token(make_token(userId="aw-123", exp=int(time.time()) + 60))
    assert payload["userId"] == "aw-123"


def test_expired_token_is_unauthenticated():
    with pytest.raises(Unauthenticated) as exc_info:
        verify_jwt_token(make_token(userId="aw-123", exp=int(time.time()) - 60))
    assert exc_info.value.detail == "Token has expired"


def test_garbage_token_is_unauthenticated():
    with pytest.raises(Unauthenticated):
        verify_jwt_token("not-a-jwt")


async def test_missing_credentials(db):
    with pytest.raises(Unauthenticated):
        await get_current_user(None, db)


async def test_token_without_user_id(db):
    with pytest.raises(Unauthenticated) as exc_info:
        await get_current_user(bearer(make_token(sub="x")), db)
    assert exc_info.value.detail == "Invalid token payload"


def fake_account(accounts, calls=None):
    """Stand in for Appwrite: ``accounts`` maps accepted tokens to their account."""
    async def get_appwrite_account(token):
        if calls is not None:
            calls.append(token)
        if token not in accounts:
            raise Unauthenticated("Failed to verify user: Invalid token")
        return accounts[token]
    return get_appwrite_account


async def test_unknown_user_is_provisioned_once(db, monkeypatch):
    token = make_token(userId="aw-carol")
    calls = []
    monkeypatch.setattr(
        dependencies,
        "get_appwrite_account",
        fake_account({token: {"$id": "aw-carol", "email": "carol@example.com", "name": "Carol"}}, calls),
    )

    first = await get_current_user(bearer(token), db)
    second = await get_current_user(bearer(token), db)

    assert first.id == second.id
    assert first.email == "carol@example.com"
    assert first.last_login_at is not None
    assert len((await db.scalars(select(User).where(User.appwrite_id == "aw-carol"))).all()) == 1
    # Every request is confirmed with Appwrite
    assert calls == [token, token]


async def test_forged_token_for_existing_user_is_rejected(db, monkeypatch):
    genuine = make_token(userId="aw-erin")
    monkeypatch.setattr(
        dependencies,
        "get_appwrite_account",
        fake_account({genuine: {"$id": "aw-erin", "email": "erin@example.com", "name": "Erin"}}),
    )
    await get_current_user(bearer(genuine), db)

    forged = jwt.encode({"userId": "aw-erin"}, "attacker-chosen-key", algorithm="HS256")
    with pytest.raises(Unauthenticated) as exc_info:
        await get_current_user(bearer(forged), db)
    assert exc_info.value.status_code == 401


async def test_token_for_another_account_is_rejected(db, monkeypatch):
    token = make_token(userId="aw-frank")
    monkeypatch.setattr(
        dependencies,
        "get_appwrite_account",
        fake_account({token: {"$id": "aw-grace", "email": "grace@example.com", "name": "Grace"}}),
    )

    with pytest.raises(Unauthenticated) as exc_info:
        await get_current_user(bearer(token), db)
    assert exc_info.value.detail == "Token does not match the Appwrite account"
    assert await db.scalar(select(User).where(User.appwrite_id == "aw-frank")) is None


async def test_appwrite_rejection_is_unauthenticated(monkeypatch):
    class RejectingAccount:
        def __init__(self, client):
            pass

        def get(self):
            raise AppwriteException("Invalid token passed in the request.", 401)

    monkeypatch.setattr(auth, "Account", RejectingAccount)
    with pytest.raises(Unauthenticated) as exc_info:
        await auth.get_appwrite_account(make_token(userId="aw-heidi"))
    assert exc_info.value.detail.startswith("Failed to verify user")


async def test_deactivated_user_is_forbidden(db, monkeypatch):
    token = make_token(userId="aw-dave")
    monkeypatch.setattr(
        dependencies,
        "get_appwrite_account",
        fake_account({token: {"$id": "aw-dave", "email": "dave@example.com", "name": "Dave"}}),
    )
    user = await get_current_user(bearer(token), db)
    user.is_active = False
    await db.commit()

    with pytest.raises(Forbidden):
        await get_current_user(bearer(token), db)

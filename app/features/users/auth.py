"""
Authentication utilities for Appwrite JWT verification.
"""
import jwt
from fastapi.concurrency import run_in_threadpool
from appwrite.client import Client
from appwrite.services.account import Account
from appwrite.exception import AppwriteException

from app.core import config
from app.core.errors import Unauthenticated


def get_jwt_client(token: str) -> Client:
    """Build an Appwrite client acting as the holder of ``token``."""
    client = Client()
    client.set_endpoint(config.APPWRITE_ENDPOINT)
    client.set_project(config.APPWRITE_PROJECT_ID)
    client.set_jwt(token)
    return client


def verify_jwt_token(token: str) -> dict:
    """
    Decode an Appwrite JWT and return its payload.
    
    Only the claims are read here; the token is not trusted until
    Appwrite accepts it in get_appwrite_account.
    
    Raises:
        Unauthenticated: If the token is malformed or expired
    """
    try:
        return jwt.decode(
            token,
            options={"verify_signature": False, "verify_exp": True}
        )
    except jwt.ExpiredSignatureError:
        raise Unauthenticated("Token has expired")
    except jwt.InvalidTokenError as e:
        raise Unauthenticated(f"Invalid token: {str(e)}")


async def get_appwrite_account(token: str) -> dict:
    """
    Get the account the JWT belongs to from Appwrite.
    
    Appwrite rejects forged, revoked and expired tokens, so a successful
    call proves the caller holds a session for the returned account.
    
    Raises:
        Unauthenticated: If Appwrite rejects the token or the API call fails
    """
    try:
        account = Account(get_jwt_client(token))
        return await run_in_threadpool(account.get)
    except AppwriteException as e:
        raise Unauthenticated(f"Failed to verify user: {str(e)}")

"""
FastAPI dependencies for authentication.
"""
from typing import Annotated
from datetime import datetime, timezone
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database.engine import get_db
from app.core.errors import Forbidden, Unauthenticated
from app.features.users.models import User
from app.features.users.auth import verify_jwt_token, get_appwrite_account
from app.utils import get_logger


log = get_logger(__name__)
security = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[AsyncSession, Depends(get_db)]
) -> User:
    """
    Get the current authenticated user from JWT token.
    
    This dependency:
    1. Extracts JWT from Authorization header
    2. Decodes the JWT issued by Appwrite and confirms it with Appwrite
    3. Looks up or provisions the user in the local database
    4. Updates last_login_at timestamp
    """
    if credentials is None:
        raise Unauthenticated("User not authenticated")
    
    payload = verify_jwt_token(credentials.credentials)
    appwrite_user_id = payload.get("userId")
    
    if not appwrite_user_id:
        raise Unauthenticated("Invalid token payload")
    
    # Appwrite confirms the token on every request, not only on first login
    account = await get_appwrite_account(credentials.credentials)
    if account.get("$id") != appwrite_user_id:
        raise Unauthenticated("Token does not match the Appwrite account")
    
    user = await db.scalar(select(User).where(User.appwrite_id == appwrite_user_id))
    
    if user is None:
        user = User(
            appwrite_id=appwrite_user_id,
            email=account.get("email", ""),
            name=account.get("name", "Unknown"),
        )
        db.add(user)
        log.info("Provisioned user for appwrite id %s", appwrite_user_id)
    
    user.last_login_at = datetime.now(timezone.utc)
    await db.commit()
    await db.refresh(user)
    
    if not user.is_active:
        raise Forbidden("User account is deactivated")
    
    return user


def get_authorization_header(request) -> str:
    """
    Extract authorization header for rate limiting.
    Used with slowapi Limiter.
    """
    auth = request.headers.get("Authorization", "")
    return auth or "anonymous"

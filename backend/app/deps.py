"""
FastAPI dependencies - get_optional_user, get_current_user, get_admin_user.
"""

import asyncio
from typing import Optional

from fastapi import Request, HTTPException, Depends

from .config import AUTH_DISABLED
from .models.user import AuthUser
from .utils.auth import decode_token

# Caller identity when AUTH_DISABLED is set for local development
DEV_USER = AuthUser(uid="dev-admin", email="dev@localhost", admin=True)


def _bearer_token(request: Request) -> Optional[str]:
    auth_header = request.headers.get("Authorization", "")
    if auth_header.startswith("Bearer "):
        return auth_header.split(" ", 1)[1].strip() or None
    return None


async def get_optional_user(request: Request) -> Optional[AuthUser]:
    """Caller from the bearer token, or None when no token was sent"""
    if AUTH_DISABLED:
        return DEV_USER

    token = _bearer_token(request)
    if not token:
        return None

    # verify_id_token may fetch signing certificates, keep it off the event loop
    loop = asyncio.get_running_loop()
    claims = await loop.run_in_executor(None, decode_token, token)
    if not claims:
        raise HTTPException(status_code=401, detail="Unauthorized: Invalid token")

    return AuthUser(
        uid=claims.get("uid") or claims.get("sub"),
        email=claims.get("email"),
        admin=claims.get("admin") is True,
    )


async def get_current_user(user: Optional[AuthUser] = Depends(get_optional_user)) -> AuthUser:
    """Dependency requiring a signed-in caller"""
    if user is None:
        raise HTTPException(status_code=401, detail="Unauthorized: No token provided")
    return user


async def get_admin_user(user: AuthUser = Depends(get_current_user)) -> AuthUser:
    """Dependency to ensure the caller carries the admin claim"""
    if not user.admin:
        raise HTTPException(status_code=403, detail="Forbidden: Not an admin")
    return user

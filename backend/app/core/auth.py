import logging
from datetime import datetime
from typing import Optional

from fastapi import Depends, HTTPException, Header, Request
from firebase_admin import auth, exceptions as firebase_exceptions

from backend.app.core.config import settings
from backend.app.core.rbac import Permission, has_permission
from backend.app.schemas.user import UserProfile, UserRole
from backend.app.services.profiles import profile_store

logger = logging.getLogger(__name__)

DEV_USER = UserProfile(
    uid="dev-user-1",
    email="dev@glampack.local",
    display_name="Dev User",
    role=UserRole.ADMIN,
    created_at=datetime(2024, 1, 1),
)


def _dev_bypass_enabled() -> bool:
    return settings.is_development and settings.DEV_AUTH_BYPASS


def verify_credentials(authorization: Optional[str], session_cookie: Optional[str]) -> Optional[dict]:
    """
    Verify a Bearer ID token, or else the session cookie, and return the decoded claims.
    Returns None when neither credential is present; raises on an invalid one.
    """
    if authorization and authorization.startswith("Bearer "):
        token = authorization[len("Bearer "):].strip()
        return auth.verify_id_token(token)
    if session_cookie:
        return auth.verify_session_cookie(session_cookie, check_revoked=True)
    return None


def _resolve_user(request: Request, authorization: Optional[str]) -> Optional[UserProfile]:
    session_cookie = request.cookies.get(settings.SESSION_COOKIE_NAME)
    decoded = verify_credentials(authorization, session_cookie)
    if decoded is None:
        return DEV_USER if _dev_bypass_enabled() else None

    return profile_store.get_or_create(
        decoded["uid"],
        email=decoded.get("email", ""),
        display_name=decoded.get("name"),
    )


async def get_current_user(request: Request, authorization: Optional[str] = Header(None)) -> UserProfile:
    """
    Verify the Firebase credential on the request and return the caller's profile.
    For development with DEV_AUTH_BYPASS, a request without credentials is the dev admin.
    """
    try:
        user = _resolve_user(request, authorization)
    except (ValueError, auth.TokenSignError, firebase_exceptions.FirebaseError) as e:
        logger.info("Rejected credential on %s: %s", request.url.path, e)
        raise HTTPException(status_code=401, detail="Invalid or expired token")

    if user is None:
        raise HTTPException(status_code=401, detail="Authentication required")
    return user


async def get_optional_user(request: Request, authorization: Optional[str] = Header(None)) -> Optional[UserProfile]:
    """Like get_current_user, but an anonymous or invalid credential yields None."""
    try:
        return _resolve_user(request, authorization)
    except (ValueError, auth.TokenSignError, firebase_exceptions.FirebaseError) as e:
        logger.info("Ignoring invalid credential on %s: %s", request.url.path, e)
        return None


def require_permission(permission: Permission):
    """
    Dependency that checks the user's role (plus any per-user overrides)
    grants the given permission.
    """
    async def permission_checker(current_user: UserProfile = Depends(get_current_user)):
        if not has_permission(current_user.role, permission, current_user.permissions):
            raise HTTPException(
                status_code=403,
                detail="Forbidden - Insufficient permissions",
            )
        return current_user

    return permission_checker

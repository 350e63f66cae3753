from datetime import timedelta
import logging

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from firebase_admin import auth, exceptions as firebase_exceptions

from backend.app.core.auth import get_optional_user
from backend.app.core.config import settings
from backend.app.core.errors import handle_firebase_error
from backend.app.schemas.user import AuthUser, SessionRequest, SignupRequest, UserProfile
from backend.app.services.profiles import profile_store

router = APIRouter()
logger = logging.getLogger(__name__)


def _set_session_cookie(response: Response, session_cookie: str):
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=session_cookie,
        httponly=True,
        secure=not settings.is_development,
        samesite="lax",
        max_age=settings.SESSION_COOKIE_DAYS * 24 * 60 * 60,
        path="/",
    )


@router.post("/session")
async def create_session(request: SessionRequest, response: Response):
    """
    Exchange a Firebase ID token (obtained by the browser after sign-in) for a
    session cookie, so page requests are authenticated without a header.
    """
    try:
        decoded = auth.verify_id_token(request.id_token)
        session_cookie = auth.create_session_cookie(
            request.id_token, expires_in=timedelta(days=settings.SESSION_COOKIE_DAYS)
        )
    except (ValueError, firebase_exceptions.FirebaseError) as e:
        logger.info("Session creation rejected: %s", e)
        raise HTTPException(status_code=401, detail=handle_firebase_error(e))

    profile = profile_store.get_or_create(
        decoded["uid"], email=decoded.get("email", ""), display_name=decoded.get("name")
    )
    _set_session_cookie(response, session_cookie)
    return {"data": AuthUser.from_profile(profile).model_dump()}


@router.post("/logout")
async def logout(response: Response, current_user: UserProfile = Depends(get_optional_user)):
    """Clear the session cookie and revoke the user's refresh tokens."""
    if current_user is not None:
        try:
            auth.revoke_refresh_tokens(current_user.uid)
        except (ValueError, firebase_exceptions.FirebaseError) as e:
            logger.warning("Could not revoke tokens for %s: %s", current_user.uid, e)
    response.delete_cookie(settings.SESSION_COOKIE_NAME, path="/")
    return {"success": True}


@router.post("/signup", status_code=201)
async def signup(request: SignupRequest):
    """Create an email/password account. New accounts start with the viewer role."""
    try:
        user = auth.create_user(email=request.email, password=request.password)
    except auth.EmailAlreadyExistsError as e:
        raise HTTPException(status_code=409, detail=handle_firebase_error(e))
    except (ValueError, firebase_exceptions.FirebaseError) as e:
        raise HTTPException(status_code=400, detail=handle_firebase_error(e))

    profile = profile_store.get_or_create(user.uid, email=request.email)
    logger.info("Signed up new user %s", user.uid)
    return {"data": AuthUser.from_profile(profile).model_dump()}


@router.get("/status")
async def auth_status(request: Request, current_user: UserProfile = Depends(get_optional_user)):
    """Who is signed in, if anyone. Used by the browser to refresh the cached role."""
    if current_user is None:
        return {"authenticated": False, "user": None}
    return {"authenticated": True, "user": AuthUser.from_profile(current_user).model_dump()}

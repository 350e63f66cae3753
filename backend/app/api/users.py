from fastapi import APIRouter, Depends, HTTPException
from firebase_admin import auth
from typing import List
from backend.app.core.auth import get_current_user, require_permission
from backend.app.core.rbac import Permission, get_role_permissions
from backend.app.schemas.user import UserProfile, UserProfileUpdate, UserRole, UserRoleUpdate
from backend.app.services.profiles import profile_store
import logging

router = APIRouter()
logger = logging.getLogger(__name__)


def _with_permissions(profile: UserProfile) -> dict:
    data = profile.model_dump()
    data["role_permissions"] = [p.value for p in get_role_permissions(profile.role)]
    data["permissions"] = profile.permissions or []
    return data


@router.get("/me")
async def get_my_profile(current_user: UserProfile = Depends(get_current_user)):
    """Get the current user's profile, role and permission overrides."""
    return {"data": _with_permissions(current_user)}


@router.patch("/me")
async def update_my_profile(
    request: UserProfileUpdate,
    current_user: UserProfile = Depends(get_current_user),
):
    """Users may only change their display name and avatar."""
    updates = request.model_dump(exclude_unset=True, exclude_none=True)
    if not updates:
        raise HTTPException(status_code=400, detail="No valid fields to update")

    profile = profile_store.update(current_user.uid, updates)
    return {"data": _with_permissions(profile)}


@router.get("/", response_model=List[UserProfile])
async def list_all_users(current_user: UserProfile = Depends(require_permission(Permission.VIEW_USERS))):
    return profile_store.list()


@router.put("/{uid}/role")
async def update_user_role(
    uid: str,
    role_update: UserRoleUpdate,
    current_user: UserProfile = Depends(require_permission(Permission.UPDATE_USER_ROLE)),
):
    if profile_store.get(uid) is None:
        raise HTTPException(status_code=404, detail="User not found")

    # Prevent demoting yourself
    if uid == current_user.uid and role_update.role != UserRole.ADMIN:
        raise HTTPException(status_code=400, detail="Cannot demote yourself")

    profile_store.set_role(uid, role_update.role)
    logger.info("User %s set role of %s to %s", current_user.uid, uid, role_update.role.value)
    return {"message": f"User role updated to {role_update.role.value}"}


@router.delete("/{uid}")
async def delete_user(
    uid: str,
    current_user: UserProfile = Depends(require_permission(Permission.DELETE_USER)),
):
    if uid == current_user.uid:
        raise HTTPException(status_code=400, detail="Cannot delete yourself")
    if profile_store.get(uid) is None:
        raise HTTPException(status_code=404, detail="User not found")

    try:
        auth.delete_user(uid)
    except auth.UserNotFoundError:
        logger.warning("User %s had a profile but no auth account", uid)
    profile_store.delete(uid)
    return {"success": True, "message": "User deleted"}

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from backend.app.core.errors import ApiError
from backend.app.core.firebase import db
from backend.app.schemas.user import UserProfile, UserRole

logger = logging.getLogger(__name__)

DEFAULT_ROLE = UserRole.VIEWER


class ProfilesUnavailableError(ApiError):
    def __init__(self):
        super().__init__(503, "User profiles are unavailable", code="PROFILES_UNAVAILABLE")


def _to_role(value) -> UserRole:
    try:
        return UserRole(value or DEFAULT_ROLE.value)
    except ValueError:
        logger.warning("Unknown role %r stored on profile, falling back to %s", value, DEFAULT_ROLE.value)
        return DEFAULT_ROLE


def _profile_from_doc(uid: str, data: Dict[str, Any], email: Optional[str] = None) -> UserProfile:
    return UserProfile(
        uid=data.get("uid", uid),
        email=email if email is not None else data.get("email", ""),
        role=_to_role(data.get("role")),
        created_at=data.get("created_at") or datetime.utcnow(),
        display_name=data.get("display_name"),
        avatar=data.get("avatar"),
        permissions=data.get("permissions") or [],
    )


class ProfileStore:
    """User profiles kept in the Firestore `users` collection, keyed by Firebase uid."""

    collection = "users"

    def __init__(self, client=None):
        self.db = client if client is not None else db

    def _collection(self):
        if self.db is None:
            raise ProfilesUnavailableError()
        return self.db.collection(self.collection)

    def _ref(self, uid: str):
        return self._collection().document(uid)

    def get_or_create(self, uid: str, email: str = "", display_name: Optional[str] = None) -> UserProfile:
        if self.db is None:
            # Without Firestore every user gets the default role
            return UserProfile(uid=uid, email=email, role=DEFAULT_ROLE, created_at=datetime.utcnow())

        ref = self._ref(uid)
        doc = ref.get()
        if doc.exists:
            return _profile_from_doc(uid, doc.to_dict() or {}, email or None)

        # First time user - create profile with the default role
        data = {
            "uid": uid,
            "email": email,
            "display_name": display_name,
            "role": DEFAULT_ROLE.value,
            "permissions": [],
            "created_at": datetime.utcnow(),
        }
        ref.set(data)
        logger.info("Created profile for new user %s", uid)
        return _profile_from_doc(uid, data)

    def get(self, uid: str) -> Optional[UserProfile]:
        doc = self._ref(uid).get()
        if not doc.exists:
            return None
        return _profile_from_doc(uid, doc.to_dict() or {})

    def list(self) -> List[UserProfile]:
        return [_profile_from_doc(doc.id, doc.to_dict() or {}) for doc in self._collection().stream()]

    def set_role(self, uid: str, role: UserRole, email: Optional[str] = None) -> None:
        data = {"role": role.value, "updated_at": datetime.utcnow()}
        if email is not None:
            data["email"] = email
        self._ref(uid).set(data, merge=True)

    def update(self, uid: str, updates: Dict[str, Any]) -> UserProfile:
        ref = self._ref(uid)
        ref.set({**updates, "updated_at": datetime.utcnow()}, merge=True)
        return _profile_from_doc(uid, ref.get().to_dict() or {})

    def delete(self, uid: str) -> None:
        self._ref(uid).delete()


profile_store = ProfileStore()

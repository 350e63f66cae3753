from pydantic import BaseModel, EmailStr, Field, model_validator
from typing import Optional, List
from datetime import datetime
from enum import Enum


class UserRole(str, Enum):
    ADMIN = "admin"
    MANAGER = "manager"
    STAFF = "staff"
    VIEWER = "viewer"


class UserProfile(BaseModel):
    uid: str
    email: str
    role: UserRole = UserRole.VIEWER
    created_at: datetime
    display_name: Optional[str] = None
    avatar: Optional[str] = None
    # Optional permission overrides granted on top of the role
    permissions: Optional[List[str]] = None

    class Config:
        from_attributes = True


class AuthUser(BaseModel):
    uid: str
    email: Optional[str] = None
    role: Optional[UserRole] = None
    permissions: List[str] = []

    @classmethod
    def from_profile(cls, profile: UserProfile) -> "AuthUser":
        return cls(
            uid=profile.uid,
            email=profile.email or None,
            role=profile.role,
            permissions=profile.permissions or [],
        )


class UserRoleUpdate(BaseModel):
    role: UserRole


class UserProfileUpdate(BaseModel):
    """Fields a user may change on their own profile. Role and permissions are not among them."""
    display_name: Optional[str] = None
    avatar: Optional[str] = None


class SessionRequest(BaseModel):
    id_token: str = Field(min_length=1)


class SignupRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6)
    confirm_password: str = Field(min_length=6)

    @model_validator(mode="after")
    def passwords_match(self):
        if self.password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self

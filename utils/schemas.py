"""
Pydantic schemas shared by the store, the auth service and the routes.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# ═══════════════════════════════════════════════════════════════════════════════
# Credential Store — data-transfer objects
# ═══════════════════════════════════════════════════════════════════════════════


class NewUser(BaseModel):
    """Fields required to create a user record (password already hashed)."""

    username: str
    email: str
    city: str
    mobile_number: str
    password_hash: str
    profile_picture: Optional[str] = None


class UserRecord(NewUser):
    """A stored user including the password hash. Never leaves the server."""

    id: str


class PublicUser(BaseModel):
    """User projection without the password hash, in wire field names."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    username: str
    email: str
    city: str
    mobile_number: str = Field(alias="mobileNumber")
    profile_picture: Optional[str] = Field(default=None, alias="profilePicture")


# ═══════════════════════════════════════════════════════════════════════════════
# Auth Service — inputs / outputs
# ═══════════════════════════════════════════════════════════════════════════════


class SignupForm(BaseModel):
    username: Optional[str] = None
    email: Optional[str] = None
    city: Optional[str] = None
    mobile_number: Optional[str] = None
    password: Optional[str] = None


class ImageUpload(BaseModel):
    data: bytes
    filename: str
    content_type: str = ""


class SignupResult(BaseModel):
    user_id: str
    username: str
    profile_picture: Optional[str] = None


class LoginResult(BaseModel):
    token: str
    user_id: str
    username: str


class AuthenticatedUser(BaseModel):
    """Identity attached to a request once the Bearer token verifies."""

    subject_id: str
    username: str

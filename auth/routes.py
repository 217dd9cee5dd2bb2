"""
Auth API routes — signup, login, dashboard.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from pydantic import BaseModel

from auth.dependencies import get_auth_service, get_current_user
from auth.service import AuthService
from utils.schemas import AuthenticatedUser, ImageUpload, SignupForm

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


# ── Request / response schemas ─────────────────────────────────────────


class LoginRequest(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None


class SignupResponse(BaseModel):
    success: bool
    message: str


class LoginResponse(BaseModel):
    success: bool
    message: str
    token: str


# ── Endpoints ──────────────────────────────────────────────────────────


@router.post("/signup", status_code=status.HTTP_201_CREATED, response_model=SignupResponse)
async def signup(
    username: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    city: Optional[str] = Form(None),
    mobile_number: Optional[str] = Form(None, alias="mobileNumber"),
    password: Optional[str] = Form(None),
    profile_picture: Optional[UploadFile] = File(None, alias="profilePicture"),
    service: AuthService = Depends(get_auth_service),
) -> Dict[str, Any]:
    """Register a new user from a multipart form."""
    image = None
    if profile_picture is not None and profile_picture.filename:
        # one byte past the limit is enough for the size check to reject it
        limit = service.media.max_bytes
        image = ImageUpload(
            data=await profile_picture.read(limit + 1 if limit is not None else -1),
            filename=profile_picture.filename,
            content_type=profile_picture.content_type or "",
        )

    await service.signup(
        SignupForm(
            username=username,
            email=email,
            city=city,
            mobile_number=mobile_number,
            password=password,
        ),
        image,
    )
    return {"success": True, "message": "User registered successfully!"}


@router.post("/login", response_model=LoginResponse)
async def login(
    req: LoginRequest,
    service: AuthService = Depends(get_auth_service),
) -> Dict[str, Any]:
    """Login with username + password."""
    result = await service.login(req.username, req.password)
    return {"success": True, "message": "Login successful!", "token": result.token}


@router.get("/dashboard")
async def dashboard(
    current_user: AuthenticatedUser = Depends(get_current_user),
    service: AuthService = Depends(get_auth_service),
) -> Dict[str, Any]:
    """Return the logged-in user's profile, without the password hash."""
    user = await service.profile(current_user.subject_id)
    return {
        "message": "User data fetched successfully",
        "user": user.model_dump(by_alias=True),
    }

from fastapi import APIRouter, Depends, HTTPException
from app.database.store import BackingStore, StoreError, get_store
from app.modules.auth.schemas import (
    LoginRequest, RegisterRequest, TokenResponse, RegisterResponse,
    EmailRequest, MessageResponse
)
from app.modules.auth.service import AuthService
from app.modules.profiles.service import ProfileService
from app.core.dependencies import get_auth_service, get_current_token, get_current_user_id
from typing import Dict
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=RegisterResponse, status_code=201)
async def register(
    register_data: RegisterRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Register a new user"""
    return service.register(register_data)


@router.post("/login", response_model=TokenResponse)
async def login(
    login_data: LoginRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Login and get access token"""
    return service.login(login_data)


@router.post("/logout", response_model=MessageResponse)
async def logout(
    token: str = Depends(get_current_token),
    service: AuthService = Depends(get_auth_service)
):
    """Logout and invalidate token"""
    service.logout(token)
    return MessageResponse(message="Logged out successfully")


@router.post("/password-reset", response_model=MessageResponse)
async def password_reset(
    request: EmailRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Send a password reset email"""
    return MessageResponse(message=service.send_password_reset(request.email))


@router.post("/magic-link", response_model=MessageResponse)
async def magic_link(
    request: EmailRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Send a passwordless sign-in link"""
    return MessageResponse(message=service.send_magic_link(request.email))


@router.get("/me")
async def get_current_user(
    current_user: Dict = Depends(get_current_user_id),
    store: BackingStore = Depends(get_store)
):
    """Get current authenticated user, creating their profile row on first sight."""
    full_name = current_user.get("user_metadata", {}).get("full_name")
    try:
        ProfileService(store).ensure_profile(current_user["id"], full_name)
    except StoreError as e:
        raise HTTPException(status_code=502, detail=e.message)
    display_name = full_name or (current_user.get("email") or "").split("@")[0] or None
    return {**current_user, "display_name": display_name}

import hashlib
import time
from supabase import Client
from app.database.supabase_client import create_auth_client
from app.modules.auth.schemas import LoginRequest, RegisterRequest, TokenResponse, RegisterResponse
from app.config.settings import settings
from fastapi import HTTPException
from typing import Callable, Dict, Any
import logging

logger = logging.getLogger(__name__)

# In-memory cache for get_current_user to reduce Supabase auth calls (e.g. many parallel requests with same token)
_AUTH_USER_CACHE: Dict[str, tuple] = {}
_AUTH_CACHE_TTL_SEC = 60
_AUTH_CACHE_MAX_SIZE = 500


def clear_auth_cache() -> None:
    _AUTH_USER_CACHE.clear()


class AuthService:
    def __init__(self, supabase: Client, auth_client_factory: Callable[[], Client] = create_auth_client):
        self.supabase = supabase
        # Everything except token lookup runs on a throwaway client so the shared
        # client keeps the anon identity for store queries
        self.auth_client_factory = auth_client_factory

    def register(self, register_data: RegisterRequest) -> RegisterResponse:
        """Register a new user using Supabase Auth"""
        options: Dict[str, Any] = {"data": {"full_name": register_data.full_name}}
        if settings.site_url:
            options["email_redirect_to"] = settings.site_url
        try:
            auth_response = self.auth_client_factory().auth.sign_up({
                "email": register_data.email,
                "password": register_data.password,
                "options": options
            })
        except Exception as e:
            # Provider message is shown as-is (e.g. "User already registered")
            logger.info(f"Signup rejected for {register_data.email}: {e}")
            raise HTTPException(status_code=400, detail=str(e))

        if not auth_response.user:
            raise HTTPException(status_code=400, detail="Failed to register user")

        return RegisterResponse(
            user_id=auth_response.user.id,
            email=auth_response.user.email or register_data.email,
            message="Account created! Check your email to confirm."
        )

    def login(self, login_data: LoginRequest) -> TokenResponse:
        """Authenticate user using Supabase Auth"""
        try:
            auth_response = self.auth_client_factory().auth.sign_in_with_password({
                "email": login_data.email,
                "password": login_data.password
            })
        except Exception as e:
            raise HTTPException(status_code=401, detail=str(e))

        if not auth_response.user or not auth_response.session:
            raise HTTPException(status_code=401, detail="Invalid login credentials")

        return TokenResponse(
            access_token=auth_response.session.access_token,
            token_type="bearer",
            user_id=auth_response.user.id,
            email=auth_response.user.email or login_data.email
        )

    def send_password_reset(self, email: str) -> str:
        """Ask Supabase Auth to email a password reset link"""
        options = {"redirect_to": settings.site_url} if settings.site_url else {}
        try:
            self.auth_client_factory().auth.reset_password_for_email(email, options)
        except Exception as e:
            raise HTTPException(status_code=400, detail=str(e))
        return "Password reset email sent!"

    def send_magic_link(self, email: str) -> str:
        """Passwordless sign-in: Supabase Auth emails a one-time login link"""
        credentials: Dict[str, Any] = {"email": email}
        if settings.site_url:
            credentials["options"] = {"email_redirect_to": settings.site_url}
        try:
            self.auth_client_factory().auth.sign_in_with_otp(credentials)
        except Exception as e:
            raise HTTPException(status_code=400, detail=str(e))
        return "Check your email for the magic link!"

    def get_current_user(self, token: str) -> Dict[str, Any]:
        """Get current user details from Supabase Auth token. Uses short TTL cache to reduce auth API calls."""
        try:
            cache_key = hashlib.sha256(token.encode()).hexdigest()
            now = time.monotonic()
            if cache_key in _AUTH_USER_CACHE:
                user_data, expiry = _AUTH_USER_CACHE[cache_key]
                if now < expiry:
                    return user_data
                del _AUTH_USER_CACHE[cache_key]
            user_response = self.supabase.auth.get_user(jwt=token)
            if not user_response or not user_response.user:
                raise HTTPException(status_code=401, detail="Invalid or expired token")
            user = user_response.user
            user_data = {
                "id": user.id,
                "email": user.email,
                "user_metadata": user.user_metadata or {},
                "created_at": user.created_at
            }
            if len(_AUTH_USER_CACHE) < _AUTH_CACHE_MAX_SIZE:
                _AUTH_USER_CACHE[cache_key] = (user_data, now + _AUTH_CACHE_TTL_SEC)
            return user_data
        except HTTPException:
            raise
        except Exception as e:
            error_msg = str(e)
            if "JWT" in error_msg or "expired" in error_msg.lower() or "invalid" in error_msg.lower():
                raise HTTPException(status_code=401, detail="Invalid or expired token")
            raise HTTPException(status_code=401, detail="Authentication failed")

    def logout(self, token: str) -> bool:
        """Logout user using Supabase Auth"""
        _AUTH_USER_CACHE.pop(hashlib.sha256(token.encode()).hexdigest(), None)
        try:
            # Revokes the caller's refresh tokens; the access token itself stays valid until it expires
            self.auth_client_factory().auth.admin.sign_out(token)
            return True
        except Exception as e:
            logger.warning(f"Sign out failed: {e}")
            return False

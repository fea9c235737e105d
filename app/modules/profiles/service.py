from app.database.store import BackingStore, StoreError
from app.modules.profiles.schemas import (
    ProfileUpdate, ProfileResponse, ProfilePageResponse,
    ProfileProjectSummary, ProfileCommentSummary
)
from app.modules.projects.service import ProjectService
from app.modules.comments.service import CommentService
from typing import Optional
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)

PROFILES_TABLE = "profiles"


class ProfileService:
    def __init__(self, store: BackingStore):
        self.store = store

    def get_profile(self, user_id: str) -> ProfileResponse:
        """Get profile by user ID"""
        try:
            row = self.store.select_one(PROFILES_TABLE, {"id": user_id})
        except StoreError as e:
            raise HTTPException(status_code=502, detail=e.message)
        if not row:
            raise HTTPException(status_code=404, detail="Profile not found.")
        return ProfileResponse(**row)

    def get_profile_page(self, user_id: str) -> ProfilePageResponse:
        """Profile with the user's submitted projects and comments, newest first"""
        profile = self.get_profile(user_id)
        try:
            projects = ProjectService(self.store).list_by_creator(user_id)
            comments = CommentService(self.store).list_by_user(user_id)
        except StoreError as e:
            raise HTTPException(status_code=502, detail=e.message)
        return ProfilePageResponse(
            profile=profile,
            initials=profile.initials,
            projects=[ProfileProjectSummary(**p) for p in projects],
            comments=[ProfileCommentSummary(**c) for c in comments]
        )

    def update_profile(self, user_id: str, profile_data: ProfileUpdate) -> ProfileResponse:
        """Update profile fields that were sent"""
        update_data = {}
        if profile_data.full_name is not None:
            update_data["full_name"] = profile_data.full_name.strip()
        if profile_data.bio is not None:
            update_data["bio"] = profile_data.bio
        if profile_data.website is not None:
            update_data["website"] = profile_data.website
        if profile_data.github is not None:
            update_data["github"] = profile_data.github
        if profile_data.twitter is not None:
            update_data["twitter"] = profile_data.twitter

        if not update_data:
            return self.get_profile(user_id)

        try:
            rows = self.store.update(PROFILES_TABLE, update_data, {"id": user_id})
        except StoreError as e:
            raise HTTPException(status_code=400, detail=e.message)
        if not rows:
            raise HTTPException(status_code=404, detail="Profile not found.")
        return ProfileResponse(**rows[0])

    def ensure_profile(self, user_id: str, full_name: Optional[str] = None) -> bool:
        """Create the profile row for a signed-in user if it is missing. Returns True when created."""
        existing = self.store.select_one(PROFILES_TABLE, {"id": user_id}, columns="id")
        if existing:
            return False
        self.store.insert(PROFILES_TABLE, {"id": user_id, "full_name": full_name or ""})
        logger.info(f"Created profile for user {user_id}")
        return True

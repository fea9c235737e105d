from fastapi import APIRouter, Depends, HTTPException, status
from app.database.store import BackingStore, get_store
from app.modules.profiles.schemas import ProfileUpdate, ProfileResponse, ProfilePageResponse
from app.modules.profiles.service import ProfileService
from app.core.dependencies import get_current_user_id
from typing import Dict

router = APIRouter(prefix="/profiles", tags=["profiles"])


def get_profile_service(store: BackingStore = Depends(get_store)) -> ProfileService:
    return ProfileService(store)


@router.get("/{user_id}", response_model=ProfilePageResponse)
async def get_profile(
    user_id: str,
    service: ProfileService = Depends(get_profile_service)
):
    """Public profile page: profile, projects and comments"""
    return service.get_profile_page(user_id)


@router.put("/{user_id}", response_model=ProfileResponse)
async def update_profile(
    user_id: str,
    profile_data: ProfileUpdate,
    user_data: Dict = Depends(get_current_user_id),
    service: ProfileService = Depends(get_profile_service)
):
    """Edit profile (owner only)"""
    if user_data["id"] != user_id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="You can only edit your own profile")
    return service.update_profile(user_id, profile_data)

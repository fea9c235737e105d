from fastapi import APIRouter, Depends
from app.database.store import BackingStore, get_store
from app.modules.comments.schemas import (
    CommentCreate, CommentThreadResponse, CommentVoteRequest, CommentVoteResponse
)
from app.modules.comments.service import CommentService
from app.core.dependencies import get_current_user_id, get_optional_user
from typing import Optional, Dict

router = APIRouter(prefix="/projects/{project_id}/comments", tags=["comments"])


def get_comment_service(store: BackingStore = Depends(get_store)) -> CommentService:
    return CommentService(store)


@router.get("", response_model=CommentThreadResponse)
async def list_comments(
    project_id: str,
    user_data: Optional[Dict] = Depends(get_optional_user),
    service: CommentService = Depends(get_comment_service)
):
    """Comments for a project, newest first, with scores"""
    return service.get_thread(project_id, user_data["id"] if user_data else None)


@router.post("", response_model=CommentThreadResponse, status_code=201)
async def add_comment(
    project_id: str,
    comment_data: CommentCreate,
    user_data: Optional[Dict] = Depends(get_optional_user),
    service: CommentService = Depends(get_comment_service)
):
    """Post a comment (anonymous allowed) and get the refreshed thread back"""
    return service.add_comment(project_id, comment_data, user_data["id"] if user_data else None)


@router.post("/{comment_id}/vote", response_model=CommentVoteResponse)
async def vote_comment(
    project_id: str,
    comment_id: str,
    vote_data: CommentVoteRequest,
    user_data: Dict = Depends(get_current_user_id),
    service: CommentService = Depends(get_comment_service)
):
    """Vote on a comment; one vote per user per comment, direction can be switched"""
    return service.vote_comment(project_id, comment_id, vote_data.direction, user_data["id"])

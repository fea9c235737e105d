from fastapi import APIRouter, Depends, Query
from app.config.settings import settings
from app.database.store import BackingStore, get_store
from app.modules.projects.schemas import (
    ProjectCreate, ProjectResponse, ExploreResponse,
    ProjectVoteRequest, ProjectVoteResponse
)
from app.modules.projects.service import ProjectService
from app.core.dependencies import get_optional_user
from typing import List, Optional, Dict

router = APIRouter(prefix="/projects", tags=["projects"])


def get_project_service(store: BackingStore = Depends(get_store)) -> ProjectService:
    return ProjectService(store)


@router.get("/recent", response_model=List[ProjectResponse])
async def list_recent_projects(
    limit: Optional[int] = Query(default=None, ge=1, le=50),
    service: ProjectService = Depends(get_project_service)
):
    """Latest submissions, newest first"""
    return service.list_recent(limit or settings.recent_projects_limit)


@router.get("/explore", response_model=ExploreResponse)
async def explore_projects(
    tags: Optional[List[str]] = Query(default=None),
    q: Optional[str] = None,
    service: ProjectService = Depends(get_project_service)
):
    """All projects, filtered by any of the selected tags and then by title/description text"""
    return service.explore(tags=tags, query=q)


@router.post("", response_model=ProjectResponse, status_code=201)
async def submit_project(
    project_data: ProjectCreate,
    user_data: Optional[Dict] = Depends(get_optional_user),
    service: ProjectService = Depends(get_project_service)
):
    """Submit a new project (anonymous submissions allowed)"""
    creator_id = user_data["id"] if user_data else None
    return service.create_project(project_data, creator_id)


@router.get("/{project_id}", response_model=ProjectResponse)
async def get_project(
    project_id: str,
    service: ProjectService = Depends(get_project_service)
):
    """Get project by ID"""
    return service.get_project(project_id)


@router.post("/{project_id}/vote", response_model=ProjectVoteResponse)
async def vote_project(
    project_id: str,
    vote_data: ProjectVoteRequest,
    service: ProjectService = Depends(get_project_service)
):
    """Up/down vote a project. The returned score is optimistic even when the write failed."""
    return service.vote(project_id, vote_data)

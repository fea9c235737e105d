from app.database.store import BackingStore, StoreError
from app.modules.projects.schemas import (
    ProjectCreate, ProjectResponse, ExploreResponse,
    ProjectVoteRequest, ProjectVoteResponse
)
from app.modules.projects.tags import collect_tags, explore, normalize_tags
from app.modules.votes.views import ProjectScoreView
from typing import Any, Dict, List, Optional
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)

PROJECTS_TABLE = "projects"


def _to_response(row: Dict[str, Any]) -> ProjectResponse:
    return ProjectResponse(**{**row, "tags": row.get("tags") or "", "vote_count": row.get("vote_count") or 0})


class ProjectService:
    def __init__(self, store: BackingStore):
        self.store = store

    def _get_row(self, project_id: str) -> Dict[str, Any]:
        try:
            row = self.store.select_one(PROJECTS_TABLE, {"id": project_id})
        except StoreError as e:
            raise HTTPException(status_code=502, detail=e.message)
        if not row:
            raise HTTPException(status_code=404, detail="Project not found.")
        return row

    def get_project(self, project_id: str) -> ProjectResponse:
        """Get a single project by ID"""
        return _to_response(self._get_row(project_id))

    def list_recent(self, limit: int) -> List[ProjectResponse]:
        """Newest projects first, for the landing page"""
        try:
            rows = self.store.select(PROJECTS_TABLE, order="created_at", desc=True, limit=limit)
        except StoreError as e:
            raise HTTPException(status_code=502, detail=e.message)
        return [_to_response(row) for row in rows]

    def explore(
        self,
        tags: Optional[List[str]] = None,
        query: Optional[str] = None
    ) -> ExploreResponse:
        """Fetch every project once, derive the tag list, then filter by tags (OR) and search text."""
        try:
            rows = self.store.select(PROJECTS_TABLE, order="created_at", desc=True)
        except StoreError as e:
            raise HTTPException(status_code=502, detail=e.message)
        matched = explore(rows, tags, query)
        return ExploreResponse(
            projects=[_to_response(row) for row in matched],
            tags=collect_tags(rows),
            total=len(matched)
        )

    def create_project(self, project_data: ProjectCreate, creator_id: Optional[str] = None) -> ProjectResponse:
        """Submit a project; creator_id is None for anonymous submissions"""
        try:
            row = self.store.insert(PROJECTS_TABLE, {
                "title": project_data.title,
                "description": project_data.description,
                "tags": normalize_tags(project_data.tags),
                "creator_id": creator_id
            })
        except StoreError as e:
            raise HTTPException(status_code=400, detail=e.message or "Failed to submit project.")
        logger.info(f"Project {row.get('id')} submitted by {creator_id or 'anonymous'}")
        return _to_response(row)

    def list_by_creator(self, creator_id: str) -> List[Dict[str, Any]]:
        return self.store.select(
            PROJECTS_TABLE,
            {"creator_id": creator_id},
            order="created_at",
            desc=True,
            columns="id, title, created_at"
        )

    def vote(self, project_id: str, vote_data: ProjectVoteRequest) -> ProjectVoteResponse:
        """Apply a +1/-1 to the displayed score, then write it. A failed write is reported, not rolled back."""
        view = ProjectScoreView(self.store, self._get_row(project_id), last_direction=vote_data.last_direction)
        error = None
        try:
            view.vote(vote_data.direction)
        except StoreError as e:
            error = e.message
        return ProjectVoteResponse(
            project_id=project_id,
            vote_count=view.score,
            last_direction=view.last_direction,
            error=error
        )

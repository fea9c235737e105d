from pydantic import BaseModel, field_validator
from typing import Optional, List
from datetime import datetime

from app.modules.votes.schemas import VoteDirection


class ProjectCreate(BaseModel):
    title: str
    description: str
    tags: Optional[str] = ""  # e.g. "web, ai, design"

    @field_validator("title", "description")
    @classmethod
    def required_text(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("Title and description are required.")
        return value


class ProjectResponse(BaseModel):
    id: str
    title: str
    description: str
    tags: str = ""
    creator_id: Optional[str] = None
    created_at: datetime
    vote_count: int = 0

    class Config:
        from_attributes = True


class ExploreResponse(BaseModel):
    projects: List[ProjectResponse]
    tags: List[str]  # every tag across the unfiltered fetch
    total: int


class ProjectVoteRequest(BaseModel):
    direction: VoteDirection
    last_direction: Optional[VoteDirection] = None  # direction last pressed in the caller's view


class ProjectVoteResponse(BaseModel):
    project_id: str
    vote_count: int
    last_direction: Optional[VoteDirection] = None
    error: Optional[str] = None  # write failed; vote_count is still the optimistic value

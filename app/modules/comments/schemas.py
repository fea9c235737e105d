from pydantic import BaseModel, field_validator
from typing import Optional, List
from datetime import datetime

from app.modules.votes.schemas import VoteDirection, VoteOutcome


class CommentCreate(BaseModel):
    content: str

    @field_validator("content")
    @classmethod
    def non_empty(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("Comment cannot be empty.")
        return value.strip()


class CommentResponse(BaseModel):
    id: str
    project_id: str
    user_id: Optional[str] = None
    content: str
    created_at: datetime
    score: int = 0
    my_vote: Optional[VoteDirection] = None  # caller's current vote, if signed in

    class Config:
        from_attributes = True


class CommentThreadResponse(BaseModel):
    project_id: str
    comments: List[CommentResponse]
    total: int


class CommentVoteRequest(BaseModel):
    direction: VoteDirection


class CommentVoteResponse(BaseModel):
    outcome: Optional[VoteOutcome] = None  # None when the write failed
    thread: CommentThreadResponse  # always the state refetched after the attempt
    error: Optional[str] = None

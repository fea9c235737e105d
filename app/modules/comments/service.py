from app.database.store import BackingStore, StoreError
from app.modules.comments.schemas import (
    CommentCreate, CommentResponse, CommentThreadResponse, CommentVoteResponse
)
from app.modules.votes.schemas import VoteDirection
from app.modules.votes.views import CommentThreadView
from typing import Any, Dict, List, Optional
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)

COMMENTS_TABLE = "comments"


class CommentService:
    def __init__(self, store: BackingStore):
        self.store = store

    def _require_project(self, project_id: str) -> None:
        try:
            project = self.store.select_one("projects", {"id": project_id}, columns="id")
        except StoreError as e:
            raise HTTPException(status_code=502, detail=e.message)
        if not project:
            raise HTTPException(status_code=404, detail="Invalid project.")

    def _load_view(self, project_id: str, user_id: Optional[str]) -> CommentThreadView:
        view = CommentThreadView(self.store, project_id, user_id=user_id)
        try:
            view.load()
        except StoreError as e:
            raise HTTPException(status_code=502, detail=e.message)
        return view

    @staticmethod
    def _thread(view: CommentThreadView) -> CommentThreadResponse:
        scores = view.scores()
        comments = [
            CommentResponse(
                **comment,
                score=scores.get(comment["id"], 0),
                my_vote=view.my_vote(comment["id"])
            )
            for comment in view.comments
        ]
        return CommentThreadResponse(project_id=view.project_id, comments=comments, total=len(comments))

    def get_thread(self, project_id: str, user_id: Optional[str] = None) -> CommentThreadResponse:
        """Comments newest first with their tallied scores"""
        self._require_project(project_id)
        return self._thread(self._load_view(project_id, user_id))

    def add_comment(
        self,
        project_id: str,
        comment_data: CommentCreate,
        user_id: Optional[str] = None
    ) -> CommentThreadResponse:
        """Insert a comment, then return the refetched thread"""
        self._require_project(project_id)
        try:
            self.store.insert(COMMENTS_TABLE, {
                "project_id": project_id,
                "user_id": user_id,
                "content": comment_data.content
            })
        except StoreError as e:
            raise HTTPException(status_code=400, detail=e.message or "Failed to submit comment.")
        return self._thread(self._load_view(project_id, user_id))

    def vote_comment(
        self,
        project_id: str,
        comment_id: str,
        direction: VoteDirection,
        user_id: str
    ) -> CommentVoteResponse:
        """Cast or switch the caller's vote on a comment; the thread is reloaded either way"""
        view = self._load_view(project_id, user_id)
        if not any(c["id"] == comment_id for c in view.comments):
            raise HTTPException(status_code=404, detail="Comment not found.")
        loads_before = view.loads
        try:
            outcome = view.vote(comment_id, direction)
        except StoreError as e:
            if view.loads == loads_before:
                # the refetch failed too, there is no reconciled thread to return
                raise HTTPException(status_code=502, detail=e.message)
            logger.warning(f"Comment vote failed on {comment_id}: {e.message}")
            return CommentVoteResponse(thread=self._thread(view), error=e.message)
        return CommentVoteResponse(outcome=outcome, thread=self._thread(view))

    def list_by_user(self, user_id: str) -> List[Dict[str, Any]]:
        return self.store.select(
            COMMENTS_TABLE,
            {"user_id": user_id},
            order="created_at",
            desc=True,
            columns="id, content, created_at, project_id"
        )

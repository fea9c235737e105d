from typing import Any, Dict, List, Optional
import logging

from app.database.store import BackingStore
from app.modules.votes.guard import COMMENT_VOTES_TABLE, SingleVoteGuard
from app.modules.votes.schemas import VoteDirection, VoteOutcome
from app.modules.votes.strategies import FireAndForget, OptimisticThenRefetch, VoteStrategy
from app.modules.votes.tally import tally, tally_all

logger = logging.getLogger(__name__)


class ProjectScoreView:
    """Displayed score of one project plus the direction last pressed in this view.

    ``last_direction`` only disables the button that was just pressed; it is
    not persisted and does not stop the same account voting again later.
    """

    def __init__(
        self,
        store: BackingStore,
        project: Dict[str, Any],
        last_direction: Optional[VoteDirection] = None,
        strategy: Optional[VoteStrategy] = None,
    ):
        self.store = store
        self.project = dict(project)
        self.last_direction = last_direction
        self.strategy = strategy or FireAndForget()

    @property
    def score(self) -> int:
        return self.project.get("vote_count") or 0

    def is_disabled(self, direction: VoteDirection) -> bool:
        return self.last_direction == direction

    def vote(self, direction: VoteDirection) -> int:
        if self.is_disabled(direction):
            return self.score

        target = self.score + direction.delta

        def apply_local():
            self.project["vote_count"] = target
            self.last_direction = direction

        def write():
            return self.store.update("projects", {"vote_count": target}, {"id": self.project["id"]})

        self.strategy.execute(apply_local, write)
        return self.score


class CommentThreadView:
    """Comments of one project with their vote rows, as last loaded from the store."""

    def __init__(
        self,
        store: BackingStore,
        project_id: str,
        user_id: Optional[str] = None,
        strategy: Optional[VoteStrategy] = None,
    ):
        self.store = store
        self.project_id = project_id
        self.user_id = user_id
        self.strategy = strategy or OptimisticThenRefetch()
        self.guard = SingleVoteGuard(store)
        self.comments: List[Dict[str, Any]] = []
        self.votes: List[Dict[str, Any]] = []
        self.loads = 0  # completed refreshes

    def refresh(self) -> None:
        """Replace local comments and votes wholesale with what the store holds now."""
        comments = self.store.select(
            "comments", {"project_id": self.project_id}, order="created_at", desc=True
        )
        comment_ids = [c["id"] for c in comments]
        votes = self.store.select(COMMENT_VOTES_TABLE, {"comment_id": comment_ids}) if comment_ids else []
        self.comments = comments
        self.votes = votes
        self.loads += 1

    load = refresh

    def score(self, comment_id: str) -> int:
        return tally(self.votes, comment_id)

    def scores(self) -> Dict[str, int]:
        return tally_all(self.votes)

    def my_vote(self, comment_id: str) -> Optional[VoteDirection]:
        if not self.user_id:
            return None
        existing = SingleVoteGuard.find_existing(self.votes, comment_id, self.user_id)
        return VoteDirection(existing["vote_type"]) if existing else None

    def _with_local_vote(self, comment_id: str, direction: VoteDirection) -> List[Dict[str, Any]]:
        votes = []
        found = False
        for vote in self.votes:
            if vote.get("comment_id") == comment_id and vote.get("user_id") == self.user_id:
                vote = {**vote, "vote_type": direction.value}
                found = True
            votes.append(vote)
        if not found:
            votes.append({
                "id": None,
                "comment_id": comment_id,
                "user_id": self.user_id,
                "vote_type": direction.value,
                "created_at": None,
            })
        return votes

    def vote(self, comment_id: str, direction: VoteDirection) -> VoteOutcome:
        if not self.user_id:
            raise ValueError("Sign in to vote on comments.")

        # The guard decides against the rows as loaded, not the optimistic copy
        loaded_votes = list(self.votes)

        def apply_local():
            self.votes = self._with_local_vote(comment_id, direction)

        def write():
            return self.guard.cast(loaded_votes, comment_id, self.user_id, direction)

        outcome = self.strategy.execute(apply_local, write, self.refresh)
        logger.info(f"Comment vote {outcome.value}: comment={comment_id} direction={direction.value}")
        return outcome

from typing import Any, Dict, Iterable, Optional
import logging

from app.database.store import BackingStore
from app.modules.votes.schemas import VoteDirection, VoteOutcome

logger = logging.getLogger(__name__)

COMMENT_VOTES_TABLE = "comment_votes"


class SingleVoteGuard:
    """Keeps at most one comment_votes row per (comment, voter).

    The check runs against the vote rows the caller already holds, the same
    set the thread was rendered from. Write errors are not caught here.
    """

    def __init__(self, store: BackingStore):
        self.store = store

    @staticmethod
    def find_existing(
        votes: Iterable[Dict[str, Any]], comment_id: str, user_id: str
    ) -> Optional[Dict[str, Any]]:
        for vote in votes:
            if vote.get("comment_id") == comment_id and vote.get("user_id") == user_id:
                return vote
        return None

    def cast(
        self,
        votes: Iterable[Dict[str, Any]],
        comment_id: str,
        user_id: str,
        direction: VoteDirection,
    ) -> VoteOutcome:
        existing = self.find_existing(votes, comment_id, user_id)
        if existing is None:
            self.store.insert(COMMENT_VOTES_TABLE, {
                "comment_id": comment_id,
                "user_id": user_id,
                "vote_type": direction.value,
            })
            logger.debug(f"Inserted {direction.value} vote on comment {comment_id} by {user_id}")
            return VoteOutcome.INSERTED

        if existing.get("vote_type") == direction.value:
            return VoteOutcome.UNCHANGED

        # Only vote_type changes; id and created_at stay as they are
        self.store.update(
            COMMENT_VOTES_TABLE,
            {"vote_type": direction.value},
            {"id": existing["id"]},
        )
        logger.debug(f"Switched vote {existing['id']} on comment {comment_id} to {direction.value}")
        return VoteOutcome.UPDATED

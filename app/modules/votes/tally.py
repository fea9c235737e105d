from typing import Any, Dict, Iterable

from app.modules.votes.schemas import VoteDirection


def _vote_delta(vote: Dict[str, Any]) -> int:
    vote_type = vote.get("vote_type")
    if vote_type == VoteDirection.UP.value:
        return 1
    if vote_type == VoteDirection.DOWN.value:
        return -1
    return 0


def tally(votes: Iterable[Dict[str, Any]], comment_id: str) -> int:
    """Net score (ups minus downs) of one comment over the given vote rows."""
    return sum(_vote_delta(v) for v in votes if v.get("comment_id") == comment_id)


def tally_all(votes: Iterable[Dict[str, Any]]) -> Dict[str, int]:
    """Net score per comment_id for every comment that has at least one vote row."""
    scores: Dict[str, int] = {}
    for vote in votes:
        comment_id = vote.get("comment_id")
        scores[comment_id] = scores.get(comment_id, 0) + _vote_delta(vote)
    return scores

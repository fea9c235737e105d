from __future__ import annotations

import random

from app.modules.votes.tally import tally, tally_all


def _vote(comment_id: str, user_id: str, vote_type: str) -> dict[str, str]:
    return {"id": f"{comment_id}-{user_id}", "comment_id": comment_id, "user_id": user_id, "vote_type": vote_type}


def test_empty_vote_set_scores_zero():
    assert tally([], "c1") == 0
    assert tally_all([]) == {}


def test_two_up_one_down_from_distinct_voters():
    votes = [_vote("c1", "a", "up"), _vote("c1", "b", "up"), _vote("c1", "c", "down")]
    assert tally(votes, "c1") == 1


def test_only_rows_of_the_requested_comment_count():
    votes = [
        _vote("c1", "a", "up"),
        _vote("c2", "a", "down"),
        _vote("c2", "b", "down"),
    ]
    assert tally(votes, "c1") == 1
    assert tally(votes, "c2") == -2
    assert tally(votes, "missing") == 0


def test_tally_ignores_row_order():
    votes = [_vote("c1", str(i), "up" if i % 3 else "down") for i in range(30)]
    expected = tally(votes, "c1")
    shuffled = list(votes)
    random.Random(7).shuffle(shuffled)
    assert tally(shuffled, "c1") == expected
    assert tally(reversed(votes), "c1") == expected


def test_tally_is_pure():
    votes = [_vote("c1", "a", "up")]
    snapshot = [dict(v) for v in votes]
    assert tally(votes, "c1") == tally(votes, "c1") == 1
    assert votes == snapshot


def test_tally_all_matches_per_comment_tally():
    votes = [
        _vote("c1", "a", "up"),
        _vote("c1", "b", "down"),
        _vote("c1", "c", "up"),
        _vote("c2", "a", "down"),
    ]
    scores = tally_all(votes)
    assert scores == {"c1": tally(votes, "c1"), "c2": tally(votes, "c2")}

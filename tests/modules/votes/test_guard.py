from __future__ import annotations

import pytest

from app.database.store import StoreError
from app.modules.votes.guard import SingleVoteGuard
from app.modules.votes.schemas import VoteDirection, VoteOutcome
from app.modules.votes.tally import tally


def _votes(store, comment_id):
    return store.select("comment_votes", {"comment_id": comment_id})


def test_first_vote_inserts_a_row(store):
    guard = SingleVoteGuard(store)
    outcome = guard.cast([], "c1", "u1", VoteDirection.UP)
    assert outcome is VoteOutcome.INSERTED
    rows = _votes(store, "c1")
    assert len(rows) == 1
    assert rows[0]["user_id"] == "u1"
    assert rows[0]["vote_type"] == "up"


def test_same_direction_twice_is_a_noop(store):
    guard = SingleVoteGuard(store)
    guard.cast(_votes(store, "c1"), "c1", "u1", VoteDirection.DOWN)
    writes_before = [c for c in store.calls if c[0] != "select"]

    outcome = guard.cast(_votes(store, "c1"), "c1", "u1", VoteDirection.DOWN)

    assert outcome is VoteOutcome.UNCHANGED
    assert [c for c in store.calls if c[0] != "select"] == writes_before
    rows = _votes(store, "c1")
    assert len(rows) == 1
    assert rows[0]["vote_type"] == "down"


def test_direction_change_updates_the_same_row(store):
    guard = SingleVoteGuard(store)
    guard.cast([], "c1", "u1", VoteDirection.UP)
    original = _votes(store, "c1")[0]

    outcome = guard.cast(_votes(store, "c1"), "c1", "u1", VoteDirection.DOWN)

    assert outcome is VoteOutcome.UPDATED
    rows = _votes(store, "c1")
    assert len(rows) == 1
    assert rows[0]["id"] == original["id"]
    assert rows[0]["created_at"] == original["created_at"]
    assert rows[0]["vote_type"] == "down"


def test_switching_vote_changes_tally_without_new_rows(store):
    guard = SingleVoteGuard(store)
    for user_id, direction in (("a", VoteDirection.UP), ("b", VoteDirection.UP), ("c", VoteDirection.DOWN)):
        guard.cast(_votes(store, "c1"), "c1", user_id, direction)
    assert tally(_votes(store, "c1"), "c1") == 1

    guard.cast(_votes(store, "c1"), "c1", "a", VoteDirection.DOWN)

    rows = _votes(store, "c1")
    assert len(rows) == 3
    assert tally(rows, "c1") == -1


def test_votes_on_other_comments_do_not_count_as_existing(store):
    store.seed("comment_votes", comment_id="c2", user_id="u1", vote_type="up")
    guard = SingleVoteGuard(store)
    outcome = guard.cast(store.select("comment_votes"), "c1", "u1", VoteDirection.UP)
    assert outcome is VoteOutcome.INSERTED
    assert len(store.select("comment_votes")) == 2


def test_write_failure_propagates(store):
    store.fail_writes = True
    guard = SingleVoteGuard(store)
    with pytest.raises(StoreError):
        guard.cast([], "c1", "u1", VoteDirection.UP)


def test_find_existing():
    votes = [{"id": "v1", "comment_id": "c1", "user_id": "u1", "vote_type": "up"}]
    assert SingleVoteGuard.find_existing(votes, "c1", "u1")["id"] == "v1"
    assert SingleVoteGuard.find_existing(votes, "c1", "u2") is None

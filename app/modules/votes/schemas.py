from enum import Enum


class VoteDirection(str, Enum):
    UP = "up"
    DOWN = "down"

    @property
    def delta(self) -> int:
        return 1 if self is VoteDirection.UP else -1


class VoteOutcome(str, Enum):
    INSERTED = "inserted"
    UPDATED = "updated"
    UNCHANGED = "unchanged"

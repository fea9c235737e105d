"""
Optimistic vote mutation strategies.

Both strategies apply the local change first and only then issue the write.
They differ in what happens afterwards:

- ``FireAndForget`` trusts the local value. A failed write is logged and
  re-raised, but the local value is never rolled back.
- ``OptimisticThenRefetch`` always reloads local state from the backing store
  after the write, whether it succeeded or not, so any drift is corrected.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Optional
import logging

from app.database.store import StoreError

logger = logging.getLogger(__name__)


class VoteStrategy(ABC):
    name: str = ""

    @abstractmethod
    def execute(
        self,
        apply_local: Callable[[], None],
        write: Callable[[], Any],
        refresh: Optional[Callable[[], None]] = None,
    ) -> Any:
        """Run one vote action; returns whatever ``write`` returned."""


class FireAndForget(VoteStrategy):
    name = "fire_and_forget"

    def execute(self, apply_local, write, refresh=None):
        apply_local()
        try:
            return write()
        except StoreError as e:
            logger.warning(f"Vote write failed, keeping optimistic value: {e.message}")
            raise


class OptimisticThenRefetch(VoteStrategy):
    name = "optimistic_then_refetch"

    def execute(self, apply_local, write, refresh=None):
        if refresh is None:
            raise ValueError("OptimisticThenRefetch needs a refresh callback")
        apply_local()
        try:
            return write()
        finally:
            refresh()

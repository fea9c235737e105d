"""
Process-wide auth/session context.

One subscription to the Supabase client's auth state changes is opened by
``init()`` and closed by ``teardown()``. Everything else that cares about
session changes registers a listener here instead of subscribing itself.
"""

from typing import Any, Callable, List, Optional
import logging

from supabase import Client

from app.database.supabase_client import get_supabase

logger = logging.getLogger(__name__)

AuthListener = Callable[[str, Optional[Any]], None]


class AuthContext:
    def __init__(self, client_factory: Callable[[], Client] = get_supabase):
        self._client_factory = client_factory
        self._subscription = None
        self._listeners: List[AuthListener] = []
        self.session = None
        self.user = None

    @property
    def is_initialized(self) -> bool:
        return self._subscription is not None

    def add_listener(self, listener: AuthListener) -> Callable[[], None]:
        """Register a listener; returns a function that removes it again."""
        self._listeners.append(listener)

        def remove():
            if listener in self._listeners:
                self._listeners.remove(listener)
        return remove

    def init(self) -> None:
        if self.is_initialized:
            return
        client = self._client_factory()
        self._set_session(client.auth.get_session())
        self._subscription = client.auth.on_auth_state_change(self._on_auth_state_change)
        logger.info("Auth context initialized")

    def teardown(self) -> None:
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None
            logger.info("Auth context torn down")
        self.session = None
        self.user = None

    def _set_session(self, session) -> None:
        self.session = session
        self.user = session.user if session is not None else None

    def _on_auth_state_change(self, event: str, session) -> None:
        self._set_session(session)
        logger.info(f"Auth state changed: {event}")
        for listener in list(self._listeners):
            try:
                listener(event, session)
            except Exception as e:
                logger.exception(f"Auth listener {getattr(listener, '__name__', listener)} failed: {e}")


auth_context = AuthContext()

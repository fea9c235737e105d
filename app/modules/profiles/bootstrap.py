from typing import Any, Callable, Optional
import logging

from app.database.store import BackingStore, StoreError
from app.modules.profiles.service import ProfileService

logger = logging.getLogger(__name__)

PROFILE_EVENTS = ("INITIAL_SESSION", "SIGNED_IN", "USER_UPDATED")


def make_profile_bootstrapper(store_factory: Callable[[], BackingStore]):
    """Auth listener that makes sure a signed-in user has a profile row."""

    def ensure_profile_on_sign_in(event: str, session: Optional[Any]) -> None:
        if event not in PROFILE_EVENTS or session is None or session.user is None:
            return
        user = session.user
        full_name = (user.user_metadata or {}).get("full_name")
        try:
            ProfileService(store_factory()).ensure_profile(user.id, full_name)
        except StoreError as e:
            logger.error(f"Could not create profile for {user.id}: {e.message}")

    return ensure_profile_on_sign_in

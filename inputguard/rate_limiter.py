"""
🛡️ Rate Limiter - rolling-window action limits per user
v1.0 - check-and-record in one call, pluggable storage
"""
import logging
import threading
import time
from typing import Callable, List, Optional, Tuple

from . import messages
from .config import Settings, load_settings
from .exceptions import RateLimitError
from .secret_manager import log_security_event
from .storage import InMemoryStore, KeyValueStore

logger = logging.getLogger("INPUTGUARD_SECURITY")

SECONDS_PER_HOUR = 3600
LOCK_STRIPES = 64


class RateLimiter:
    """
    Per (action, user) rolling-window limiter.

    Timestamps live in the injected store under ``rate_limit_{action}_{user}``.
    The read-filter-append-write sequence runs under one of LOCK_STRIPES
    locks picked by key hash, so one limiter is safe to share between threads
    and holds a fixed number of locks however many users it sees. Several
    processes sharing a store need a store with its own atomic update.
    """

    def __init__(
        self,
        store: Optional[KeyValueStore] = None,
        settings: Optional[Settings] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.settings = settings if settings is not None else load_settings()
        self.store = store if store is not None else InMemoryStore(clock=clock)
        self._clock = clock
        self._locks: List[threading.Lock] = [threading.Lock() for _ in range(LOCK_STRIPES)]

    def _key(self, action: str, user_id: str) -> str:
        return f"{self.settings.rate_limit_key_prefix}{action}_{user_id}"

    def _lock_for(self, key: str) -> threading.Lock:
        return self._locks[hash(key) % len(self._locks)]

    @staticmethod
    def _recent(timestamps, now: float, window_seconds: float) -> list:
        return [ts for ts in (timestamps or []) if now - ts < window_seconds]

    def check_rate_limit(self, action: str, user_id: str, limit: int, window_hours: float = 1) -> bool:
        """
        Check the limit and record the action if allowed

        Args:
            action: Action name, e.g. "message" or "invitation"
            user_id: User performing the action
            limit: Maximum actions inside the window
            window_hours: Rolling window length

        Returns:
            True if the action is allowed (and recorded), False otherwise.
            Store failures count as not allowed.
        """
        key = self._key(action, user_id)
        window_seconds = window_hours * SECONDS_PER_HOUR

        with self._lock_for(key):
            now = self._clock()
            try:
                recent = self._recent(self.store.get(key), now, window_seconds)

                if len(recent) >= limit:
                    log_security_event("RATE_LIMIT_EXCEEDED", action=action, severity="LOW",
                                       user_id=str(user_id), limit=limit)
                    return False

                recent.append(now)
                self.store.set(key, recent, ttl_seconds=window_seconds)
                return True
            except Exception as e:
                logger.error(f"❌ Rate limit store failure for {action}: {type(e).__name__}: {e}")
                return False

    def enforce(self, action: str, user_id: str, limit: int, window_hours: float = 1) -> None:
        """Like check_rate_limit, but raises RateLimitError when not allowed"""
        if not self.check_rate_limit(action, user_id, limit, window_hours):
            raise RateLimitError(
                f"Too many {action} requests",
                context={"action": action, "limit": limit, "window_hours": window_hours},
            )

    def get_remaining(self, action: str, user_id: str, limit: int, window_hours: float = 1) -> int:
        """Remaining actions in the current window (does not record anything)"""
        key = self._key(action, user_id)
        with self._lock_for(key):
            recent = self._recent(self.store.get(key), self._clock(), window_hours * SECONDS_PER_HOUR)
        return max(0, limit - len(recent))

    def reset(self, action: str, user_id: str) -> None:
        key = self._key(action, user_id)
        with self._lock_for(key):
            self.store.delete(key)

    # =========================================================================
    # ACTION QUOTAS
    # =========================================================================

    def can_send_message(self, user_id: str) -> Tuple[bool, Optional[str]]:
        """Chat messages per user per hour"""
        if self.check_rate_limit("message", user_id, self.settings.rate_limit_messages_per_hour):
            return True, None
        return False, messages.TOO_MANY_MESSAGES

    def can_send_invitation(self, user_id: str) -> Tuple[bool, Optional[str]]:
        """Lease/escrow invitations per user per day"""
        limit = self.settings.rate_limit_invitations_per_day
        if self.check_rate_limit("invitation", user_id, limit, window_hours=24):
            return True, None
        return False, messages.TOO_MANY_INVITATIONS.format(limit=limit)

"""
Session Activity Tracker

Keeps the `lastActivity` cookie fresh while the user is active and ends the
session from the client side once it has been idle past the shared timeout.

- Activity events are debounced (trailing edge) before the cookie is written
- One poll per interval: warn once at the warning threshold, expire after timeout
- Expiration is guarded by a short lock so overlapping triggers run it once
"""

import asyncio
import logging
from datetime import datetime, timedelta
from typing import Callable, Optional

import httpx

from soc_portal.core.cookies import LAST_ACTIVITY
from soc_portal.modules.auth.session_policy import SessionPolicy, format_timestamp, parse_timestamp, utcnow
from soc_cli.api_client import read_cookie, write_cookie, clear_session_cookies
from soc_cli.notifier import NotificationLevel


logger = logging.getLogger("soc_portal.cli")

ACTIVITY_EVENTS = frozenset({
    "mousemove", "mousedown", "click", "scroll",
    "keydown", "keypress", "touchstart", "touchmove",
    "input", "change", "focus", "blur",
})

EXPIRED_REDIRECT = "/?sessionExpired=true"
WARNING_MESSAGE = "Session expiring soon"
EXPIRED_MESSAGE = "Session expired"


class SessionActivityTracker:
    """Client-side idle timeout for one mounted session"""

    def __init__(
        self,
        cookies: httpx.Cookies,
        policy: SessionPolicy,
        client,
        notifier,
        navigator: Callable[[str], None],
        clock: Callable[[], datetime] = utcnow,
        poll_interval: float = 10.0,
        debounce_seconds: float = 0.3,
        lock_seconds: float = 3.0,
    ):
        self.cookies = cookies
        self.policy = policy
        self.client = client
        self.notifier = notifier
        self.navigator = navigator
        self.clock = clock
        self.poll_interval = poll_interval
        self.debounce_seconds = debounce_seconds
        self.lock_seconds = lock_seconds

        self.warning_shown = False
        self._lock_until: Optional[datetime] = None
        self._debounce_handle: Optional[asyncio.TimerHandle] = None
        self._poll_task: Optional[asyncio.Task] = None

    @property
    def last_activity(self) -> Optional[datetime]:
        return parse_timestamp(read_cookie(self.cookies, LAST_ACTIVITY))

    # ==================== Activity ====================

    def record_activity(self, event: str) -> bool:
        """Schedule a heartbeat write; returns False for events that are not tracked"""
        if event not in ACTIVITY_EVENTS:
            return False
        if self._debounce_handle is not None:
            self._debounce_handle.cancel()
        loop = asyncio.get_running_loop()
        self._debounce_handle = loop.call_later(self.debounce_seconds, self.flush_activity)
        return True

    def flush_activity(self) -> None:
        """Write lastActivity now and re-arm the warning"""
        self._debounce_handle = None
        write_cookie(self.cookies, LAST_ACTIVITY, format_timestamp(self.clock()))
        self.warning_shown = False

    # ==================== Polling ====================

    async def tick(self) -> None:
        last_activity = self.last_activity
        now = self.clock()

        if self.policy.is_expired(last_activity, now):
            await self.handle_expiration()
        elif self.policy.should_warn(last_activity, now) and not self.warning_shown:
            self.warning_shown = True
            remaining = self.policy.timeout - self.policy.elapsed(last_activity, now)
            minutes = max(int(remaining.total_seconds() // 60), 0)
            self.notifier.notify(
                NotificationLevel.WARNING,
                f"{WARNING_MESSAGE} ({minutes} min left). Interact to stay signed in.",
            )

    async def handle_expiration(self) -> bool:
        """Log out, clear cookies, notify and redirect. Returns False while locked."""
        now = self.clock()
        if self._lock_until is not None and now < self._lock_until:
            return False
        self._lock_until = now + timedelta(seconds=self.lock_seconds)

        try:
            await self.client.logout(reason="session_timeout")
        except Exception as e:
            logger.warning(f"Logout call failed during session expiration: {e}")

        clear_session_cookies(self.cookies)
        self.warning_shown = False
        self.notifier.notify(NotificationLevel.ERROR, EXPIRED_MESSAGE)
        self.navigator(EXPIRED_REDIRECT)
        return True

    async def _poll_loop(self) -> None:
        while True:
            await asyncio.sleep(self.poll_interval)
            try:
                await self.tick()
            except Exception as e:
                logger.error(f"Session poll failed: {e}", exc_info=True)

    # ==================== Lifecycle ====================

    def start(self) -> Callable[[], None]:
        """Begin polling on the running loop; returns the teardown"""
        if read_cookie(self.cookies, LAST_ACTIVITY) is None:
            self.flush_activity()
        self._poll_task = asyncio.get_running_loop().create_task(self._poll_loop())
        return self.stop

    def stop(self) -> None:
        if self._poll_task is not None:
            self._poll_task.cancel()
            self._poll_task = None
        if self._debounce_handle is not None:
            self._debounce_handle.cancel()
            self._debounce_handle = None

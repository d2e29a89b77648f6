"""
Outbound Alert Service
======================
Sends security and business event messages to a Telegram chat.

Delivery is best effort: failures are logged and reported through the
return value, never raised to the caller. Without a configured bot token
and chat id every send is a no-op.
"""

import asyncio
from datetime import datetime, timedelta
from typing import Dict, Optional, Set

import httpx

from soc_portal.core.config import settings
from soc_portal.core.logging_config import logger


# Alert timestamps are shown in Dhaka time (GMT+6)
ALERT_TZ_OFFSET = timedelta(hours=6)


def format_alert_time(now: Optional[datetime] = None) -> str:
    local = (now or datetime.utcnow()) + ALERT_TZ_OFFSET
    return local.strftime("%d/%m/%Y, %I:%M:%S %p") + " (GMT+6)"


def format_alert(title: str, fields: Dict[str, object], status: Optional[str] = None) -> str:
    """
    Render an aligned alert block:

        [ SOC PORTAL | LOGIN ]
        Email : a@x.com
        ...
    """
    width = max((len(k) for k in fields), default=0)
    lines = [f"[ SOC PORTAL | {title.upper()} ]", "━" * 32]
    for key, value in fields.items():
        lines.append(f"{key.ljust(width)} : {value if value not in (None, '') else 'N/A'}")
    lines.append(f"{'Time'.ljust(width)} : {format_alert_time()}")
    if status:
        lines.append(f"{'Status'.ljust(width)} : {status}")
    return "```\n" + "\n".join(lines) + "\n```"


class AlertService:
    """Async Telegram alert sender"""

    def __init__(
        self,
        bot_token: str = None,
        chat_id: str = None,
        api_url: str = None,
        timeout: float = None,
    ):
        self.bot_token = bot_token if bot_token is not None else settings.TELEGRAM_BOT_TOKEN
        self.chat_id = chat_id if chat_id is not None else settings.TELEGRAM_CHAT_ID
        self.api_url = (api_url or settings.TELEGRAM_API_URL).rstrip("/")
        self.timeout = timeout or settings.ALERT_TIMEOUT_SECONDS
        self._tasks: Set[asyncio.Task] = set()

    @property
    def enabled(self) -> bool:
        return bool(self.bot_token and self.chat_id)

    async def send(self, text: str) -> bool:
        """Send one message. Returns True when Telegram accepted it."""
        if not self.enabled:
            logger.debug("[Alert] Telegram not configured, skipping alert")
            return False

        url = f"{self.api_url}/bot{self.bot_token}/sendMessage"
        payload = {"chat_id": self.chat_id, "text": text, "parse_mode": "Markdown"}
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(url, json=payload)
            if response.status_code != 200:
                logger.warning(
                    f"[Alert] Telegram rejected alert: HTTP {response.status_code}",
                    extra={"event_type": "alert_failed", "http_status": response.status_code}
                )
                return False
            return True
        except httpx.HTTPError as e:
            logger.warning(
                f"[Alert] Telegram delivery failed: {type(e).__name__}: {e}",
                extra={"event_type": "alert_failed", "error_type": type(e).__name__}
            )
            return False

    def dispatch(self, text: str) -> None:
        """Fire-and-forget send; the request never waits on Telegram"""
        if not self.enabled:
            return
        task = asyncio.create_task(self.send(text))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def drain(self) -> None:
        """Wait for in-flight alerts (shutdown)"""
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)


# Singleton instance
alert_service = AlertService()


def get_alert_service() -> AlertService:
    """FastAPI dependency; overridden in tests"""
    return alert_service

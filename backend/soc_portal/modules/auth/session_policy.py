"""
Session timeout policy.

One instance is built from configuration on each side: the server gate reads
`settings.SESSION_TIMEOUT_MINUTES`, the client tracker reads
`ClientConfig.session_timeout_minutes`. Both default from
SOC_SESSION_TIMEOUT_MINUTES, so they always agree on when a session expires.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(value: datetime) -> str:
    """ISO-8601 in UTC with millisecond precision and a Z suffix"""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def parse_timestamp(raw: Optional[str]) -> Optional[datetime]:
    """Parse an ISO-8601 cookie value; None when absent or malformed"""
    if not raw:
        return None
    text = raw.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass(frozen=True)
class SessionPolicy:
    timeout: timedelta
    warning_ratio: float = 0.8

    def __post_init__(self):
        if self.timeout <= timedelta(0):
            raise ValueError("Session timeout must be positive")
        if not 0 < self.warning_ratio < 1:
            raise ValueError("Warning ratio must be between 0 and 1")

    @classmethod
    def from_minutes(cls, minutes: float, warning_ratio: float = 0.8) -> "SessionPolicy":
        return cls(timeout=timedelta(minutes=minutes), warning_ratio=warning_ratio)

    @property
    def warning_threshold(self) -> timedelta:
        return self.timeout * self.warning_ratio

    def elapsed(self, last_activity: datetime, now: datetime) -> timedelta:
        return now - last_activity

    def is_expired(self, last_activity: Optional[datetime], now: datetime) -> bool:
        """
        Expired once strictly more than `timeout` has passed.

        A missing heartbeat is not expired on its own; the caller decides
        what an absent cookie means.
        """
        if last_activity is None:
            return False
        return self.elapsed(last_activity, now) > self.timeout

    def should_warn(self, last_activity: Optional[datetime], now: datetime) -> bool:
        """Inside the warning window: past the threshold but not yet expired"""
        if last_activity is None:
            return False
        elapsed = self.elapsed(last_activity, now)
        return self.warning_threshold <= elapsed <= self.timeout

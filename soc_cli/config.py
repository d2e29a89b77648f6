"""
CLI Configuration Management
"""

import os
from pathlib import Path
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, Optional

from dotenv import load_dotenv

from soc_portal.modules.auth.session_policy import SessionPolicy


DEFAULT_SESSION_TIMEOUT_MINUTES = 15.0


@dataclass
class ClientConfig:
    """Configuration for the SOC Portal CLI"""

    # API settings
    server_url: str = "http://localhost:8000/api/v1"
    timeout: float = 10.0

    # Session tracking (timeout shared with the server gate)
    session_timeout_minutes: float = DEFAULT_SESSION_TIMEOUT_MINUTES
    warning_ratio: float = 0.8
    poll_interval_seconds: float = 10.0
    debounce_seconds: float = 0.3
    expiration_lock_seconds: float = 3.0

    # Paths
    config_dir: str = field(default_factory=lambda: str(Path.home() / ".soc_portal"))
    cookie_file: str = "cookies.json"

    def __post_init__(self):
        if not os.path.isabs(self.cookie_file):
            self.cookie_file = str(Path(self.config_dir) / self.cookie_file)

    @property
    def session_policy(self) -> SessionPolicy:
        return SessionPolicy.from_minutes(self.session_timeout_minutes, warning_ratio=self.warning_ratio)

    @classmethod
    def load_default(cls, env_file: Optional[str] = None) -> "ClientConfig":
        """Defaults, then .env, then environment variables"""
        load_dotenv(env_file)
        config = cls()
        config._load_from_env()
        return config

    def _load_from_env(self) -> None:
        """Load configuration from environment variables"""
        env_mappings = {
            "SOC_PORTAL_API_URL": "server_url",
            "SOC_SESSION_TIMEOUT_MINUTES": ("session_timeout_minutes", float),
            "SOC_SESSION_WARNING_RATIO": ("warning_ratio", float),
            "SOC_POLL_INTERVAL_SECONDS": ("poll_interval_seconds", float),
            "SOC_PORTAL_CONFIG_DIR": "config_dir",
        }

        for env_var, mapping in env_mappings.items():
            value = os.environ.get(env_var)
            if value:
                if isinstance(mapping, tuple):
                    attr, converter = mapping
                    setattr(self, attr, converter(value))
                else:
                    setattr(self, mapping, value)

        if os.environ.get("SOC_PORTAL_CONFIG_DIR"):
            self.cookie_file = str(Path(self.config_dir) / Path(self.cookie_file).name)

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary"""
        return asdict(self)

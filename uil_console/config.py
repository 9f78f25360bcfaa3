"""
Configuration for the UIL console.

Values come from the environment, with CLI flags layered on top by
``uil_console.cli``.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

UIL_API_BASE_URL = os.getenv("UIL_API_BASE_URL", "http://localhost:8080/api/v1")
UIL_REQUEST_TIMEOUT = os.getenv("UIL_REQUEST_TIMEOUT", "30")
UIL_LOG_LEVEL = os.getenv("UIL_LOG_LEVEL", "INFO")
UIL_CURRENCY_SYMBOL = os.getenv("UIL_CURRENCY_SYMBOL", "Rp")

USER_AGENT = "UIL-Console/1.0"

# Upper bound on notifications kept in memory
MAX_NOTIFICATION_HISTORY = 200


def parse_timeout(raw: object) -> Optional[float]:
    """Parse a timeout setting; ``0``, ``none`` or empty disables it."""
    if raw is None:
        return None
    text = str(raw).strip().lower()
    if text in ("", "0", "none", "off"):
        return None
    value = float(text)
    if value < 0:
        raise ValueError(f"Timeout must be positive, got {raw!r}")
    return value


@dataclass
class ConsoleConfig:
    """Runtime settings for one console instance."""
    base_url: str = UIL_API_BASE_URL
    request_timeout: Optional[float] = 30.0
    log_level: str = UIL_LOG_LEVEL
    currency_symbol: str = UIL_CURRENCY_SYMBOL
    user_agent: str = USER_AGENT

    def __post_init__(self) -> None:
        self.base_url = self.base_url.rstrip("/")

    @classmethod
    def from_env(cls) -> ConsoleConfig:
        return cls(
            base_url=os.getenv("UIL_API_BASE_URL", UIL_API_BASE_URL),
            request_timeout=parse_timeout(os.getenv("UIL_REQUEST_TIMEOUT", UIL_REQUEST_TIMEOUT)),
            log_level=os.getenv("UIL_LOG_LEVEL", UIL_LOG_LEVEL),
            currency_symbol=os.getenv("UIL_CURRENCY_SYMBOL", UIL_CURRENCY_SYMBOL),
        )

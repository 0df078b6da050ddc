"""Process-wide configuration read from the environment."""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import find_dotenv, load_dotenv

from ingest.schemas import PARTITION_MODES, YMD
from pipeline.messages import DEFAULT_LOCALE, MESSAGES
from pipeline.partitioner import DEFAULT_YMD_BATCH_SIZE
from pipeline.utils import DEFAULT_TIMEZONE
from pipeline.validation import DEFAULT_MAX_RANGE_DAYS

DEFAULT_API_URL = "https://connpass.com/api/v2/events/"


@dataclass(frozen=True)
class Settings:
    """Settings resolved once at startup and passed to the components."""

    api_url: str = DEFAULT_API_URL
    api_key: Optional[str] = None
    timeout_seconds: float = 30
    max_pages: int = 1
    partition_mode: str = YMD
    ymd_batch_size: int = DEFAULT_YMD_BATCH_SIZE
    max_range_days: int = DEFAULT_MAX_RANGE_DAYS
    max_workers: int = 4
    timezone: str = DEFAULT_TIMEZONE
    locale: str = DEFAULT_LOCALE
    offline: bool = False
    debug: bool = False

    def __post_init__(self) -> None:
        if self.partition_mode not in PARTITION_MODES:
            raise ValueError(
                f"LUNCH_PARTITION_MODE must be one of {PARTITION_MODES}, got {self.partition_mode!r}"
            )
        if self.locale not in MESSAGES:
            raise ValueError(f"LUNCH_LOCALE must be one of {sorted(MESSAGES)}, got {self.locale!r}")
        for name in ("max_pages", "ymd_batch_size", "max_range_days", "max_workers"):
            if getattr(self, name) < 1:
                raise ValueError(f"{name} must be at least 1")
        if self.timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be positive")


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def load_settings() -> Settings:
    """Build :class:`Settings` from environment variables and ``.env``."""
    load_dotenv(find_dotenv(usecwd=True))
    timeout_raw = os.getenv("CONNPASS_TIMEOUT_SECONDS", "30")
    try:
        timeout = float(timeout_raw)
    except ValueError:
        raise ValueError(f"CONNPASS_TIMEOUT_SECONDS must be a number, got {timeout_raw!r}") from None

    return Settings(
        api_url=os.getenv("CONNPASS_API_URL", DEFAULT_API_URL),
        api_key=os.getenv("CONNPASS_API_KEY") or None,
        timeout_seconds=timeout,
        max_pages=_env_int("CONNPASS_MAX_PAGES", 1),
        partition_mode=os.getenv("LUNCH_PARTITION_MODE", YMD).strip().lower(),
        ymd_batch_size=_env_int("LUNCH_YMD_BATCH_SIZE", DEFAULT_YMD_BATCH_SIZE),
        max_range_days=_env_int("LUNCH_MAX_RANGE_DAYS", DEFAULT_MAX_RANGE_DAYS),
        max_workers=_env_int("LUNCH_MAX_WORKERS", 4),
        timezone=os.getenv("LUNCH_TIMEZONE", DEFAULT_TIMEZONE),
        locale=os.getenv("LUNCH_LOCALE", DEFAULT_LOCALE).strip().lower(),
        offline=_env_flag("LUNCH_OFFLINE"),
        debug=bool(os.getenv("SCRAPER_DEBUG")),
    )

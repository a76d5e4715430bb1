from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


@dataclass(frozen=True)
class Settings:
    supabase_url: str = ""
    supabase_key: str = ""
    profile_table: str = "profiles"
    photo_bucket: str = "profile-photos"
    search_debounce_ms: int = 500
    page_size: int = 10
    recent_days: int = 30
    log_level: str = "INFO"

    @property
    def search_debounce_s(self) -> float:
        return self.search_debounce_ms / 1000.0


def _as_int(value: Optional[str], default: int) -> int:
    try:
        return int(str(value).strip())
    except Exception:
        return default


def settings_from_env(env: Optional[dict] = None) -> Settings:
    env = os.environ if env is None else env
    return Settings(
        supabase_url=(env.get("SUPABASE_URL") or "").strip(),
        supabase_key=(env.get("SUPABASE_KEY") or "").strip(),
        profile_table=(env.get("PROFILE_TABLE") or "profiles").strip(),
        photo_bucket=(env.get("PHOTO_BUCKET") or "profile-photos").strip(),
        search_debounce_ms=max(0, _as_int(env.get("SEARCH_DEBOUNCE_MS"), 500)),
        page_size=max(1, _as_int(env.get("PAGE_SIZE"), 10)),
        recent_days=max(1, _as_int(env.get("RECENT_DAYS"), 30)),
        log_level=(env.get("LOG_LEVEL") or "INFO").strip().upper(),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    load_dotenv()
    return settings_from_env()


def require_backend(settings: Settings) -> None:
    if not settings.supabase_url:
        raise RuntimeError("SUPABASE_URL is not set.")
    if not settings.supabase_key:
        raise RuntimeError("SUPABASE_KEY is not set.")


def configure_logging(level: Optional[str] = None) -> None:
    """Install a basic root handler once; later calls only adjust the level."""
    level_name = (level or get_settings().log_level or "INFO").upper()
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(format=LOG_FORMAT)
    root.setLevel(getattr(logging, level_name, logging.INFO))

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional


DEFAULT_RECENT_WINDOW = 20
DEFAULT_PAGE_SIZE = 1000

TREND_THRESHOLD_PCT = 2.0
HIGH_GAME_THRESHOLD = 200
HIGH_AVERAGE_THRESHOLD = 180.0
NEAR_MISS_FLOOR = 180
ALMOST_THERE_FLOOR = 190


@dataclass(frozen=True)
class HistoryWindow:
    """Cost cap for the records scan; not a correctness requirement."""

    max_age_days: int = 183
    max_sessions: int = 100
    milestone_sessions: int = 5
    max_milestones: int = 10
    months: int = 6


@dataclass(frozen=True)
class StatsConfig:
    recent_window: int = DEFAULT_RECENT_WINDOW
    history: HistoryWindow = HistoryWindow()


@dataclass(frozen=True)
class CacheConfig:
    enabled: bool
    ttl_s: float


@dataclass(frozen=True)
class StoreConfig:
    base_url: str
    api_key: str
    timeout_s: int = 30


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc


def stats_config_from_env() -> StatsConfig:
    history = HistoryWindow(
        max_age_days=_env_int("BOWLING_HISTORY_DAYS", HistoryWindow.max_age_days),
        max_sessions=_env_int("BOWLING_HISTORY_SESSIONS", HistoryWindow.max_sessions),
    )
    return StatsConfig(
        recent_window=_env_int("BOWLING_RECENT_WINDOW", DEFAULT_RECENT_WINDOW),
        history=history,
    )


def cache_config_from_env() -> CacheConfig:
    enabled = os.environ.get("BOWLING_CACHE", "1").lower() in {"1", "true", "yes"}
    ttl_s = float(os.environ.get("BOWLING_CACHE_TTL", "300"))
    return CacheConfig(enabled=enabled, ttl_s=ttl_s)


def store_config_from_env() -> Optional[StoreConfig]:
    base_url = os.environ.get("BOWLING_STORE_URL", "").rstrip("/")
    api_key = os.environ.get("BOWLING_STORE_KEY", "")
    if not base_url or not api_key:
        return None
    return StoreConfig(base_url=base_url, api_key=api_key)

"""Use case for computing dashboard panels from a store snapshot."""

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import date
from functools import partial
from typing import Any, Callable, Dict, List, Sequence

from bowling_stats.cache import SnapshotCache
from bowling_stats.comebacks import compute_comebacks, compute_near_misses
from bowling_stats.config import StatsConfig
from bowling_stats.date_groups import group_sessions_by_date
from bowling_stats.inconsistency import compute_inconsistency
from bowling_stats.lanes import compute_lucky_lanes, sort_lanes
from bowling_stats.normalize import SessionRecord, normalize_sessions
from bowling_stats.records import build_highlights
from bowling_stats.report import build_dashboard_from_sessions, to_plain
from bowling_stats.rolling import compute_recent_averages, sort_recent_averages
from bowling_stats.store_client import StoreError
from bowling_stats.synergy import compute_synergy

from ..ports.score_store import ScoreStorePort

logger = logging.getLogger(__name__)

# Thread pool for running blocking store reads
_executor = ThreadPoolExecutor(max_workers=4)

SNAPSHOT_QUERY = "game_results"


@dataclass
class DashboardRequest:
    """Request for one dashboard panel."""

    panel: str = "dashboard"
    date_from: str | None = None
    date_to: str | None = None
    member_id: str | None = None
    game_count: int | None = None
    sort_by: str | None = None
    sort_order: str = "desc"
    as_of: date | None = None


@dataclass
class DashboardResult:
    """Result of a panel computation."""

    success: bool
    payload: Any = None
    error: str | None = None
    error_code: str | None = None
    metadata: Dict[str, Any] | None = None


PanelBuilder = Callable[[Sequence[SessionRecord], DashboardRequest, StatsConfig], Any]


def _synergy(sessions: Sequence[SessionRecord], req: DashboardRequest, config: StatsConfig) -> Any:
    if not req.member_id:
        raise ValueError("member_id is required for the synergy panel")
    return compute_synergy(sessions, req.member_id)


PANELS: Dict[str, PanelBuilder] = {
    "dashboard": lambda s, req, cfg: build_dashboard_from_sessions(s, cfg, req.as_of, req.member_id),
    "recent_averages": lambda s, req, cfg: sort_recent_averages(
        compute_recent_averages(s, req.game_count or cfg.recent_window),
        req.sort_by or "average",
    ),
    "date_groups": lambda s, req, cfg: group_sessions_by_date(s, req.sort_by or "date", req.sort_order),
    "highlights": lambda s, req, cfg: build_highlights(s, cfg.history, req.as_of),
    "synergy": _synergy,
    "inconsistency": lambda s, req, cfg: compute_inconsistency(s),
    "lucky_lanes": lambda s, req, cfg: sort_lanes(compute_lucky_lanes(s), req.sort_by),
    "comebacks": lambda s, req, cfg: compute_comebacks(s),
    "near_misses": lambda s, req, cfg: compute_near_misses(s),
}


class DashboardUseCase:
    """Use case for computing dashboard panels.

    Each execution:
    1. Loads one snapshot of raw rows (through the caller's cache)
    2. Normalizes it into session records
    3. Runs the requested derivation over the snapshot
    """

    def __init__(
        self,
        store: ScoreStorePort,
        cache: SnapshotCache,
        config: StatsConfig | None = None,
    ):
        self._store = store
        self._cache = cache
        self._config = config or StatsConfig()

    def _load_sessions(self, date_from: str | None, date_to: str | None) -> List[SessionRecord]:
        results = self._store.fetch_results(date_from=date_from, date_to=date_to)
        return normalize_sessions(results)

    def load_snapshot(self, request: DashboardRequest) -> List[SessionRecord]:
        params = {"date_from": request.date_from, "date_to": request.date_to}
        return self._cache.get_or_load(
            SNAPSHOT_QUERY,
            params,
            partial(self._load_sessions, request.date_from, request.date_to),
        )

    async def execute(self, request: DashboardRequest) -> DashboardResult:
        """Execute the panel computation.

        Args:
            request: Panel request

        Returns:
            Panel result; a failed snapshot fails the whole request
        """
        builder = PANELS.get(request.panel)
        if builder is None:
            return DashboardResult(
                success=False,
                error=f"Unknown panel: {request.panel}",
                error_code="INVALID_REQUEST",
            )

        loop = asyncio.get_running_loop()
        try:
            sessions = await loop.run_in_executor(_executor, partial(self.load_snapshot, request))
            payload = to_plain(builder(sessions, request, self._config))
        except ValueError as e:
            return DashboardResult(success=False, error=str(e), error_code="INVALID_REQUEST")
        except StoreError as e:
            logger.error(f"Store read failed for panel {request.panel}: {e}")
            return DashboardResult(success=False, error=str(e), error_code="STORE_UNAVAILABLE")
        except Exception as e:
            logger.exception(f"Panel {request.panel} failed")
            return DashboardResult(success=False, error=str(e), error_code="INTERNAL_ERROR")

        logger.info(f"Built panel {request.panel} from {len(sessions)} sessions")
        return DashboardResult(
            success=True,
            payload=payload,
            metadata={
                "panel": request.panel,
                "sessions": len(sessions),
                "date_from": request.date_from,
                "date_to": request.date_to,
            },
        )

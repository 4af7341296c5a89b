from __future__ import annotations

import logging
from dataclasses import asdict, is_dataclass
from datetime import date
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Sequence

from .comebacks import compute_comebacks, compute_near_misses
from .config import StatsConfig
from .date_groups import group_sessions_by_date
from .inconsistency import compute_inconsistency
from .ingest import RawGameResult
from .lanes import compute_lucky_lanes
from .normalize import SessionRecord, normalize_sessions
from .overview import compute_dashboard_stats, compute_top_players
from .records import build_highlights
from .rolling import compute_recent_averages
from .synergy import compute_synergy

logger = logging.getLogger(__name__)


def to_plain(obj: Any) -> Any:
    """Dataclasses, enums and tuples down to JSON-ready dicts, strings and lists."""
    if is_dataclass(obj) and not isinstance(obj, type):
        return to_plain(asdict(obj))
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, dict):
        return {k: to_plain(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [to_plain(v) for v in obj]
    if isinstance(obj, (set, frozenset)):
        return sorted(to_plain(v) for v in obj)
    return obj


def _plain_list(items: Iterable[Any]) -> List[Any]:
    return [to_plain(i) for i in items]


def build_dashboard_from_sessions(
    sessions: Sequence[SessionRecord],
    config: Optional[StatsConfig] = None,
    as_of: Optional[date] = None,
    member_id: Optional[str] = None,
) -> Dict[str, Any]:
    config = config or StatsConfig()
    report: Dict[str, Any] = {
        "overview": to_plain(compute_dashboard_stats(sessions)),
        "top_players": _plain_list(compute_top_players(sessions)),
        "recent_averages": _plain_list(compute_recent_averages(sessions, config.recent_window)),
        "date_groups": _plain_list(group_sessions_by_date(sessions)),
        "highlights": to_plain(build_highlights(sessions, config.history, as_of)),
        "inconsistency": _plain_list(compute_inconsistency(sessions)),
        "lucky_lanes": _plain_list(compute_lucky_lanes(sessions)),
        "comebacks": _plain_list(compute_comebacks(sessions)),
        "near_misses": to_plain(compute_near_misses(sessions)),
    }
    if member_id:
        report["synergy"] = {
            "member_id": member_id,
            "partners": _plain_list(compute_synergy(sessions, member_id)),
        }
    return report


def build_dashboard(
    results: Sequence[RawGameResult],
    config: Optional[StatsConfig] = None,
    as_of: Optional[date] = None,
    member_id: Optional[str] = None,
) -> Dict[str, Any]:
    sessions = normalize_sessions(results)
    logger.info("Building dashboard from %d rows across %d sessions", len(results), len(sessions))
    report = build_dashboard_from_sessions(sessions, config, as_of, member_id)
    report["meta"] = {
        "rows": len(results),
        "sessions": len(sessions),
        "as_of": (as_of or date.today()).isoformat(),
    }
    return report

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from .config import DEFAULT_RECENT_WINDOW, TREND_THRESHOLD_PCT
from .normalize import MemberRef, SessionRecord, mean
from .types import TrendDirection


@dataclass(frozen=True)
class RecentGamesAverage:
    member: MemberRef
    recent_average: float
    total_games: int
    recent_games: int
    trend: Optional[TrendDirection] = None
    trend_percentage: Optional[float] = None
    last_session_date: Optional[str] = None


def classify_trend(percentage: float, threshold: float = TREND_THRESHOLD_PCT) -> TrendDirection:
    if percentage > threshold:
        return TrendDirection.UP
    if percentage < -threshold:
        return TrendDirection.DOWN
    return TrendDirection.STABLE


def compute_trend(window: Sequence[int]) -> Tuple[Optional[TrendDirection], Optional[float]]:
    """Compare the first and second positional halves of an ordered window.

    The window is newest first, so the first half holds the most recent games.
    Returns (None, None) when fewer than two scores exist.
    """
    if len(window) < 2:
        return None, None
    mid = len(window) // 2
    first_avg = mean(window[:mid])
    second_avg = mean(window[mid:])
    if first_avg == 0:
        return TrendDirection.STABLE, 0.0
    pct = (second_avg - first_avg) / first_avg * 100
    return classify_trend(pct), pct


def member_score_history(sessions: Sequence[SessionRecord]) -> Dict[str, Tuple[MemberRef, List[int], str]]:
    """Flatten each member's scores: session date descending, then game number."""
    ordered = sorted(sessions, key=lambda s: s.date, reverse=True)
    history: Dict[str, Tuple[MemberRef, List[int], str]] = {}
    for s in ordered:
        for p in s.participants:
            entry = history.get(p.member.id)
            if entry is None:
                entry = (p.member, [], s.date)
                history[p.member.id] = entry
            entry[1].extend(score for score in p.game_slots if score is not None)
    return history


def compute_recent_averages(
    sessions: Sequence[SessionRecord],
    window_size: int = DEFAULT_RECENT_WINDOW,
) -> List[RecentGamesAverage]:
    if window_size < 1:
        raise ValueError("window_size must be at least 1")

    rows: List[RecentGamesAverage] = []
    for member, scores, last_date in member_score_history(sessions).values():
        if not scores:
            continue
        window = scores[:window_size]
        trend, pct = compute_trend(window)
        rows.append(
            RecentGamesAverage(
                member=member,
                recent_average=mean(window),
                total_games=len(scores),
                recent_games=len(window),
                trend=trend,
                trend_percentage=pct,
                last_session_date=last_date,
            )
        )
    rows.sort(key=lambda r: r.recent_average, reverse=True)
    return rows


def sort_recent_averages(
    rows: Sequence[RecentGamesAverage],
    sort_by: str = "average",
    descending: Optional[bool] = None,
) -> List[RecentGamesAverage]:
    keys = {
        "average": lambda r: r.recent_average,
        "name": lambda r: r.member.name,
        "games": lambda r: r.recent_games,
        "trend": lambda r: r.trend_percentage or 0.0,
    }
    if sort_by not in keys:
        raise ValueError(f"Unknown sort key: {sort_by}")
    if descending is None:
        descending = sort_by != "name"
    return sorted(rows, key=keys[sort_by], reverse=descending)

from __future__ import annotations

import statistics
from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple

from .normalize import MemberRef, SessionRecord
from .types import InconsistencyTier

TIER_THRESHOLDS: Tuple[Tuple[float, InconsistencyTier], ...] = (
    (35.0, InconsistencyTier.TORNADO),
    (30.0, InconsistencyTier.ROLLER_COASTER),
    (25.0, InconsistencyTier.CAROUSEL),
    (20.0, InconsistencyTier.TRAIN),
)


@dataclass(frozen=True)
class InconsistencyEntry:
    member: MemberRef
    total_games: int
    average_score: float
    standard_deviation: float
    highest_score: int
    lowest_score: int
    score_range: int
    unpredictability_index: float
    tier: InconsistencyTier


def inconsistency_tier(standard_deviation: float) -> InconsistencyTier:
    for threshold, tier in TIER_THRESHOLDS:
        if standard_deviation >= threshold:
            return tier
    return InconsistencyTier.STEADY


def compute_inconsistency(
    sessions: Sequence[SessionRecord],
    min_games: int = 5,
    limit: int = 7,
) -> List[InconsistencyEntry]:
    scores_by_member: Dict[str, Tuple[MemberRef, List[int]]] = {}
    for s in sessions:
        for p in s.participants:
            scores_by_member.setdefault(p.member.id, (p.member, []))[1].extend(p.scores)

    rows: List[InconsistencyEntry] = []
    for member, scores in scores_by_member.values():
        if len(scores) < min_games:
            continue
        avg = statistics.fmean(scores)
        # population deviation over individual games, not session averages
        std = statistics.pstdev(scores)
        rows.append(
            InconsistencyEntry(
                member=member,
                total_games=len(scores),
                average_score=avg,
                standard_deviation=std,
                highest_score=max(scores),
                lowest_score=min(scores),
                score_range=max(scores) - min(scores),
                unpredictability_index=(std / avg * 100) if avg else 0.0,
                tier=inconsistency_tier(std),
            )
        )
    rows.sort(key=lambda r: r.standard_deviation, reverse=True)
    return rows[:limit]

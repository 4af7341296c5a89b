from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from .config import ALMOST_THERE_FLOOR, HIGH_GAME_THRESHOLD, NEAR_MISS_FLOOR
from .normalize import MemberRef, SessionRecord


@dataclass(frozen=True)
class ComebackEntry:
    member: MemberRef
    session_id: str
    session_date: str
    session_name: Optional[str]
    game1_score: int
    game3_score: int
    improvement: int
    improvement_rate: float
    all_scores: Tuple[Optional[int], ...]


@dataclass(frozen=True)
class NearMissEntry:
    member: MemberRef
    score: int
    game_number: int
    session_date: str
    session_name: Optional[str]
    gap_to_200: int


@dataclass(frozen=True)
class NearMissCounts:
    hall_of_fame: int = 0
    almost_there: int = 0
    so_close: int = 0
    total_high_scores: int = 0


@dataclass(frozen=True)
class NearMissSummary:
    hall_of_fame: Tuple[NearMissEntry, ...] = ()
    almost_there: Tuple[NearMissEntry, ...] = ()
    so_close: Tuple[NearMissEntry, ...] = ()
    counts: NearMissCounts = NearMissCounts()


def compute_comebacks(sessions: Sequence[SessionRecord], limit: int = 10) -> List[ComebackEntry]:
    """Member-sessions where game 3 beat game 1, biggest jump first."""
    rows: List[ComebackEntry] = []
    for s in sessions:
        for p in s.participants:
            first, last = p.game_slots[0], p.game_slots[2]
            if first is None or last is None:
                continue
            improvement = last - first
            if improvement <= 0:
                continue
            rows.append(
                ComebackEntry(
                    member=p.member,
                    session_id=s.id,
                    session_date=s.date,
                    session_name=s.session_name,
                    game1_score=first,
                    game3_score=last,
                    improvement=improvement,
                    improvement_rate=(improvement / first * 100) if first else 0.0,
                    all_scores=p.game_slots,
                )
            )
    rows.sort(key=lambda r: r.improvement, reverse=True)
    return rows[:limit]


def compute_near_misses(sessions: Sequence[SessionRecord], limit: int = 10) -> NearMissSummary:
    entries: List[NearMissEntry] = []
    for s in sessions:
        for p in s.participants:
            for idx, score in enumerate(p.game_slots):
                if score is None or score < NEAR_MISS_FLOOR:
                    continue
                entries.append(
                    NearMissEntry(
                        member=p.member,
                        score=score,
                        game_number=idx + 1,
                        session_date=s.date,
                        session_name=s.session_name,
                        gap_to_200=max(0, HIGH_GAME_THRESHOLD - score),
                    )
                )
    entries.sort(key=lambda e: e.score, reverse=True)

    hall = [e for e in entries if e.score >= HIGH_GAME_THRESHOLD]
    almost = [e for e in entries if ALMOST_THERE_FLOOR <= e.score < HIGH_GAME_THRESHOLD]
    close = [e for e in entries if NEAR_MISS_FLOOR <= e.score < ALMOST_THERE_FLOOR]
    return NearMissSummary(
        hall_of_fame=tuple(hall[:limit]),
        almost_there=tuple(almost[:limit]),
        so_close=tuple(close[:limit]),
        counts=NearMissCounts(
            hall_of_fame=len(hall),
            almost_there=len(almost),
            so_close=len(close),
            total_high_scores=len(entries),
        ),
    )

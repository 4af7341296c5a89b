from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Set, Tuple

from .config import HIGH_GAME_THRESHOLD
from .normalize import SessionRecord, mean
from .types import LaneRating

RATING_THRESHOLDS: Tuple[Tuple[float, LaneRating], ...] = (
    (160.0, LaneRating.JACKPOT),
    (150.0, LaneRating.LUCKY),
    (140.0, LaneRating.GOOD),
    (130.0, LaneRating.ORDINARY),
)


@dataclass(frozen=True)
class LaneStat:
    lane_number: int
    average_score: float
    total_games: int
    perfect_games: int  # games of 200 or more
    perfect_game_rate: float
    unique_members: int
    unique_sessions: int
    best_score: int
    best_score_member: str
    luck_index: float
    rating: LaneRating


@dataclass
class _LaneTally:
    scores: List[int] = field(default_factory=list)
    members: Set[str] = field(default_factory=set)
    sessions: Set[str] = field(default_factory=set)
    best_score: Optional[int] = None
    best_score_member: str = ""


def luck_index(average_score: float, perfect_game_rate: float) -> float:
    return average_score + perfect_game_rate * 2


def lane_rating(index: float) -> LaneRating:
    for threshold, rating in RATING_THRESHOLDS:
        if index >= threshold:
            return rating
    return LaneRating.UNLUCKY


def compute_lucky_lanes(sessions: Sequence[SessionRecord]) -> List[LaneStat]:
    tallies: Dict[int, _LaneTally] = {}
    for s in sessions:
        if s.lane_number is None:
            continue
        tally = tallies.setdefault(s.lane_number, _LaneTally())
        for p in s.participants:
            tally.members.add(p.member.id)
            tally.sessions.add(s.id)
            for score in p.scores:
                tally.scores.append(score)
                if tally.best_score is None or score > tally.best_score:
                    tally.best_score = score
                    tally.best_score_member = p.member.name

    lanes: List[LaneStat] = []
    for lane, tally in tallies.items():
        if not tally.scores:
            continue
        total = len(tally.scores)
        high = sum(1 for score in tally.scores if score >= HIGH_GAME_THRESHOLD)
        avg = mean(tally.scores)
        rate = high / total * 100
        index = luck_index(avg, rate)
        lanes.append(
            LaneStat(
                lane_number=lane,
                average_score=avg,
                total_games=total,
                perfect_games=high,
                perfect_game_rate=rate,
                unique_members=len(tally.members),
                unique_sessions=len(tally.sessions),
                best_score=tally.best_score or 0,
                best_score_member=tally.best_score_member,
                luck_index=index,
                rating=lane_rating(index),
            )
        )
    return sort_lanes(lanes)


LANE_SORT_KEYS = {
    "luck_index": lambda lane: lane.luck_index,
    "average_score": lambda lane: lane.average_score,
    "perfect_rate": lambda lane: lane.perfect_game_rate,
    "total_games": lambda lane: lane.total_games,
}


def sort_lanes(lanes: Sequence[LaneStat], sort_by: Optional[str] = None) -> List[LaneStat]:
    key = LANE_SORT_KEYS.get(sort_by or "luck_index")
    if key is None:
        raise ValueError(f"Unknown sort key: {sort_by}")
    return sorted(lanes, key=key, reverse=True)

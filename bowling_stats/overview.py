from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple

from .normalize import GAMES_PER_SESSION, MemberRef, SessionRecord, mean


@dataclass(frozen=True)
class DashboardStats:
    total_games: int = 0
    total_game_days: int = 0
    total_members: int = 0
    average_score: float = 0.0
    highest_score: int = 0
    highest_score_member: str = ""
    highest_score_date: str = ""
    highest_score_game_number: int = 0


@dataclass(frozen=True)
class TopPlayer:
    member: MemberRef
    games: int
    average: float
    improvement: float
    best_score: int


def compute_dashboard_stats(sessions: Sequence[SessionRecord]) -> DashboardStats:
    scores: List[int] = []
    members = set()
    days = set()
    best: Tuple[int, str, str, int] = (0, "", "", 0)
    found = False
    for s in sessions:
        for p in s.participants:
            members.add(p.member.id)
            days.add(s.date)
            for idx, score in enumerate(p.game_slots):
                if score is None:
                    continue
                scores.append(score)
                if not found or score > best[0]:
                    best = (score, p.member.name, s.date, idx + 1)
                    found = True
    return DashboardStats(
        total_games=len(scores),
        total_game_days=len(days),
        total_members=len(members),
        average_score=mean(scores),
        highest_score=best[0],
        highest_score_member=best[1],
        highest_score_date=best[2],
        highest_score_game_number=best[3],
    )


def compute_top_players(
    sessions: Sequence[SessionRecord],
    min_sessions: int = 3,
    limit: int = 5,
) -> List[TopPlayer]:
    """Leaders by average over complete three-game sessions only."""
    chronological = sorted(sessions, key=lambda s: s.date)
    per_member: Dict[str, Tuple[MemberRef, List[float], List[int]]] = {}
    for s in chronological:
        for p in s.participants:
            if len(p.scores) != GAMES_PER_SESSION:
                continue
            entry = per_member.setdefault(p.member.id, (p.member, [], []))
            entry[1].append(p.average)
            entry[2].extend(p.scores)

    players: List[TopPlayer] = []
    for member, averages, scores in per_member.values():
        if len(averages) < min_sessions:
            continue
        improvement = 0.0
        if len(averages) >= 6:
            first = mean(averages[:3])
            last = mean(averages[-3:])
            improvement = (last - first) / first * 100 if first else 0.0
        players.append(
            TopPlayer(
                member=member,
                games=len(averages),
                average=mean(averages),
                improvement=improvement,
                best_score=max(scores),
            )
        )
    players.sort(key=lambda p: p.average, reverse=True)
    return players[:limit]

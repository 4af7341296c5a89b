from __future__ import annotations

import math
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, Optional, Sequence, Tuple

from .normalize import MemberRef, NormalizedMemberSession, SessionRecord, mean

MAX_TEAMS_PER_DAY = 5


@dataclass(frozen=True)
class TeamMember:
    id: str
    name: str
    average: float


@dataclass(frozen=True)
class TeamDayStat:
    team_name: str
    member_ids: Tuple[str, ...]
    members: Tuple[TeamMember, ...]
    team_average: float
    total_games: int
    rank: int


@dataclass(frozen=True)
class DayChampion:
    member: MemberRef
    average: float


@dataclass(frozen=True)
class DateStats:
    total_sessions: int
    total_participants: int
    average_score: float
    champion: Optional[DayChampion]
    team_stats: Tuple[TeamDayStat, ...]


@dataclass(frozen=True)
class DateGroup:
    date: str
    sessions: Tuple[SessionRecord, ...]
    date_stats: DateStats


@dataclass
class TeamCandidate:
    """Recurring lineup within one date, keyed by the set of member IDs."""

    member_ids: FrozenSet[str]
    names: Dict[str, str] = field(default_factory=dict)
    contributions: Dict[str, List[float]] = field(default_factory=lambda: defaultdict(list))
    performances: int = 0

    def add(self, participants: Sequence[NormalizedMemberSession]) -> None:
        for p in participants:
            self.names[p.member.id] = p.member.name
            self.contributions[p.member.id].append(p.average)
            self.performances += 1

    @property
    def display_name(self) -> str:
        return " & ".join(sorted(self.names.values()))

    def members(self) -> Tuple[TeamMember, ...]:
        return tuple(
            TeamMember(id=mid, name=self.names[mid], average=mean(avgs))
            for mid, avgs in self.contributions.items()
        )


def team_size_for(participant_count: int) -> int:
    return max(2, min(4, math.ceil(participant_count / 2)))


def infer_team_stats(
    sessions: Sequence[SessionRecord],
    limit: int = MAX_TEAMS_PER_DAY,
) -> List[TeamDayStat]:
    """Treat the top half (2-4 bowlers) of each lane session as that day's team."""
    candidates: Dict[FrozenSet[str], TeamCandidate] = {}
    for s in sessions:
        if len(s.participants) < 2:
            continue
        ordered = sorted(s.participants, key=lambda p: p.average, reverse=True)
        top = ordered[: team_size_for(len(ordered))]
        key = frozenset(p.member.id for p in top)
        cand = candidates.get(key)
        if cand is None:
            cand = TeamCandidate(member_ids=key)
            candidates[key] = cand
        cand.add(top)

    scored = []
    for cand in candidates.values():
        members = cand.members()
        if len(members) < 2:
            continue
        scored.append((cand, members, mean(m.average for m in members)))
    scored.sort(key=lambda item: item[2], reverse=True)

    return [
        TeamDayStat(
            team_name=cand.display_name,
            member_ids=tuple(sorted(cand.member_ids)),
            members=members,
            team_average=team_avg,
            total_games=cand.performances,
            rank=idx + 1,
        )
        for idx, (cand, members, team_avg) in enumerate(scored[:limit])
    ]


def compute_date_stats(sessions: Sequence[SessionRecord]) -> DateStats:
    results = [p for s in sessions for p in s.participants]
    champion: Optional[DayChampion] = None
    for p in results:
        if champion is None or p.average > champion.average:
            champion = DayChampion(member=p.member, average=p.average)
    return DateStats(
        total_sessions=len(sessions),
        total_participants=len({p.member.id for p in results}),
        average_score=mean(p.average for p in results),
        champion=champion,
        team_stats=tuple(infer_team_stats(sessions)),
    )


def group_sessions_by_date(
    sessions: Sequence[SessionRecord],
    sort_by: str = "date",
    sort_order: str = "desc",
) -> List[DateGroup]:
    if sort_by not in ("date", "average"):
        raise ValueError(f"Unknown sort key: {sort_by}")
    if sort_order not in ("asc", "desc"):
        raise ValueError(f"Unknown sort order: {sort_order}")

    by_date: Dict[str, List[SessionRecord]] = {}
    for s in sessions:
        by_date.setdefault(s.date, []).append(s)

    groups = [
        DateGroup(date=day, sessions=tuple(day_sessions), date_stats=compute_date_stats(day_sessions))
        for day, day_sessions in by_date.items()
    ]
    if sort_by == "date":
        groups.sort(key=lambda g: g.date, reverse=sort_order == "desc")
    else:
        groups.sort(key=lambda g: g.date_stats.average_score, reverse=sort_order == "desc")
    return groups

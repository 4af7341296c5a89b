from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from .ingest import RawGameResult

logger = logging.getLogger(__name__)

GAMES_PER_SESSION = 3


@dataclass(frozen=True)
class MemberRef:
    id: str
    name: str


@dataclass(frozen=True)
class NormalizedMemberSession:
    member: MemberRef
    game_slots: Tuple[Optional[int], ...]
    scores: Tuple[int, ...]
    average: float
    strikes: int
    spares: int
    rank: int


@dataclass(frozen=True)
class SessionRecord:
    id: str
    date: str
    lane_number: Optional[int]
    session_name: Optional[str]
    participants: Tuple[NormalizedMemberSession, ...]


def mean(values: Iterable[float]) -> float:
    """Mean of the given values, 0.0 for an empty input."""
    vals = list(values)
    if not vals:
        return 0.0
    return sum(vals) / len(vals)


@dataclass
class _MemberAccumulator:
    member: MemberRef
    slots: List[Optional[int]]
    strikes: List[int]
    spares: List[int]


@dataclass
class _SessionAccumulator:
    id: str
    date: str
    lane_number: Optional[int]
    session_name: Optional[str]
    members: Dict[str, _MemberAccumulator]


def _rank_participants(members: Iterable[_MemberAccumulator]) -> Tuple[NormalizedMemberSession, ...]:
    scored: List[Tuple[_MemberAccumulator, Tuple[int, ...]]] = []
    for acc in members:
        scores = tuple(s for s in acc.slots if s is not None)
        if not scores:
            continue
        scored.append((acc, scores))

    # sorted() is stable: equal averages keep first-appearance order
    ordered = sorted(scored, key=lambda item: mean(item[1]), reverse=True)
    return tuple(
        NormalizedMemberSession(
            member=acc.member,
            game_slots=tuple(acc.slots),
            scores=scores,
            average=mean(scores),
            strikes=sum(acc.strikes),
            spares=sum(acc.spares),
            rank=idx + 1,
        )
        for idx, (acc, scores) in enumerate(ordered)
    )


def normalize_sessions(results: Iterable[RawGameResult]) -> List[SessionRecord]:
    """Group raw game rows into ranked per-session member records.

    Duplicate rows for the same session, member and game number are resolved
    last-write-wins in input order. Members with no recorded game are dropped
    from their session. Sessions come back newest date first.
    """
    sessions: Dict[str, _SessionAccumulator] = {}

    for r in results:
        sess = sessions.get(r.session_id)
        if sess is None:
            sess = _SessionAccumulator(
                id=r.session_id,
                date=r.session_date,
                lane_number=r.lane_number,
                session_name=r.session_name,
                members={},
            )
            sessions[r.session_id] = sess
        if sess.lane_number is None and r.lane_number is not None:
            sess.lane_number = r.lane_number
        if sess.session_name is None and r.session_name:
            sess.session_name = r.session_name

        acc = sess.members.get(r.member_id)
        if acc is None:
            acc = _MemberAccumulator(
                member=MemberRef(id=r.member_id, name=r.member_name),
                slots=[None] * GAMES_PER_SESSION,
                strikes=[0] * GAMES_PER_SESSION,
                spares=[0] * GAMES_PER_SESSION,
            )
            sess.members[r.member_id] = acc

        slot = r.game_number - 1
        if acc.slots[slot] is not None:
            logger.debug(
                "Duplicate game %d for member %s in session %s; keeping the later row",
                r.game_number,
                r.member_id,
                r.session_id,
            )
        acc.slots[slot] = r.score
        acc.strikes[slot] = r.strikes
        acc.spares[slot] = r.spares

    records = [
        SessionRecord(
            id=s.id,
            date=s.date,
            lane_number=s.lane_number,
            session_name=s.session_name,
            participants=_rank_participants(s.members.values()),
        )
        for s in sessions.values()
    ]
    records.sort(key=lambda s: s.date, reverse=True)
    return records

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Sequence

from .normalize import SessionRecord, mean


@dataclass(frozen=True)
class SynergyEntry:
    partner_id: str
    partner_name: str
    synergy_score: float
    partner_score: float
    games_played: int


@dataclass
class _Pairing:
    name: str
    own_averages: List[float] = field(default_factory=list)
    partner_averages: List[float] = field(default_factory=list)


def compute_synergy(
    sessions: Sequence[SessionRecord],
    member_id: str,
    min_shared: int = 2,
    top_k: int = 5,
) -> List[SynergyEntry]:
    """Rank partners by the member's own average in the sessions they shared."""
    pairings: Dict[str, _Pairing] = {}
    for s in sessions:
        own = next((p for p in s.participants if p.member.id == member_id), None)
        if own is None:
            continue
        for other in s.participants:
            if other.member.id == member_id:
                continue
            pairing = pairings.setdefault(other.member.id, _Pairing(name=other.member.name))
            pairing.own_averages.append(own.average)
            pairing.partner_averages.append(other.average)

    entries = [
        SynergyEntry(
            partner_id=partner_id,
            partner_name=pairing.name,
            synergy_score=mean(pairing.own_averages),
            partner_score=mean(pairing.partner_averages),
            games_played=len(pairing.own_averages),
        )
        for partner_id, pairing in pairings.items()
        if len(pairing.own_averages) >= min_shared
    ]
    entries.sort(key=lambda e: e.synergy_score, reverse=True)
    return entries[:top_k]

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Dict, List, Optional, Sequence, Tuple

from .config import HIGH_AVERAGE_THRESHOLD, HIGH_GAME_THRESHOLD, HistoryWindow
from .normalize import MemberRef, SessionRecord
from .types import MilestoneType


@dataclass(frozen=True)
class HighestSingleGame:
    score: int
    member: str
    date: str


@dataclass(frozen=True)
class HighestAverage:
    average: float
    member: str
    date: str


@dataclass(frozen=True)
class PerfectStreak:
    """Consecutive most-recent league dates attended. Approximate."""

    member: str
    sessions: int
    start_date: str
    end_date: str


@dataclass(frozen=True)
class MonthlyChampion:
    month: str  # YYYY-MM
    member: MemberRef
    average: float
    sessions: int


@dataclass(frozen=True)
class Milestone:
    type: MilestoneType
    member: str
    date: str
    value: float
    description: str


@dataclass(frozen=True)
class Records:
    highest_single_game: Optional[HighestSingleGame]
    highest_average: Optional[HighestAverage]
    perfect_streak: Optional[PerfectStreak]


@dataclass(frozen=True)
class HighlightsSummary:
    records: Records
    monthly_champions: Tuple[MonthlyChampion, ...] = ()
    milestones: Tuple[Milestone, ...] = ()


@dataclass
class _MonthTally:
    name: str
    total: float = 0.0
    count: int = 0


@dataclass
class _RecordScan:
    highest_single: Optional[HighestSingleGame] = None
    highest_average: Optional[HighestAverage] = None
    monthly: Dict[str, Dict[str, _MonthTally]] = field(default_factory=dict)


def select_history(
    sessions: Sequence[SessionRecord],
    window: HistoryWindow,
    as_of: Optional[date] = None,
) -> List[SessionRecord]:
    """Newest-first slice of sessions inside the configured age and count caps."""
    as_of = as_of or date.today()
    cutoff = (as_of - timedelta(days=window.max_age_days)).isoformat()
    recent = [s for s in sessions if s.date >= cutoff]
    recent.sort(key=lambda s: s.date, reverse=True)
    return recent[: window.max_sessions]


def _scan(sessions: Sequence[SessionRecord]) -> _RecordScan:
    scan = _RecordScan()
    for s in sessions:
        month = s.date[:7]
        for p in s.participants:
            best = max(p.scores)
            if scan.highest_single is None or best > scan.highest_single.score:
                scan.highest_single = HighestSingleGame(score=best, member=p.member.name, date=s.date)
            if scan.highest_average is None or p.average > scan.highest_average.average:
                scan.highest_average = HighestAverage(average=p.average, member=p.member.name, date=s.date)

            member_months = scan.monthly.setdefault(p.member.id, {})
            tally = member_months.setdefault(month, _MonthTally(name=p.member.name))
            tally.total += p.average
            tally.count += 1
    return scan


def compute_monthly_champions(
    monthly: Dict[str, Dict[str, _MonthTally]],
    months: int = 6,
    min_sessions: int = 2,
) -> List[MonthlyChampion]:
    month_keys = sorted({m for per_member in monthly.values() for m in per_member}, reverse=True)
    champions: List[MonthlyChampion] = []
    for month in month_keys[:months]:
        best: Optional[MonthlyChampion] = None
        for member_id, per_member in monthly.items():
            tally = per_member.get(month)
            if not tally or tally.count < min_sessions:
                continue
            avg = tally.total / tally.count
            if best is None or avg > best.average:
                best = MonthlyChampion(
                    month=month,
                    member=MemberRef(id=member_id, name=tally.name),
                    average=avg,
                    sessions=tally.count,
                )
        if best is not None:
            champions.append(best)
    return champions


def compute_attendance_streak(sessions: Sequence[SessionRecord]) -> Optional[PerfectStreak]:
    """Longest run of consecutive most-recent league dates attended by one member.

    Simplified: only the run ending at the latest league date counts, and
    every date with any session is treated as a league night.
    """
    dates = sorted({s.date for s in sessions}, reverse=True)
    if not dates:
        return None
    attended: Dict[str, set] = {}
    names: Dict[str, str] = {}
    for s in sessions:
        for p in s.participants:
            attended.setdefault(p.member.id, set()).add(s.date)
            names.setdefault(p.member.id, p.member.name)

    best: Optional[PerfectStreak] = None
    for member_id, member_dates in attended.items():
        run = 0
        for d in dates:
            if d not in member_dates:
                break
            run += 1
        if run == 0:
            continue
        if best is None or run > best.sessions:
            best = PerfectStreak(
                member=names[member_id],
                sessions=run,
                start_date=dates[run - 1],
                end_date=dates[0],
            )
    return best


def compute_milestones(
    sessions: Sequence[SessionRecord],
    window: HistoryWindow,
) -> List[Milestone]:
    milestones: List[Milestone] = []
    for s in list(sessions)[: window.milestone_sessions]:
        for p in s.participants:
            best = max(p.scores)
            if best >= HIGH_GAME_THRESHOLD:
                milestones.append(
                    Milestone(
                        type=MilestoneType.FIRST_200,
                        member=p.member.name,
                        date=s.date,
                        value=best,
                        description=f"Broke 200 with a {best}",
                    )
                )
            if p.average >= HIGH_AVERAGE_THRESHOLD:
                milestones.append(
                    Milestone(
                        type=MilestoneType.HIGH_AVERAGE,
                        member=p.member.name,
                        date=s.date,
                        value=round(p.average),
                        description=f"Averaged {p.average:.1f} for the night",
                    )
                )
    return milestones[: window.max_milestones]


def build_highlights(
    sessions: Sequence[SessionRecord],
    window: Optional[HistoryWindow] = None,
    as_of: Optional[date] = None,
) -> HighlightsSummary:
    window = window or HistoryWindow()
    history = select_history(sessions, window, as_of)
    scan = _scan(history)
    records = Records(
        highest_single_game=scan.highest_single,
        highest_average=scan.highest_average,
        perfect_streak=compute_attendance_streak(history),
    )
    return HighlightsSummary(
        records=records,
        monthly_champions=tuple(compute_monthly_champions(scan.monthly, months=window.months)),
        milestones=tuple(compute_milestones(history, window)),
    )

from datetime import date

from bowling_stats.config import HistoryWindow
from bowling_stats.ingest import RawGameResult
from bowling_stats.normalize import normalize_sessions
from bowling_stats.records import build_highlights, compute_attendance_streak, select_history
from bowling_stats.types import MilestoneType


def _session(session: str, day: str, members: dict) -> list:
    rows = []
    for member, scores in members.items():
        for idx, score in enumerate(scores):
            rows.append(RawGameResult(session, member, member.title(), idx + 1, score, day))
    return rows


AS_OF = date(2025, 8, 20)


def test_highest_single_game_and_average() -> None:
    rows = _session("s1", "2025-08-13", {"kim": [150, 210, 160], "lee": [190, 185, 188]}) + _session(
        "s2", "2025-08-06", {"kim": [210, 100, 100]}
    )
    summary = build_highlights(normalize_sessions(rows), as_of=AS_OF)

    single = summary.records.highest_single_game
    assert (single.score, single.member, single.date) == (210, "Kim", "2025-08-13")
    best_avg = summary.records.highest_average
    assert best_avg.member == "Lee"
    assert best_avg.average == (190 + 185 + 188) / 3


def test_history_is_capped_by_age_and_count() -> None:
    rows = (
        _session("old", "2024-12-01", {"kim": [299]})
        + _session("s1", "2025-08-13", {"kim": [150]})
        + _session("s2", "2025-08-06", {"kim": [160]})
        + _session("s3", "2025-07-30", {"kim": [170]})
    )
    sessions = normalize_sessions(rows)

    summary = build_highlights(sessions, as_of=AS_OF)
    assert summary.records.highest_single_game.score == 170

    window = HistoryWindow(max_sessions=2)
    assert [s.id for s in select_history(sessions, window, AS_OF)] == ["s1", "s2"]
    assert build_highlights(sessions, window, AS_OF).records.highest_single_game.score == 160


def test_monthly_champion_needs_two_sessions_that_month() -> None:
    rows = (
        _session("a1", "2025-08-06", {"kim": [150], "lee": [250], "park": [170]})
        + _session("a2", "2025-08-13", {"kim": [160], "park": [180]})
        + _session("j1", "2025-07-02", {"kim": [100]})
    )
    summary = build_highlights(normalize_sessions(rows), as_of=AS_OF)

    assert len(summary.monthly_champions) == 1
    champ = summary.monthly_champions[0]
    assert champ.month == "2025-08"
    assert champ.member.name == "Park"
    assert champ.average == 175
    assert champ.sessions == 2


def test_monthly_champions_cover_newest_months() -> None:
    rows = []
    for month in range(1, 9):
        for week in ("05", "12"):
            rows += _session(f"{month}-{week}", f"2025-{month:02d}-{week}", {"kim": [150 + month]})
    summary = build_highlights(normalize_sessions(rows), HistoryWindow(max_age_days=400), AS_OF)
    assert [c.month for c in summary.monthly_champions] == [
        "2025-08",
        "2025-07",
        "2025-06",
        "2025-05",
        "2025-04",
        "2025-03",
    ]


def test_milestones_from_recent_sessions() -> None:
    rows = _session("s1", "2025-08-13", {"kim": [205, 190, 180], "lee": [150, 140, 130]})
    summary = build_highlights(normalize_sessions(rows), as_of=AS_OF)

    kinds = [(m.type, m.member, m.value) for m in summary.milestones]
    assert (MilestoneType.FIRST_200, "Kim", 205) in kinds
    assert (MilestoneType.HIGH_AVERAGE, "Kim", 192) in kinds
    assert all(m.member != "Lee" for m in summary.milestones)


def test_milestones_only_scan_latest_sessions() -> None:
    rows = []
    for i in range(6):
        rows += _session(f"s{i}", f"2025-08-{10 + i:02d}", {"kim": [120]})
    rows += _session("early", "2025-08-01", {"lee": [250]})
    summary = build_highlights(normalize_sessions(rows), as_of=AS_OF)
    assert summary.milestones == ()


def test_attendance_streak_counts_latest_consecutive_dates() -> None:
    rows = (
        _session("s1", "2025-08-13", {"kim": [150], "lee": [150]})
        + _session("s2", "2025-08-06", {"kim": [150]})
        + _session("s3", "2025-07-30", {"kim": [150], "lee": [150]})
        + _session("s4", "2025-07-23", {"lee": [150]})
    )
    streak = compute_attendance_streak(normalize_sessions(rows))
    assert streak.member == "Kim"
    assert streak.sessions == 3
    assert streak.start_date == "2025-07-30"
    assert streak.end_date == "2025-08-13"


def test_empty_history_yields_empty_records() -> None:
    summary = build_highlights([], as_of=AS_OF)
    assert summary.records.highest_single_game is None
    assert summary.records.highest_average is None
    assert summary.records.perfect_streak is None
    assert summary.monthly_champions == ()
    assert summary.milestones == ()

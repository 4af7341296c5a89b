import pytest

from bowling_stats.comebacks import compute_comebacks, compute_near_misses
from bowling_stats.ingest import RawGameResult
from bowling_stats.normalize import normalize_sessions


def _games(session: str, member: str, slots: dict) -> list:
    return [
        RawGameResult(session, member, member.title(), game, score, "2025-08-13", session_name="League")
        for game, score in slots.items()
    ]


def test_comeback_requires_game_three_above_game_one() -> None:
    rows = (
        _games("s1", "up", {1: 120, 2: 150, 3: 180})
        + _games("s1", "flat", {1: 150, 2: 100, 3: 150})
        + _games("s1", "down", {1: 180, 2: 150, 3: 120})
        + _games("s1", "partial", {1: 100, 2: 200})
    )
    entries = compute_comebacks(normalize_sessions(rows))

    assert [e.member.id for e in entries] == ["up"]
    entry = entries[0]
    assert entry.improvement == 60
    assert entry.improvement_rate == pytest.approx(50)
    assert entry.all_scores == (120, 150, 180)
    assert entry.session_name == "League"


def test_comeback_without_game_two_still_counts() -> None:
    rows = _games("s1", "kim", {1: 100, 3: 150}) + _games("s2", "lee", {1: 100, 2: 100, 3: 190})
    entries = compute_comebacks(normalize_sessions(rows))
    assert [(e.member.id, e.improvement) for e in entries] == [("lee", 90), ("kim", 50)]


def test_near_miss_tiers() -> None:
    rows = _games("s1", "kim", {1: 196, 2: 205, 3: 183}) + _games("s2", "lee", {1: 179, 2: 200, 3: 190})
    summary = compute_near_misses(normalize_sessions(rows))

    assert [e.score for e in summary.hall_of_fame] == [205, 200]
    assert [e.score for e in summary.almost_there] == [196, 190]
    assert summary.almost_there[0].gap_to_200 == 4
    assert summary.almost_there[0].game_number == 1
    assert [e.score for e in summary.so_close] == [183]
    assert summary.counts.hall_of_fame == 2
    assert summary.counts.total_high_scores == 5


def test_empty_input_yields_empty_lists() -> None:
    assert compute_comebacks([]) == []
    summary = compute_near_misses([])
    assert summary.hall_of_fame == ()
    assert summary.counts.total_high_scores == 0


def test_band_edges() -> None:
    rows = _games("s1", "kim", {1: 180, 2: 189, 3: 190}) + _games("s2", "lee", {1: 199, 2: 200, 3: 179})
    summary = compute_near_misses(normalize_sessions(rows))
    assert [e.score for e in summary.so_close] == [189, 180]
    assert [e.score for e in summary.almost_there] == [199, 190]
    assert [e.score for e in summary.hall_of_fame] == [200]
    assert summary.hall_of_fame[0].gap_to_200 == 0

import pytest

from bowling_stats.date_groups import group_sessions_by_date, infer_team_stats, team_size_for
from bowling_stats.ingest import RawGameResult
from bowling_stats.normalize import normalize_sessions


def _rows(session: str, date: str, lane: int, averages: dict) -> list:
    return [
        RawGameResult(session, member, member.title(), 1, score, date, lane_number=lane)
        for member, score in averages.items()
    ]


def test_total_participants_counts_unique_members() -> None:
    rows = _rows("s1", "2025-08-13", 1, {"a": 150, "b": 160, "c": 170}) + _rows(
        "s2", "2025-08-13", 2, {"d": 140, "e": 150, "f": 160, "g": 170}
    )
    [group] = group_sessions_by_date(normalize_sessions(rows))
    assert group.date_stats.total_sessions == 2
    assert group.date_stats.total_participants == 7

    overlap = _rows("s1", "2025-08-13", 1, {"a": 150, "b": 160, "c": 170}) + _rows(
        "s2", "2025-08-13", 2, {"a": 140, "e": 150, "f": 160, "g": 170}
    )
    [group] = group_sessions_by_date(normalize_sessions(overlap))
    assert group.date_stats.total_participants == 6


def test_date_average_is_average_of_member_averages() -> None:
    rows = [
        RawGameResult("s1", "a", "A", 1, 100, "2025-08-13"),
        RawGameResult("s1", "a", "A", 2, 200, "2025-08-13"),
        RawGameResult("s1", "a", "A", 3, 300, "2025-08-13"),
        RawGameResult("s1", "b", "B", 1, 100, "2025-08-13"),
    ]
    [group] = group_sessions_by_date(normalize_sessions(rows))
    # (200 + 100) / 2, not the raw-score mean of 175
    assert group.date_stats.average_score == 150


def test_champion_ties_go_to_first_encountered() -> None:
    rows = _rows("s1", "2025-08-13", 1, {"a": 180, "b": 180, "c": 120})
    [group] = group_sessions_by_date(normalize_sessions(rows))
    assert group.date_stats.champion.member.id == "a"
    assert group.date_stats.champion.average == 180


def test_groups_sort_by_date_or_average() -> None:
    rows = _rows("s1", "2025-08-06", 1, {"a": 200}) + _rows("s2", "2025-08-13", 1, {"a": 100})
    sessions = normalize_sessions(rows)
    assert [g.date for g in group_sessions_by_date(sessions)] == ["2025-08-13", "2025-08-06"]
    assert [g.date for g in group_sessions_by_date(sessions, "date", "asc")] == ["2025-08-06", "2025-08-13"]
    assert [g.date for g in group_sessions_by_date(sessions, "average")] == ["2025-08-06", "2025-08-13"]
    with pytest.raises(ValueError):
        group_sessions_by_date(sessions, "lane")


def test_team_size_is_half_clamped_to_two_and_four() -> None:
    assert [team_size_for(n) for n in (2, 3, 4, 5, 6, 9, 12)] == [2, 2, 2, 3, 3, 4, 4]


def test_teams_keyed_by_member_ids_and_ranked() -> None:
    rows = (
        _rows("s1", "2025-08-13", 1, {"a": 200, "b": 180, "c": 100, "d": 90})
        + _rows("s2", "2025-08-13", 2, {"e": 150, "f": 140})
        + _rows("s3", "2025-08-13", 3, {"a": 160, "b": 140, "x": 50})
        + _rows("s4", "2025-08-13", 4, {"solo": 300})
    )
    teams = infer_team_stats(normalize_sessions(rows))

    assert len(teams) == 2
    top = teams[0]
    assert top.member_ids == ("a", "b")
    assert top.team_name == "A & B"
    # a: mean(200, 160) = 180, b: mean(180, 140) = 160
    assert {m.id: m.average for m in top.members} == {"a": 180, "b": 160}
    assert top.team_average == 170
    assert top.total_games == 4
    assert top.rank == 1
    assert teams[1].member_ids == ("e", "f")
    assert teams[1].rank == 2


def test_same_display_names_do_not_merge_distinct_teams() -> None:
    rows = [
        RawGameResult("s1", "a1", "Kim", 1, 200, "2025-08-13"),
        RawGameResult("s1", "b", "Lee", 1, 180, "2025-08-13"),
        RawGameResult("s2", "a2", "Kim", 1, 150, "2025-08-13"),
        RawGameResult("s2", "b", "Lee", 1, 140, "2025-08-13"),
    ]
    teams = infer_team_stats(normalize_sessions(rows))
    assert len(teams) == 2
    assert all(t.team_name == "Kim & Lee" for t in teams)


def test_top_five_teams_only() -> None:
    rows = []
    for i in range(7):
        rows += _rows(f"s{i}", "2025-08-13", i, {f"p{i}a": 100 + i, f"p{i}b": 90 + i})
    teams = infer_team_stats(normalize_sessions(rows))
    assert len(teams) == 5
    assert [t.rank for t in teams] == [1, 2, 3, 4, 5]
    assert teams[0].member_ids == ("p6a", "p6b")


def test_empty_input_yields_no_groups() -> None:
    assert group_sessions_by_date([]) == []

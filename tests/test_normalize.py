from bowling_stats.ingest import RawGameResult
from bowling_stats.normalize import normalize_sessions


def _row(session: str, member: str, game: int, score, date: str = "2025-08-13", name: str = "") -> RawGameResult:
    return RawGameResult(
        session_id=session,
        member_id=member,
        member_name=name or member.upper(),
        game_number=game,
        score=score,
        session_date=date,
        lane_number=1,
    )


def test_average_is_mean_of_recorded_games() -> None:
    sessions = normalize_sessions([_row("s", "a", 1, 150), _row("s", "a", 2, 180), _row("s", "a", 3, 210)])
    p = sessions[0].participants[0]
    assert p.scores == (150, 180, 210)
    assert p.average == 180


def test_missing_games_are_not_zero_filled() -> None:
    sessions = normalize_sessions([_row("s", "a", 1, 150), _row("s", "a", 3, 170)])
    p = sessions[0].participants[0]
    assert p.game_slots == (150, None, 170)
    assert p.scores == (150, 170)
    assert p.average == 160


def test_duplicate_game_number_keeps_last_row() -> None:
    sessions = normalize_sessions([_row("s", "a", 1, 120), _row("s", "a", 1, 190)])
    assert sessions[0].participants[0].scores == (190,)


def test_member_without_recorded_games_is_dropped() -> None:
    sessions = normalize_sessions([_row("s", "a", 1, None), _row("s", "b", 1, 140)])
    assert [p.member.id for p in sessions[0].participants] == ["b"]


def test_rank_descends_by_average_and_ties_keep_input_order() -> None:
    rows = [
        _row("s", "a", 1, 150),
        _row("s", "b", 1, 200),
        _row("s", "c", 1, 150),
    ]
    participants = normalize_sessions(rows)[0].participants
    assert [(p.member.id, p.rank) for p in participants] == [("b", 1), ("a", 2), ("c", 3)]


def test_sessions_are_newest_first_and_strikes_are_summed() -> None:
    rows = [
        RawGameResult("old", "a", "A", 1, 150, "2025-07-01", strikes=2, spares=1),
        RawGameResult("new", "a", "A", 1, 160, "2025-08-01", strikes=3, spares=2),
        RawGameResult("new", "a", "A", 2, 170, "2025-08-01", strikes=4, spares=0),
    ]
    sessions = normalize_sessions(rows)
    assert [s.id for s in sessions] == ["new", "old"]
    assert sessions[0].participants[0].strikes == 7
    assert sessions[0].participants[0].spares == 2


def test_empty_input_yields_no_sessions() -> None:
    assert normalize_sessions([]) == []

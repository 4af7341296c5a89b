import pytest

from bowling_stats.ingest import RawGameResult
from bowling_stats.lanes import compute_lucky_lanes, lane_rating, luck_index, sort_lanes
from bowling_stats.normalize import normalize_sessions
from bowling_stats.types import LaneRating


def _lane_games(session: str, lane, member: str, scores: list) -> list:
    return [
        RawGameResult(session, member, member.title(), idx + 1, score, "2025-08-13", lane_number=lane)
        for idx, score in enumerate(scores)
    ]


def test_luck_index_blends_average_and_high_game_rate() -> None:
    assert luck_index(170, 20) == 210


def test_lane_stats() -> None:
    rows = _lane_games("s1", 3, "kim", [150, 200, 160]) + _lane_games("s2", 3, "lee", [210, 130])
    [lane] = compute_lucky_lanes(normalize_sessions(rows))

    assert lane.lane_number == 3
    assert lane.total_games == 5
    assert lane.average_score == 170
    assert lane.perfect_games == 2
    assert lane.perfect_game_rate == pytest.approx(40)
    assert lane.luck_index == pytest.approx(250)
    assert lane.rating is LaneRating.JACKPOT
    assert lane.best_score == 210
    assert lane.best_score_member == "Lee"
    assert lane.unique_members == 2
    assert lane.unique_sessions == 2


def test_sessions_without_lane_are_skipped() -> None:
    rows = _lane_games("s1", None, "kim", [150])
    assert compute_lucky_lanes(normalize_sessions(rows)) == []


def test_rating_tiers() -> None:
    assert lane_rating(160) is LaneRating.JACKPOT
    assert lane_rating(150) is LaneRating.LUCKY
    assert lane_rating(149.9) is LaneRating.GOOD
    assert lane_rating(130) is LaneRating.ORDINARY
    assert lane_rating(129.9) is LaneRating.UNLUCKY


def test_resort_lanes() -> None:
    rows = (
        _lane_games("s1", 1, "kim", [120, 120, 120])
        + _lane_games("s1", 1, "lee", [120])
        + _lane_games("s2", 2, "lee", [150, 140, 145])
        + _lane_games("s3", 3, "park", [100, 205])
    )
    lanes = compute_lucky_lanes(normalize_sessions(rows))
    assert [lane.lane_number for lane in lanes] == [3, 2, 1]
    assert [lane.lane_number for lane in sort_lanes(lanes, "average_score")] == [3, 2, 1]
    assert [lane.lane_number for lane in sort_lanes(lanes, "total_games")] == [1, 2, 3]
    assert sort_lanes(lanes, "perfect_rate")[0].lane_number == 3
    with pytest.raises(ValueError):
        sort_lanes(lanes, "color")


def test_all_zero_lane_still_names_best_score_holder() -> None:
    [lane] = compute_lucky_lanes(normalize_sessions(_lane_games("s1", 4, "kim", [0])))
    assert lane.best_score == 0
    assert lane.best_score_member == "Kim"
    assert lane.rating is LaneRating.UNLUCKY

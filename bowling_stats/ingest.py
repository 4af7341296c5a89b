from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from datetime import date
from typing import Any, Dict, Iterable, List, Optional

from .store_client import ScoreStoreClient

logger = logging.getLogger(__name__)

GAME_NUMBERS = (1, 2, 3)
MIN_SCORE = 0
MAX_SCORE = 300


class InvalidRowError(ValueError):
    """A store row that cannot be turned into a RawGameResult."""


@dataclass(frozen=True)
class RawGameResult:
    session_id: str
    member_id: str
    member_name: str
    game_number: int
    score: Optional[int]
    session_date: str
    lane_number: Optional[int] = None
    session_name: Optional[str] = None
    strikes: int = 0
    spares: int = 0

    def __post_init__(self) -> None:
        if self.game_number not in GAME_NUMBERS:
            raise InvalidRowError(f"game_number must be 1, 2 or 3, got {self.game_number!r}")
        if self.score is not None and not MIN_SCORE <= self.score <= MAX_SCORE:
            raise InvalidRowError(f"score must be within {MIN_SCORE}-{MAX_SCORE}, got {self.score}")


def _first(row: Dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in row and row[key] is not None:
            return row[key]
    return None


def _embedded(row: Dict[str, Any], *keys: str) -> Dict[str, Any]:
    # PostgREST returns embeds as an object or a one-element list
    for key in keys:
        val = row.get(key)
        if isinstance(val, list):
            val = val[0] if val else None
        if isinstance(val, dict):
            return val
    return {}


def _as_int(value: Any, field: str) -> Optional[int]:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise InvalidRowError(f"{field} must be an integer, got {value!r}")
    if isinstance(value, float):
        if not value.is_integer():
            raise InvalidRowError(f"{field} must be an integer, got {value!r}")
        return int(value)
    try:
        return int(str(value).strip())
    except ValueError as exc:
        raise InvalidRowError(f"{field} must be an integer, got {value!r}") from exc


def _as_date(value: Any) -> str:
    if isinstance(value, date):
        return value.isoformat()[:10]
    text = str(value or "").strip()[:10]
    try:
        return date.fromisoformat(text).isoformat()
    except ValueError as exc:
        raise InvalidRowError(f"session_date is not an ISO date: {value!r}") from exc


def raw_result_from_row(row: Dict[str, Any]) -> RawGameResult:
    member = _embedded(row, "members", "member")
    session = _embedded(row, "game_sessions", "session")

    session_id = str(_first(row, "sessionId", "session_id") or session.get("id") or "")
    member_id = str(_first(row, "memberId", "member_id") or member.get("id") or "")
    if not session_id or not member_id:
        raise InvalidRowError("row is missing session_id or member_id")

    game_number = _as_int(_first(row, "gameNumber", "game_number"), "game_number")
    score = _as_int(row.get("score"), "score")

    raw_date = _first(row, "sessionDate", "session_date", "date") or session.get("date")
    lane = _first(row, "laneNumber", "lane_number")
    if lane is None:
        lane = session.get("lane_number")
    name = _first(row, "memberName", "member_name") or member.get("name") or ""
    session_name = _first(row, "sessionName", "session_name") or session.get("session_name")

    return RawGameResult(
        session_id=session_id,
        member_id=member_id,
        member_name=str(name),
        game_number=game_number,
        score=score,
        session_date=_as_date(raw_date),
        lane_number=_as_int(lane, "lane_number"),
        session_name=str(session_name) if session_name else None,
        strikes=_as_int(row.get("strikes"), "strikes") or 0,
        spares=_as_int(row.get("spares"), "spares") or 0,
    )


def raw_results_from_rows(
    rows: Iterable[Dict[str, Any]],
    skip_invalid: bool = False,
) -> List[RawGameResult]:
    results: List[RawGameResult] = []
    for idx, row in enumerate(rows):
        try:
            results.append(raw_result_from_row(row))
        except InvalidRowError as exc:
            if not skip_invalid:
                raise InvalidRowError(f"row {idx}: {exc}") from exc
            logger.warning("Dropping row %d: %s", idx, exc)
    return results


def raw_results_to_json(results: List[RawGameResult]) -> List[Dict[str, Any]]:
    return [asdict(r) for r in results]


def raw_results_from_json(items: List[Dict[str, Any]]) -> List[RawGameResult]:
    return raw_results_from_rows(items)


def fetch_raw_results(
    client: ScoreStoreClient,
    date_from: Optional[str] = None,
    date_to: Optional[str] = None,
    skip_invalid: bool = True,
) -> List[RawGameResult]:
    rows = client.fetch_game_rows(date_from=date_from, date_to=date_to)
    results = raw_results_from_rows(rows, skip_invalid=skip_invalid)
    logger.info("Fetched %d rows, %d usable", len(rows), len(results))
    return results

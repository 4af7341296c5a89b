"""REST API routes for dashboard panels."""

from datetime import date
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from pydantic import BaseModel

from ..transformers.dashboard_transformer import transform_payload
from ...application.ports.score_store import ScoreStorePort
from ...application.use_cases.build_dashboard import (
    DashboardRequest,
    DashboardUseCase,
)

router = APIRouter(prefix="/api", tags=["dashboard"])

ERROR_STATUS = {
    "INVALID_REQUEST": 400,
    "STORE_UNAVAILABLE": 502,
    "INTERNAL_ERROR": 500,
}


class ErrorResponse(BaseModel):
    """Error response model."""

    code: str
    message: str
    details: dict = {}


def get_store(request: Request) -> ScoreStorePort:
    """Store adapter created by the application lifespan."""
    return request.app.state.store


def get_use_case(
    request: Request,
    store: ScoreStorePort = Depends(get_store),
) -> DashboardUseCase:
    """Build the use case from the store and cache owned by the application."""
    state = request.app.state
    return DashboardUseCase(store, state.snapshot_cache, state.stats_config)


def _parse_date(value: Optional[str], field: str) -> Optional[date]:
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise HTTPException(
            status_code=400,
            detail={
                "error": {
                    "code": "INVALID_REQUEST",
                    "message": f"{field} must be an ISO date (YYYY-MM-DD)",
                    "details": {field: value},
                }
            },
        )


async def _run(use_case: DashboardUseCase, request: DashboardRequest) -> Dict[str, Any]:
    result = await use_case.execute(request)
    if not result.success:
        code = result.error_code or "INTERNAL_ERROR"
        raise HTTPException(
            status_code=ERROR_STATUS.get(code, 500),
            detail={
                "error": ErrorResponse(
                    code=code,
                    message=result.error or "Failed to compute panel",
                    details={"panel": request.panel},
                ).model_dump()
            },
        )
    return transform_payload(result.payload, result.metadata)


@router.get("/dashboard")
async def get_dashboard(
    member_id: Optional[str] = Query(None, alias="memberId"),
    date_from: Optional[str] = Query(None, alias="dateFrom"),
    date_to: Optional[str] = Query(None, alias="dateTo"),
    as_of: Optional[str] = Query(None, alias="asOf"),
    use_case: DashboardUseCase = Depends(get_use_case),
):
    """Get every dashboard panel computed from one snapshot.

    Args:
        member_id: Optional member for the synergy panel
        date_from: Earliest session date
        date_to: Latest session date
        as_of: Reference date for the records window (defaults to today)

    Returns:
        Full dashboard in frontend format
    """
    _parse_date(date_from, "dateFrom")
    _parse_date(date_to, "dateTo")
    request = DashboardRequest(
        panel="dashboard",
        member_id=member_id,
        date_from=date_from,
        date_to=date_to,
        as_of=_parse_date(as_of, "asOf"),
    )
    return await _run(use_case, request)


@router.get("/recent-averages")
async def get_recent_averages(
    game_count: int = Query(20, alias="gameCount", ge=1, le=300),
    sort_by: str = Query("average", alias="sortBy", pattern="^(average|name|games|trend)$"),
    use_case: DashboardUseCase = Depends(get_use_case),
):
    """Get each member's recent-N-games average and trend."""
    request = DashboardRequest(panel="recent_averages", game_count=game_count, sort_by=sort_by)
    return await _run(use_case, request)


@router.get("/history/dates")
async def get_date_groups(
    sort_by: str = Query("date", alias="sortBy", pattern="^(date|average)$"),
    sort_order: str = Query("desc", alias="sortOrder", pattern="^(asc|desc)$"),
    date_from: Optional[str] = Query(None, alias="dateFrom"),
    date_to: Optional[str] = Query(None, alias="dateTo"),
    use_case: DashboardUseCase = Depends(get_use_case),
):
    """Get sessions grouped by date with champions and inferred teams."""
    _parse_date(date_from, "dateFrom")
    _parse_date(date_to, "dateTo")
    request = DashboardRequest(
        panel="date_groups",
        sort_by=sort_by,
        sort_order=sort_order,
        date_from=date_from,
        date_to=date_to,
    )
    return await _run(use_case, request)


@router.get("/highlights")
async def get_highlights(
    as_of: Optional[str] = Query(None, alias="asOf"),
    use_case: DashboardUseCase = Depends(get_use_case),
):
    """Get all-time records, monthly champions and recent milestones."""
    request = DashboardRequest(panel="highlights", as_of=_parse_date(as_of, "asOf"))
    return await _run(use_case, request)


@router.get("/members/{member_id}/synergy")
async def get_member_synergy(
    member_id: str,
    use_case: DashboardUseCase = Depends(get_use_case),
):
    """Get the member's best partners by shared-session average."""
    request = DashboardRequest(panel="synergy", member_id=member_id)
    return await _run(use_case, request)


@router.get("/fun/inconsistency")
async def get_inconsistency(use_case: DashboardUseCase = Depends(get_use_case)):
    """Get the members with the widest game-to-game swings."""
    return await _run(use_case, DashboardRequest(panel="inconsistency"))


@router.get("/fun/lucky-lanes")
async def get_lucky_lanes(
    sort_by: str = Query(
        "luck_index",
        alias="sortBy",
        pattern="^(luck_index|average_score|perfect_rate|total_games)$",
    ),
    use_case: DashboardUseCase = Depends(get_use_case),
):
    """Get per-lane averages, 200+ rates and luck ratings."""
    return await _run(use_case, DashboardRequest(panel="lucky_lanes", sort_by=sort_by))


@router.get("/fun/comebacks")
async def get_comebacks(use_case: DashboardUseCase = Depends(get_use_case)):
    """Get the biggest game 1 to game 3 improvements."""
    return await _run(use_case, DashboardRequest(panel="comebacks"))


@router.get("/fun/near-misses")
async def get_near_misses(use_case: DashboardUseCase = Depends(get_use_case)):
    """Get high games banded around the 200 mark."""
    return await _run(use_case, DashboardRequest(panel="near_misses"))

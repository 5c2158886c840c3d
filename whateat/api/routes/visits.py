"""Visit history and usage statistics."""

from typing import Optional

from fastapi import APIRouter, Query

from whateat.domain.models import VisitCreate
from whateat.persistence import RestaurantRepository, VisitRepository, get_session
from whateat.stats import PERIODS, compute_usage_stats, period_start
from whateat.utils.timestamps import parse_iso_datetime, utc_now

from ..errors import INVALID_INPUT, NOT_FOUND, ApiError
from ..schemas import FavoriteUpdate, success

router = APIRouter(tags=["visits"])


def _parse_date(value: Optional[str], name: str):
    if not value:
        return None
    parsed = parse_iso_datetime(value)
    if parsed is None:
        raise ApiError(400, f"{name} must be an ISO 8601 date or datetime", INVALID_INPUT)
    return parsed


@router.get("/visits")
def list_visits(
    session_id: Optional[str] = None,
    user_id: Optional[str] = None,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    visit_type: Optional[str] = None,
    is_favorite: Optional[bool] = None,
    limit: int = Query(20, ge=1, le=200),
    offset: int = Query(0, ge=0),
):
    start = _parse_date(start_date, "start_date")
    end = _parse_date(end_date, "end_date")

    with get_session() as session:
        visits = VisitRepository(session).list(
            user_id=user_id,
            session_id=session_id,
            start_date=start,
            end_date=end,
            visit_type=visit_type,
            is_favorite=is_favorite,
            limit=limit,
            offset=offset,
        )
    return success(visits, count=len(visits))


@router.get("/usage-stats")
def usage_stats(
    session_id: Optional[str] = None,
    user_id: Optional[str] = None,
    period: str = "all",
):
    """Visit counts by type, category and restaurant for a period.

    Unknown periods count every visit, same as "all".
    """
    if period not in PERIODS:
        period = "all"

    now = utc_now()
    with get_session() as session:
        visits = VisitRepository(session).list_since(
            user_id=user_id, session_id=session_id, start=period_start(period, now)
        )
    return success(compute_usage_stats(visits, period, now))


@router.post("/visits", status_code=201)
def create_visit(body: VisitCreate):
    with get_session() as session:
        if RestaurantRepository(session).get_active(body.restaurant_id) is None:
            raise ApiError(404, "Restaurant not found", NOT_FOUND)
        visit = VisitRepository(session).create(body)
    return success(visit)


@router.patch("/visits/{visit_id}/favorite")
def set_favorite(visit_id: str, body: FavoriteUpdate):
    with get_session() as session:
        visit = VisitRepository(session).set_favorite(visit_id, body.is_favorite)
    return success(visit)

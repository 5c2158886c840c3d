"""Nearby restaurant search backed by the local search provider."""

from typing import Optional

from fastapi import APIRouter, Depends

from whateat.logging import get_logger
from whateat.search.exceptions import InvalidInputError
from whateat.search.service import NearbySearchService

from ..dependencies import get_search_service
from ..schemas import clamp_search_count, success

logger = get_logger(__name__, component="api")

router = APIRouter(tags=["search"])

SOURCE = "naver_local_search"
LOCATION_REQUIRED = "위치 정보(location)가 필요합니다."
COORDINATES_HINT = "좌표 기반 검색은 향후 지원 예정입니다."


@router.get("/nearby-restaurants")
def nearby_restaurants(
    location: Optional[str] = None,
    category: Optional[str] = None,
    count: Optional[str] = None,
    latitude: Optional[str] = None,
    longitude: Optional[str] = None,
    service: NearbySearchService = Depends(get_search_service),
):
    """
    Search restaurants near a place name.

    Coordinates alone are not searchable yet; a request with only
    latitude/longitude gets a 400 with a hint.
    """
    if not location or not location.strip():
        if latitude and longitude:
            raise InvalidInputError(
                f"{LOCATION_REQUIRED} 예: location=강남역",
                field="location",
                hint=COORDINATES_HINT,
            )
        raise InvalidInputError(LOCATION_REQUIRED, field="location")

    result = service.search(location, category or "", clamp_search_count(count))
    payload = result.to_payload()

    return success(
        payload["restaurants"],
        meta={
            "total": payload["total"],
            "location": payload["location"],
            "category": payload["category"],
            "source": SOURCE,
        },
    )

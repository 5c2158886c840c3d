"""Request bodies and envelope helpers for the REST API.

Create/update bodies reuse the domain models (RestaurantCreate, VisitCreate,
ReviewCreate, ReviewUpdate); only API-specific shapes live here.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel

from whateat.utils.parsing import parse_leading_int

DEFAULT_SEARCH_COUNT = 10
MAX_SEARCH_COUNT = 10


class FavoriteUpdate(BaseModel):
    is_favorite: bool


def success(data: Any, **extra: Any) -> Dict[str, Any]:
    """Success envelope: {"success": true, "data": data, **extra}."""
    return {"success": True, "data": data, **extra}


def clamp_search_count(raw: Optional[str]) -> int:
    """Clamp a count query value into [1, 10].

    Missing, unparseable and zero values mean the default of 10; negative
    values clamp to 1.
    """
    parsed = parse_leading_int(raw)
    if not parsed:
        parsed = DEFAULT_SEARCH_COUNT
    return max(1, min(parsed, MAX_SEARCH_COUNT))

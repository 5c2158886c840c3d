"""Core domain models.

- RawSearchItem: one listing exactly as the local search provider returns it
- NormalizedRestaurant: the application's restaurant shape after the pipeline
- Restaurant / Visit / Review: records persisted by the REST backend
"""

from datetime import datetime, timezone
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_MAIN_CATEGORY = "음식점"
DEFAULT_EMOJI = "🍽️"


def _utc(v: Optional[datetime]) -> Optional[datetime]:
    if v is None:
        return None
    if v.tzinfo is None:
        return v.replace(tzinfo=timezone.utc)
    return v.astimezone(timezone.utc)


# ============================================================================
# Search pipeline
# ============================================================================


class RawSearchItem(BaseModel):
    """A single listing from the local search provider.

    Every field is optional on the wire; absent or null values become empty
    strings so the normalizer never has to branch on presence. mapx/mapy are
    kept as strings (projected coordinate × 10) and parsed by the coordinate
    transform.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    title: str = ""
    link: str = ""
    category: str = ""
    description: str = ""
    telephone: str = ""
    address: str = ""
    road_address: str = Field("", alias="roadAddress")
    mapx: str = ""
    mapy: str = ""

    @field_validator("*", mode="before")
    @classmethod
    def coerce_to_string(cls, v: Any) -> str:
        if v is None:
            return ""
        return str(v)


class Category(BaseModel):
    """Parsed provider category, e.g. "음식점>한식>삼겹살"."""

    model_config = ConfigDict(frozen=True)

    main: str = DEFAULT_MAIN_CATEGORY
    sub: str = ""
    detail: str = ""
    raw: str = ""


class RawCoordinates(BaseModel):
    """Parsed integer inputs kept when the transform falls outside Korea."""

    model_config = ConfigDict(frozen=True)

    mapx: int
    mapy: int


class Coordinates(BaseModel):
    """WGS84-equivalent decimal degrees.

    latitude/longitude are both None when the transform produced a point
    outside the plausible bounding box; raw then carries the parsed inputs.
    """

    model_config = ConfigDict(frozen=True)

    latitude: Optional[float] = None
    longitude: Optional[float] = None
    raw: Optional[RawCoordinates] = None

    @property
    def is_valid(self) -> bool:
        return self.latitude is not None and self.longitude is not None


class NormalizedRestaurant(BaseModel):
    """Restaurant record produced by the search pipeline. Never mutated."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    name: str
    address: str = ""
    road_address: str = Field("", alias="roadAddress")
    category: Category = Field(default_factory=Category)
    telephone: str = ""
    description: str = ""
    link: str = ""
    mapx: str = ""
    mapy: str = ""
    coordinates: Optional[Coordinates] = None

    @property
    def identity_key(self) -> str:
        return f"{self.name}|{self.address}"


# ============================================================================
# Persisted records
# ============================================================================


class RestaurantCreate(BaseModel):
    """Fields accepted when registering a restaurant."""

    name: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1)
    emoji: str = DEFAULT_EMOJI
    sub_category: Optional[str] = None
    description: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    price_range: Optional[str] = None
    average_price: Optional[int] = Field(None, ge=0)
    opening_hours: Optional[str] = None
    image_url: Optional[str] = None

    @field_validator("name", "category")
    @classmethod
    def strip_required(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("Field cannot be empty or whitespace-only")
        return stripped


class Restaurant(RestaurantCreate):
    """Stored restaurant with system-managed fields."""

    id: str
    is_active: bool = True
    created_at: datetime
    updated_at: datetime

    @field_validator("created_at", "updated_at")
    @classmethod
    def ensure_utc(cls, v: datetime) -> datetime:
        return _utc(v)


class RestaurantSummary(BaseModel):
    """Restaurant fields embedded in visit and review listings."""

    id: str
    name: str
    emoji: str = DEFAULT_EMOJI
    category: str
    sub_category: Optional[str] = None
    address: Optional[str] = None


class VisitCreate(BaseModel):
    """Fields accepted when recording a visit."""

    restaurant_id: str = Field(..., min_length=1)
    user_id: Optional[str] = None
    session_id: Optional[str] = None
    visit_type: str = Field("manual", min_length=1)
    memo: Optional[str] = None


class Visit(VisitCreate):
    """Stored visit history entry."""

    id: str
    is_favorite: bool = False
    visited_at: datetime
    restaurant: Optional[RestaurantSummary] = None

    @field_validator("visited_at")
    @classmethod
    def ensure_utc(cls, v: datetime) -> datetime:
        return _utc(v)


class ReviewCreate(BaseModel):
    """Fields accepted when writing a review."""

    restaurant_id: str = Field(..., min_length=1)
    rating: float = Field(..., ge=1, le=5)
    content: str = Field(..., min_length=1)
    visit_id: Optional[str] = None
    user_id: Optional[str] = None
    session_id: Optional[str] = None
    title: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    image_urls: List[str] = Field(default_factory=list)
    is_public: bool = True


class ReviewUpdate(BaseModel):
    """Partial review update; unset fields are left untouched."""

    rating: Optional[float] = Field(None, ge=1, le=5)
    title: Optional[str] = None
    content: Optional[str] = Field(None, min_length=1)
    tags: Optional[List[str]] = None
    image_urls: Optional[List[str]] = None
    is_public: Optional[bool] = None


class Review(ReviewCreate):
    """Stored review."""

    id: str
    is_deleted: bool = False
    created_at: datetime
    updated_at: datetime
    restaurant: Optional[RestaurantSummary] = None

    @field_validator("created_at", "updated_at")
    @classmethod
    def ensure_utc(cls, v: datetime) -> datetime:
        return _utc(v)

    def is_owned_by(self, user_id: Optional[str] = None, session_id: Optional[str] = None) -> bool:
        """Whether the given user or session wrote this review."""
        if user_id and self.user_id == user_id:
            return True
        if session_id and self.session_id == session_id:
            return True
        return False

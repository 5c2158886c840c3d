"""Database schema definition and ORM models.

Tables: restaurants, visit_history, reviews. Timestamps are stored as
fixed-width ISO 8601 UTC strings so they sort and compare lexically.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    inspect,
)
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, relationship

from whateat.domain.models import (
    Restaurant,
    RestaurantCreate,
    RestaurantSummary,
    Review,
    ReviewCreate,
    Visit,
    VisitCreate,
)

logger = logging.getLogger(__name__)

Base = declarative_base()


class RestaurantModel(Base):
    """ORM model for the restaurants table."""

    __tablename__ = "restaurants"

    id = Column(String(36), primary_key=True, nullable=False)
    name = Column(String(255), nullable=False)
    emoji = Column(String(16), nullable=False, default="🍽️")
    category = Column(String(100), nullable=False)
    sub_category = Column(String(100), nullable=True)
    description = Column(Text, nullable=True)
    address = Column(Text, nullable=True)
    phone = Column(String(50), nullable=True)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    price_range = Column(String(50), nullable=True)
    average_price = Column(Integer, nullable=True)
    opening_hours = Column(Text, nullable=True)
    image_url = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(String(50), nullable=False)
    updated_at = Column(String(50), nullable=False)

    __table_args__ = (
        Index("idx_restaurants_category", "category"),
        Index("idx_restaurants_active_created", "is_active", "created_at"),
    )

    def to_domain(self) -> Restaurant:
        return Restaurant(
            id=self.id,
            name=self.name,
            emoji=self.emoji,
            category=self.category,
            sub_category=self.sub_category,
            description=self.description,
            address=self.address,
            phone=self.phone,
            latitude=self.latitude,
            longitude=self.longitude,
            price_range=self.price_range,
            average_price=self.average_price,
            opening_hours=self.opening_hours,
            image_url=self.image_url,
            is_active=self.is_active,
            created_at=_parse_datetime(self.created_at),
            updated_at=_parse_datetime(self.updated_at),
        )

    def to_summary(self) -> RestaurantSummary:
        """Fields embedded in visit and review listings."""
        return RestaurantSummary(
            id=self.id,
            name=self.name,
            emoji=self.emoji,
            category=self.category,
            sub_category=self.sub_category,
            address=self.address,
        )

    @classmethod
    def from_domain(
        cls, restaurant_id: str, data: RestaurantCreate, created_at: datetime
    ) -> "RestaurantModel":
        """Build a new row from create data.

        Args:
            restaurant_id: Generated identifier
            data: Validated create payload
            created_at: Timestamp used for created_at and updated_at
        """
        timestamp = _format_datetime(created_at)
        return cls(
            id=restaurant_id,
            is_active=True,
            created_at=timestamp,
            updated_at=timestamp,
            **data.model_dump(),
        )


class VisitModel(Base):
    """ORM model for the visit_history table."""

    __tablename__ = "visit_history"

    id = Column(String(36), primary_key=True, nullable=False)
    restaurant_id = Column(
        String(36), ForeignKey("restaurants.id", ondelete="CASCADE"), nullable=False
    )
    user_id = Column(String(255), nullable=True)
    session_id = Column(String(255), nullable=True)
    visit_type = Column(String(20), nullable=False, default="manual")
    memo = Column(Text, nullable=True)
    is_favorite = Column(Boolean, nullable=False, default=False)
    visited_at = Column(String(50), nullable=False)

    restaurant = relationship("RestaurantModel", lazy="joined")

    __table_args__ = (
        Index("idx_visits_user", "user_id"),
        Index("idx_visits_session", "session_id"),
        Index("idx_visits_visited_at", "visited_at"),
    )

    def to_domain(self) -> Visit:
        return Visit(
            id=self.id,
            restaurant_id=self.restaurant_id,
            user_id=self.user_id,
            session_id=self.session_id,
            visit_type=self.visit_type,
            memo=self.memo,
            is_favorite=self.is_favorite,
            visited_at=_parse_datetime(self.visited_at),
            restaurant=self.restaurant.to_summary() if self.restaurant else None,
        )

    @classmethod
    def from_domain(cls, visit_id: str, data: VisitCreate, visited_at: datetime) -> "VisitModel":
        return cls(
            id=visit_id,
            is_favorite=False,
            visited_at=_format_datetime(visited_at),
            **data.model_dump(),
        )


class ReviewModel(Base):
    """ORM model for the reviews table.

    Deleting a review only sets is_deleted; rows are never removed.
    """

    __tablename__ = "reviews"

    id = Column(String(36), primary_key=True, nullable=False)
    restaurant_id = Column(
        String(36), ForeignKey("restaurants.id", ondelete="CASCADE"), nullable=False
    )
    visit_id = Column(
        String(36), ForeignKey("visit_history.id", ondelete="SET NULL"), nullable=True
    )
    user_id = Column(String(255), nullable=True)
    session_id = Column(String(255), nullable=True)
    rating = Column(Float, nullable=False)
    title = Column(String(255), nullable=True)
    content = Column(Text, nullable=False)
    tags = Column(JSON, nullable=False, default=list)
    image_urls = Column(JSON, nullable=False, default=list)
    is_public = Column(Boolean, nullable=False, default=True)
    is_deleted = Column(Boolean, nullable=False, default=False)
    created_at = Column(String(50), nullable=False)
    updated_at = Column(String(50), nullable=False)

    restaurant = relationship("RestaurantModel", lazy="joined")

    __table_args__ = (
        Index("idx_reviews_restaurant", "restaurant_id"),
        Index("idx_reviews_user", "user_id"),
        Index("idx_reviews_session", "session_id"),
        Index("idx_reviews_created_at", "created_at"),
    )

    def to_domain(self) -> Review:
        return Review(
            id=self.id,
            restaurant_id=self.restaurant_id,
            visit_id=self.visit_id,
            user_id=self.user_id,
            session_id=self.session_id,
            rating=self.rating,
            title=self.title,
            content=self.content,
            tags=list(self.tags or []),
            image_urls=list(self.image_urls or []),
            is_public=self.is_public,
            is_deleted=self.is_deleted,
            created_at=_parse_datetime(self.created_at),
            updated_at=_parse_datetime(self.updated_at),
            restaurant=self.restaurant.to_summary() if self.restaurant else None,
        )

    @classmethod
    def from_domain(cls, review_id: str, data: ReviewCreate, created_at: datetime) -> "ReviewModel":
        timestamp = _format_datetime(created_at)
        return cls(
            id=review_id,
            is_deleted=False,
            created_at=timestamp,
            updated_at=timestamp,
            **data.model_dump(),
        )


def _format_datetime(dt: Optional[datetime]) -> Optional[str]:
    """Format a datetime as a fixed-width ISO 8601 UTC string for storage."""
    if dt is None:
        return None

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    else:
        dt = dt.astimezone(timezone.utc)

    return dt.strftime("%Y-%m-%dT%H:%M:%S.%fZ")


def _parse_datetime(dt_str: Optional[str]) -> Optional[datetime]:
    """Parse a stored ISO 8601 string back into an aware UTC datetime."""
    if dt_str is None or dt_str == "":
        return None

    dt_str = dt_str.rstrip("Z")
    try:
        dt = datetime.strptime(dt_str, "%Y-%m-%dT%H:%M:%S.%f")
    except ValueError:
        dt = datetime.strptime(dt_str, "%Y-%m-%dT%H:%M:%S")

    return dt.replace(tzinfo=timezone.utc)


def create_schema(engine: Engine) -> None:
    """Create all tables and indexes that do not exist yet (idempotent)."""
    logger.info("Creating database schema if not exists")

    try:
        Base.metadata.create_all(engine, checkfirst=True)
        tables = inspect(engine).get_table_names()
        logger.info(f"Database schema ready. Tables: {', '.join(sorted(tables))}")
    except Exception as e:
        logger.error(f"Failed to create database schema: {e}", exc_info=True)
        raise

"""Data access layer (repositories) for persistence operations.

Repositories wrap one session, translate SQLAlchemy errors into persistence
exceptions and return domain models rather than ORM rows.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import uuid4

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from whateat.domain.models import (
    Restaurant,
    RestaurantCreate,
    Review,
    ReviewCreate,
    ReviewUpdate,
    Visit,
    VisitCreate,
)
from whateat.utils.timestamps import utc_now

from .exceptions import DataIntegrityError, PersistenceError, RecordNotFoundError
from .schema import RestaurantModel, ReviewModel, VisitModel, _format_datetime

logger = logging.getLogger(__name__)


def _new_id() -> str:
    return str(uuid4())


def _owner_filter(model, user_id: Optional[str], session_id: Optional[str]):
    """WHERE clause for rows belonging to a user or a session (user wins)."""
    if user_id:
        return model.user_id == user_id
    if session_id:
        return model.session_id == session_id
    return None


def _owned_by_either(model, user_id: Optional[str], session_id: Optional[str]):
    """WHERE clause matching rows of the user or of the session."""
    clauses = []
    if user_id:
        clauses.append(model.user_id == user_id)
    if session_id:
        clauses.append(model.session_id == session_id)
    return or_(*clauses) if clauses else None


class RestaurantRepository:
    """Repository for restaurant records."""

    def __init__(self, session: Session):
        self.session = session

    def list_active(
        self, category: Optional[str] = None, limit: int = 50, offset: int = 0
    ) -> List[Restaurant]:
        """Active restaurants, newest first, optionally filtered by category.

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            stmt = select(RestaurantModel).where(RestaurantModel.is_active.is_(True))
            if category:
                stmt = stmt.where(RestaurantModel.category == category)
            stmt = stmt.order_by(RestaurantModel.created_at.desc()).limit(limit).offset(offset)

            rows = self.session.execute(stmt).scalars().all()
            return [row.to_domain() for row in rows]

        except SQLAlchemyError as e:
            logger.error(f"Error listing restaurants: {e}", exc_info=True)
            raise PersistenceError(f"Failed to list restaurants: {e}") from e

    def list_all_active(self) -> List[Restaurant]:
        """Every active restaurant; the pool for random picks."""
        try:
            stmt = select(RestaurantModel).where(RestaurantModel.is_active.is_(True))
            rows = self.session.execute(stmt).scalars().all()
            return [row.to_domain() for row in rows]

        except SQLAlchemyError as e:
            logger.error(f"Error listing active restaurants: {e}", exc_info=True)
            raise PersistenceError(f"Failed to list restaurants: {e}") from e

    def get_active(self, restaurant_id: str) -> Optional[Restaurant]:
        """Active restaurant by id, or None."""
        try:
            stmt = select(RestaurantModel).where(
                RestaurantModel.id == restaurant_id,
                RestaurantModel.is_active.is_(True),
            )
            row = self.session.execute(stmt).scalar_one_or_none()
            return row.to_domain() if row is not None else None

        except SQLAlchemyError as e:
            logger.error(f"Error retrieving restaurant {restaurant_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to retrieve restaurant: {e}") from e

    def create(self, data: RestaurantCreate) -> Restaurant:
        """Insert a restaurant and return it with generated fields.

        Raises:
            DataIntegrityError: If a constraint is violated
            PersistenceError: If database error occurs
        """
        try:
            row = RestaurantModel.from_domain(_new_id(), data, utc_now())
            self.session.add(row)
            self.session.flush()
            return row.to_domain()

        except IntegrityError as e:
            logger.error(f"Integrity error creating restaurant: {e}", exc_info=True)
            raise DataIntegrityError(f"Failed to create restaurant: {e}") from e
        except SQLAlchemyError as e:
            logger.error(f"Error creating restaurant: {e}", exc_info=True)
            raise PersistenceError(f"Failed to create restaurant: {e}") from e

    def category_stats(self) -> List[Dict[str, Any]]:
        """Restaurant count and average price per category, largest first.

        Returns:
            [{"category": "한식", "count": 3, "avg_price": 9000.0}, ...]
            avg_price is None when no restaurant in the category has a price.
        """
        try:
            count = func.count(RestaurantModel.id)
            stmt = (
                select(
                    RestaurantModel.category,
                    count.label("restaurant_count"),
                    func.avg(RestaurantModel.average_price).label("avg_price"),
                )
                .where(RestaurantModel.is_active.is_(True))
                .group_by(RestaurantModel.category)
                .order_by(count.desc(), RestaurantModel.category)
            )
            rows = self.session.execute(stmt).all()
            return [
                {
                    "category": row.category,
                    "count": row.restaurant_count,
                    "avg_price": float(row.avg_price) if row.avg_price is not None else None,
                }
                for row in rows
            ]

        except SQLAlchemyError as e:
            logger.error(f"Error computing category stats: {e}", exc_info=True)
            raise PersistenceError(f"Failed to compute category stats: {e}") from e


class VisitRepository:
    """Repository for visit history."""

    def __init__(self, session: Session):
        self.session = session

    def list(
        self,
        user_id: Optional[str] = None,
        session_id: Optional[str] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        visit_type: Optional[str] = None,
        is_favorite: Optional[bool] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> List[Visit]:
        """Visits matching the filters, newest first, with restaurant summary.

        Args:
            user_id: Owner filter; takes precedence over session_id
            session_id: Anonymous owner filter
            start_date: Inclusive lower bound on visited_at
            end_date: Inclusive upper bound on visited_at
            visit_type: "manual", "gacha", ...
            is_favorite: Favorite flag filter
            limit: Page size
            offset: Rows to skip

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            stmt = select(VisitModel)

            owner = _owner_filter(VisitModel, user_id, session_id)
            if owner is not None:
                stmt = stmt.where(owner)
            if start_date is not None:
                stmt = stmt.where(VisitModel.visited_at >= _format_datetime(start_date))
            if end_date is not None:
                stmt = stmt.where(VisitModel.visited_at <= _format_datetime(end_date))
            if visit_type:
                stmt = stmt.where(VisitModel.visit_type == visit_type)
            if is_favorite is not None:
                stmt = stmt.where(VisitModel.is_favorite.is_(is_favorite))

            stmt = stmt.order_by(VisitModel.visited_at.desc()).limit(limit).offset(offset)
            rows = self.session.execute(stmt).scalars().all()
            return [row.to_domain() for row in rows]

        except SQLAlchemyError as e:
            logger.error(f"Error listing visits: {e}", exc_info=True)
            raise PersistenceError(f"Failed to list visits: {e}") from e

    def list_since(
        self,
        user_id: Optional[str] = None,
        session_id: Optional[str] = None,
        start: Optional[datetime] = None,
    ) -> List[Visit]:
        """All visits of an owner (or everyone) since start, for usage stats."""
        try:
            stmt = select(VisitModel)

            owner = _owner_filter(VisitModel, user_id, session_id)
            if owner is not None:
                stmt = stmt.where(owner)
            if start is not None:
                stmt = stmt.where(VisitModel.visited_at >= _format_datetime(start))

            stmt = stmt.order_by(VisitModel.visited_at.desc())
            rows = self.session.execute(stmt).scalars().all()
            return [row.to_domain() for row in rows]

        except SQLAlchemyError as e:
            logger.error(f"Error listing visits since {start}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to list visits: {e}") from e

    def create(self, data: VisitCreate) -> Visit:
        """Record a visit.

        Raises:
            DataIntegrityError: If the restaurant does not exist
            PersistenceError: If database error occurs
        """
        try:
            row = VisitModel.from_domain(_new_id(), data, utc_now())
            self.session.add(row)
            self.session.flush()
            self.session.refresh(row)
            return row.to_domain()

        except IntegrityError as e:
            logger.error(f"Integrity error recording visit: {e}", exc_info=True)
            raise DataIntegrityError(f"Failed to record visit: {e}") from e
        except SQLAlchemyError as e:
            logger.error(f"Error recording visit: {e}", exc_info=True)
            raise PersistenceError(f"Failed to record visit: {e}") from e

    def set_favorite(self, visit_id: str, is_favorite: bool) -> Visit:
        """Set the favorite flag on a visit.

        Raises:
            RecordNotFoundError: If the visit does not exist
            PersistenceError: If database error occurs
        """
        try:
            row = self.session.get(VisitModel, visit_id)
            if row is None:
                raise RecordNotFoundError(f"Visit {visit_id} not found")

            row.is_favorite = is_favorite
            self.session.flush()
            return row.to_domain()

        except RecordNotFoundError:
            raise
        except SQLAlchemyError as e:
            logger.error(f"Error updating visit {visit_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to update visit: {e}") from e


class ReviewRepository:
    """Repository for reviews. Soft-deleted reviews are invisible to every read."""

    def __init__(self, session: Session):
        self.session = session

    def _live(self):
        return select(ReviewModel).where(ReviewModel.is_deleted.is_(False))

    def list(
        self,
        restaurant_id: Optional[str] = None,
        public_only: bool = True,
        user_id: Optional[str] = None,
        session_id: Optional[str] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> List[Review]:
        """Reviews, newest first.

        With public_only, only public reviews are returned. Otherwise public
        reviews plus private reviews written by user_id or session_id are
        returned.

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            stmt = self._live()
            if restaurant_id:
                stmt = stmt.where(ReviewModel.restaurant_id == restaurant_id)

            owner = _owned_by_either(ReviewModel, user_id, session_id)
            if public_only or owner is None:
                stmt = stmt.where(ReviewModel.is_public.is_(True))
            else:
                stmt = stmt.where(or_(ReviewModel.is_public.is_(True), owner))

            stmt = stmt.order_by(ReviewModel.created_at.desc()).limit(limit).offset(offset)
            rows = self.session.execute(stmt).scalars().all()
            return [row.to_domain() for row in rows]

        except SQLAlchemyError as e:
            logger.error(f"Error listing reviews: {e}", exc_info=True)
            raise PersistenceError(f"Failed to list reviews: {e}") from e

    def list_by_owner(
        self,
        user_id: Optional[str] = None,
        session_id: Optional[str] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> List[Review]:
        """Every live review written by a user or session, newest first.

        Raises:
            ValueError: If neither user_id nor session_id is given
            PersistenceError: If database error occurs
        """
        owner = _owner_filter(ReviewModel, user_id, session_id)
        if owner is None:
            raise ValueError("user_id or session_id is required")

        try:
            stmt = (
                self._live()
                .where(owner)
                .order_by(ReviewModel.created_at.desc())
                .limit(limit)
                .offset(offset)
            )
            rows = self.session.execute(stmt).scalars().all()
            return [row.to_domain() for row in rows]

        except SQLAlchemyError as e:
            logger.error(f"Error listing reviews by owner: {e}", exc_info=True)
            raise PersistenceError(f"Failed to list reviews: {e}") from e

    def get(self, review_id: str) -> Optional[Review]:
        """Live review by id, or None."""
        try:
            row = self.session.execute(
                self._live().where(ReviewModel.id == review_id)
            ).scalar_one_or_none()
            return row.to_domain() if row is not None else None

        except SQLAlchemyError as e:
            logger.error(f"Error retrieving review {review_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to retrieve review: {e}") from e

    def create(self, data: ReviewCreate) -> Review:
        """Insert a review.

        Raises:
            DataIntegrityError: If the restaurant or visit does not exist
            PersistenceError: If database error occurs
        """
        try:
            row = ReviewModel.from_domain(_new_id(), data, utc_now())
            self.session.add(row)
            self.session.flush()
            self.session.refresh(row)
            return row.to_domain()

        except IntegrityError as e:
            logger.error(f"Integrity error creating review: {e}", exc_info=True)
            raise DataIntegrityError(f"Failed to create review: {e}") from e
        except SQLAlchemyError as e:
            logger.error(f"Error creating review: {e}", exc_info=True)
            raise PersistenceError(f"Failed to create review: {e}") from e

    def update(self, review_id: str, changes: ReviewUpdate) -> Review:
        """Apply the fields set on changes and bump updated_at.

        Raises:
            RecordNotFoundError: If the review does not exist or was deleted
            PersistenceError: If database error occurs
        """
        try:
            row = self._get_live_row(review_id)
            for field_name, value in changes.model_dump(exclude_unset=True).items():
                if value is None and field_name != "title":
                    continue
                setattr(row, field_name, value)
            row.updated_at = _format_datetime(utc_now())
            self.session.flush()
            return row.to_domain()

        except RecordNotFoundError:
            raise
        except SQLAlchemyError as e:
            logger.error(f"Error updating review {review_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to update review: {e}") from e

    def soft_delete(self, review_id: str) -> None:
        """Mark a review deleted.

        Raises:
            RecordNotFoundError: If the review does not exist or was deleted
            PersistenceError: If database error occurs
        """
        try:
            row = self._get_live_row(review_id)
            row.is_deleted = True
            row.updated_at = _format_datetime(utc_now())
            self.session.flush()

        except RecordNotFoundError:
            raise
        except SQLAlchemyError as e:
            logger.error(f"Error deleting review {review_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to delete review: {e}") from e

    def public_for_restaurant(self, restaurant_id: str) -> List[Review]:
        """All live public reviews of a restaurant, for the summary."""
        try:
            stmt = (
                self._live()
                .where(
                    ReviewModel.restaurant_id == restaurant_id,
                    ReviewModel.is_public.is_(True),
                )
                .order_by(ReviewModel.created_at.desc())
            )
            rows = self.session.execute(stmt).scalars().all()
            return [row.to_domain() for row in rows]

        except SQLAlchemyError as e:
            logger.error(f"Error listing reviews for {restaurant_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to list reviews: {e}") from e

    def _get_live_row(self, review_id: str) -> ReviewModel:
        row = self.session.execute(
            self._live().where(ReviewModel.id == review_id)
        ).scalar_one_or_none()
        if row is None:
            raise RecordNotFoundError(f"Review {review_id} not found")
        return row

"""Unit tests for the persistence layer (database, repositories)."""

from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest

from whateat.domain.models import RestaurantCreate, ReviewCreate, ReviewUpdate, VisitCreate
from whateat.persistence import (
    DatabaseConnectionError,
    DataIntegrityError,
    RecordNotFoundError,
    RestaurantRepository,
    ReviewRepository,
    VisitRepository,
    check_connection,
    close_database,
    get_engine,
    get_session,
    init_database,
)
from whateat.persistence.schema import _format_datetime, _parse_datetime

BASE_TIME = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


def _clock(*offsets_minutes):
    """Successive utc_now() values, BASE_TIME plus each offset."""
    return patch(
        "whateat.persistence.repositories.utc_now",
        side_effect=[BASE_TIME + timedelta(minutes=m) for m in offsets_minutes],
    )


def _restaurant(session, name="한우마을", category="한식", average_price=None):
    return RestaurantRepository(session).create(
        RestaurantCreate(name=name, category=category, emoji="🥩", average_price=average_price)
    )


# ============================================================================
# Database Tests
# ============================================================================


class TestDatabaseInitialization:
    """Tests for database initialization."""

    def test_init_in_memory(self, initialized_db):
        assert get_engine() is not None
        assert check_connection() is True

    def test_init_creates_file_and_directory(self, tmp_path):
        db_file = tmp_path / "nested" / "whateat.db"
        try:
            init_database(f"sqlite:///{db_file}")
            assert db_file.parent.exists()
            with get_session() as session:
                _restaurant(session)
            assert db_file.exists()
        finally:
            close_database()

    @pytest.mark.parametrize("url", ["", None])
    def test_init_rejects_empty_url(self, url):
        with pytest.raises(DatabaseConnectionError):
            init_database(url)

    def test_get_session_before_init(self):
        close_database()
        with pytest.raises(DatabaseConnectionError):
            with get_session():
                pass

    def test_check_connection_before_init(self):
        close_database()
        assert check_connection() is False

    def test_session_rolls_back_on_error(self, initialized_db):
        with pytest.raises(RuntimeError):
            with get_session() as session:
                _restaurant(session)
                raise RuntimeError("abort")

        with get_session() as session:
            assert RestaurantRepository(session).list_active() == []


class TestTimestampStorage:
    """Tests for stored timestamp format."""

    def test_round_trip(self):
        stored = _format_datetime(BASE_TIME)

        assert stored == "2025-03-01T12:00:00.000000Z"
        assert _parse_datetime(stored) == BASE_TIME

    def test_naive_treated_as_utc(self):
        assert _format_datetime(datetime(2025, 3, 1, 12, 0)) == "2025-03-01T12:00:00.000000Z"

    def test_parse_without_fraction(self):
        assert _parse_datetime("2025-03-01T12:00:00Z") == BASE_TIME

    def test_none(self):
        assert _format_datetime(None) is None
        assert _parse_datetime(None) is None


# ============================================================================
# Repository Tests
# ============================================================================


class TestRestaurantRepository:
    """Tests for RestaurantRepository."""

    def test_create_and_get(self, initialized_db):
        with get_session() as session:
            created = _restaurant(session)

        with get_session() as session:
            fetched = RestaurantRepository(session).get_active(created.id)

        assert fetched.name == "한우마을"
        assert fetched.emoji == "🥩"
        assert fetched.is_active is True
        assert fetched.created_at.tzinfo == timezone.utc
        assert fetched.created_at == fetched.updated_at

    def test_get_missing(self, initialized_db):
        with get_session() as session:
            assert RestaurantRepository(session).get_active("missing") is None

    def test_list_newest_first(self, initialized_db):
        with _clock(0, 5, 10), get_session() as session:
            _restaurant(session, name="첫째")
            _restaurant(session, name="둘째")
            _restaurant(session, name="셋째", category="일식")

        with get_session() as session:
            repo = RestaurantRepository(session)
            assert [r.name for r in repo.list_active()] == ["셋째", "둘째", "첫째"]
            assert [r.name for r in repo.list_active(category="한식")] == ["둘째", "첫째"]
            assert [r.name for r in repo.list_active(limit=1, offset=1)] == ["둘째"]
            assert len(repo.list_all_active()) == 3

    def test_category_stats(self, initialized_db):
        with get_session() as session:
            _restaurant(session, name="a", category="한식", average_price=8000)
            _restaurant(session, name="b", category="한식", average_price=12000)
            _restaurant(session, name="c", category="일식")

        with get_session() as session:
            stats = RestaurantRepository(session).category_stats()

        assert stats == [
            {"category": "한식", "count": 2, "avg_price": 10000.0},
            {"category": "일식", "count": 1, "avg_price": None},
        ]


class TestVisitRepository:
    """Tests for VisitRepository."""

    def test_create_includes_restaurant_summary(self, initialized_db):
        with get_session() as session:
            restaurant = _restaurant(session)
            visit = VisitRepository(session).create(
                VisitCreate(restaurant_id=restaurant.id, session_id="s1", visit_type="gacha")
            )

        assert visit.visit_type == "gacha"
        assert visit.is_favorite is False
        assert visit.restaurant.name == "한우마을"
        assert visit.restaurant.emoji == "🥩"

    def test_create_for_missing_restaurant(self, initialized_db):
        with pytest.raises(DataIntegrityError):
            with get_session() as session:
                VisitRepository(session).create(VisitCreate(restaurant_id="missing"))

    def test_list_filters(self, initialized_db):
        with get_session() as session:
            restaurant_id = _restaurant(session).id

        with _clock(0, 60, 120, 180), get_session() as session:
            repo = VisitRepository(session)
            repo.create(VisitCreate(restaurant_id=restaurant_id, user_id="u1"))
            repo.create(VisitCreate(restaurant_id=restaurant_id, user_id="u1", visit_type="gacha"))
            repo.create(VisitCreate(restaurant_id=restaurant_id, session_id="s1"))
            repo.create(VisitCreate(restaurant_id=restaurant_id, user_id="u2", session_id="s1"))

        with get_session() as session:
            repo = VisitRepository(session)
            assert len(repo.list()) == 4
            assert len(repo.list(user_id="u1")) == 2
            assert len(repo.list(session_id="s1")) == 2
            # user filter wins over session filter
            assert len(repo.list(user_id="u1", session_id="s1")) == 2
            assert len(repo.list(visit_type="gacha")) == 1
            assert len(repo.list(start_date=BASE_TIME + timedelta(minutes=60))) == 3
            assert len(repo.list(end_date=BASE_TIME + timedelta(minutes=60))) == 2
            newest = repo.list(limit=1)[0]
            assert newest.user_id == "u2"

    def test_set_favorite(self, initialized_db):
        with get_session() as session:
            restaurant = _restaurant(session)
            visit = VisitRepository(session).create(VisitCreate(restaurant_id=restaurant.id))

        with get_session() as session:
            updated = VisitRepository(session).set_favorite(visit.id, True)
        assert updated.is_favorite is True

        with get_session() as session:
            assert len(VisitRepository(session).list(is_favorite=True)) == 1
            assert len(VisitRepository(session).list(is_favorite=False)) == 0

    def test_set_favorite_missing(self, initialized_db):
        with pytest.raises(RecordNotFoundError):
            with get_session() as session:
                VisitRepository(session).set_favorite("missing", True)

    def test_list_since(self, initialized_db):
        with get_session() as session:
            restaurant_id = _restaurant(session).id

        with _clock(0, 60 * 24 * 10), get_session() as session:
            repo = VisitRepository(session)
            repo.create(VisitCreate(restaurant_id=restaurant_id, session_id="s1"))
            repo.create(VisitCreate(restaurant_id=restaurant_id, session_id="s1"))

        with get_session() as session:
            repo = VisitRepository(session)
            assert len(repo.list_since(session_id="s1")) == 2
            assert len(repo.list_since(session_id="s1", start=BASE_TIME + timedelta(days=1))) == 1


class TestReviewRepository:
    """Tests for ReviewRepository."""

    @pytest.fixture
    def restaurant_id(self, initialized_db):
        with get_session() as session:
            return _restaurant(session).id

    def _review(self, session, restaurant_id, **kwargs):
        data = {"restaurant_id": restaurant_id, "rating": 4, "content": "맛있어요"}
        data.update(kwargs)
        return ReviewRepository(session).create(ReviewCreate(**data))

    def test_create_and_get(self, restaurant_id):
        with get_session() as session:
            review = self._review(session, restaurant_id, tags=["가성비", "친절"], session_id="s1")

        with get_session() as session:
            fetched = ReviewRepository(session).get(review.id)

        assert fetched.tags == ["가성비", "친절"]
        assert fetched.image_urls == []
        assert fetched.is_public is True
        assert fetched.restaurant.name == "한우마을"

    def test_private_reviews_hidden_from_public_list(self, restaurant_id):
        with get_session() as session:
            self._review(session, restaurant_id, content="공개")
            self._review(session, restaurant_id, content="비공개", is_public=False, session_id="s1")

        with get_session() as session:
            repo = ReviewRepository(session)
            assert [r.content for r in repo.list(restaurant_id=restaurant_id)] == ["공개"]
            assert len(repo.list(public_only=False)) == 1
            assert len(repo.list(public_only=False, session_id="s1")) == 2
            assert len(repo.list(public_only=False, session_id="other")) == 1

    def test_private_visible_to_user_or_session(self, restaurant_id):
        with get_session() as session:
            self._review(session, restaurant_id, is_public=False, user_id="u1")
            self._review(session, restaurant_id, is_public=False, session_id="s1")

        with get_session() as session:
            repo = ReviewRepository(session)
            assert len(repo.list(public_only=False, user_id="u1", session_id="s1")) == 2
            assert len(repo.list(public_only=False, user_id="u1")) == 1

    def test_list_by_owner(self, restaurant_id):
        with get_session() as session:
            self._review(session, restaurant_id, session_id="s1", is_public=False)
            self._review(session, restaurant_id, session_id="s2")

        with get_session() as session:
            repo = ReviewRepository(session)
            assert len(repo.list_by_owner(session_id="s1")) == 1
            with pytest.raises(ValueError):
                repo.list_by_owner()

    def test_update_applies_set_fields_only(self, restaurant_id):
        with _clock(0), get_session() as session:
            review = self._review(session, restaurant_id, title="제목", tags=["a"])

        with _clock(30), get_session() as session:
            updated = ReviewRepository(session).update(
                review.id, ReviewUpdate(rating=5, tags=["b", "c"])
            )

        assert updated.rating == 5
        assert updated.tags == ["b", "c"]
        assert updated.title == "제목"
        assert updated.content == "맛있어요"
        assert updated.updated_at == BASE_TIME + timedelta(minutes=30)
        assert updated.created_at == BASE_TIME

    def test_update_can_clear_title(self, restaurant_id):
        with get_session() as session:
            review = self._review(session, restaurant_id, title="제목")

        with get_session() as session:
            updated = ReviewRepository(session).update(review.id, ReviewUpdate(title=None))

        assert updated.title is None

    def test_update_missing(self, initialized_db):
        with pytest.raises(RecordNotFoundError):
            with get_session() as session:
                ReviewRepository(session).update("missing", ReviewUpdate(rating=3))

    def test_soft_delete_hides_review(self, restaurant_id):
        with get_session() as session:
            review = self._review(session, restaurant_id)

        with get_session() as session:
            ReviewRepository(session).soft_delete(review.id)

        with get_session() as session:
            repo = ReviewRepository(session)
            assert repo.get(review.id) is None
            assert repo.list() == []
            assert repo.public_for_restaurant(restaurant_id) == []
            with pytest.raises(RecordNotFoundError):
                repo.soft_delete(review.id)

    def test_public_for_restaurant(self, restaurant_id):
        with get_session() as session:
            other_id = _restaurant(session, name="다른집").id
            self._review(session, restaurant_id, rating=5)
            self._review(session, restaurant_id, rating=3, is_public=False, session_id="s1")
            self._review(session, other_id, rating=1)

        with get_session() as session:
            reviews = ReviewRepository(session).public_for_restaurant(restaurant_id)

        assert [r.rating for r in reviews] == [5]

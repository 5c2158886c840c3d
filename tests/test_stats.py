"""Unit tests for usage statistics and review summaries."""

from datetime import datetime, timedelta, timezone

import pytest

from whateat.domain.models import RestaurantSummary, Review, Visit
from whateat.stats import compute_usage_stats, period_start, summarize_reviews

NOW = datetime(2025, 3, 15, 9, 30, tzinfo=timezone.utc)

HANWOO = RestaurantSummary(id="r1", name="한우마을", category="한식")
SUSHI = RestaurantSummary(id="r2", name="스시로", category="일식")


def _visit(visited_at, restaurant=HANWOO, visit_type="manual", is_favorite=False):
    return Visit(
        id=f"v-{visited_at.isoformat()}-{restaurant.id}",
        restaurant_id=restaurant.id,
        visit_type=visit_type,
        is_favorite=is_favorite,
        visited_at=visited_at,
        restaurant=restaurant,
    )


def _review(rating, tags=(), created_at=NOW):
    return Review(
        id=f"rev-{rating}-{created_at.isoformat()}",
        restaurant_id="r1",
        rating=rating,
        content="맛있어요",
        tags=list(tags),
        created_at=created_at,
        updated_at=created_at,
    )


class TestPeriodStart:
    """Tests for period_start."""

    def test_today_is_utc_midnight(self):
        assert period_start("today", NOW) == datetime(2025, 3, 15, tzinfo=timezone.utc)

    def test_week_is_trailing_seven_days(self):
        assert period_start("week", NOW) == NOW - timedelta(days=7)

    def test_month_starts_on_the_first(self):
        assert period_start("month", NOW) == datetime(2025, 3, 1, tzinfo=timezone.utc)

    def test_year_starts_january_first(self):
        assert period_start("year", NOW) == datetime(2025, 1, 1, tzinfo=timezone.utc)

    def test_all_has_no_bound(self):
        assert period_start("all", NOW) is None

    def test_unknown_period(self):
        with pytest.raises(ValueError, match="Unknown period"):
            period_start("decade", NOW)


class TestComputeUsageStats:
    """Tests for compute_usage_stats."""

    @pytest.fixture
    def visits(self):
        return [
            _visit(NOW - timedelta(hours=1), visit_type="gacha", is_favorite=True),
            _visit(NOW - timedelta(days=2)),
            _visit(NOW - timedelta(days=3), restaurant=SUSHI, visit_type="gacha"),
            _visit(NOW - timedelta(days=40)),
            _visit(NOW - timedelta(days=400), restaurant=SUSHI),
        ]

    def test_all_period(self, visits):
        stats = compute_usage_stats(visits, "all", now=NOW)

        assert stats["period"] == "all"
        assert stats["totalVisits"] == 5
        assert stats["favoriteCount"] == 1
        assert stats["visitTypeStats"] == {"gacha": 2, "manual": 3}
        assert stats["categoryStats"] == {"한식": 3, "일식": 2}
        assert stats["topRestaurants"] == [
            {"id": "r1", "name": "한우마을", "category": "한식", "count": 3},
            {"id": "r2", "name": "스시로", "category": "일식", "count": 2},
        ]

    @pytest.mark.parametrize(
        "period,expected",
        [("today", 1), ("week", 3), ("month", 3), ("year", 4), ("all", 5)],
    )
    def test_period_filters(self, visits, period, expected):
        assert compute_usage_stats(visits, period, now=NOW)["totalVisits"] == expected

    def test_empty(self):
        stats = compute_usage_stats([], "week", now=NOW)

        assert stats["totalVisits"] == 0
        assert stats["favoriteCount"] == 0
        assert stats["visitTypeStats"] == {}
        assert stats["categoryStats"] == {}
        assert stats["topRestaurants"] == []

    def test_top_restaurants_capped_at_five(self):
        visits = [
            _visit(NOW, restaurant=RestaurantSummary(id=f"r{i}", name=f"집{i}", category="한식"))
            for i in range(8)
        ]

        assert len(compute_usage_stats(visits, now=NOW)["topRestaurants"]) == 5

    def test_unknown_period(self, visits):
        with pytest.raises(ValueError):
            compute_usage_stats(visits, "forever", now=NOW)


class TestSummarizeReviews:
    """Tests for summarize_reviews."""

    def test_no_reviews(self):
        summary = summarize_reviews("r1", [], NOW)

        assert summary == {
            "restaurant_id": "r1",
            "totalReviews": 0,
            "averageRating": 0,
            "ratingDistribution": {1: 0, 2: 0, 3: 0, 4: 0, 5: 0},
            "topTags": [],
            "recentReviewsCount": 0,
        }

    def test_average_rounds_half_up(self):
        summary = summarize_reviews("r1", [_review(4), _review(4.5)], NOW)

        assert summary["averageRating"] == 4.3

    def test_average_one_decimal(self):
        summary = summarize_reviews("r1", [_review(3), _review(4), _review(4)], NOW)

        assert summary["averageRating"] == 3.7
        assert summary["totalReviews"] == 3

    def test_distribution_uses_rounded_rating(self):
        reviews = [_review(4.5), _review(2.5), _review(1), _review(1.4)]

        distribution = summarize_reviews("r1", reviews, NOW)["ratingDistribution"]

        assert distribution == {1: 2, 2: 0, 3: 1, 4: 0, 5: 1}

    def test_top_tags(self):
        reviews = [
            _review(5, tags=["가성비", "친절", "주차"]),
            _review(4, tags=["가성비", "친절"]),
            _review(4, tags=["가성비", "웨이팅", "청결", "분위기"]),
        ]

        top_tags = summarize_reviews("r1", reviews, NOW)["topTags"]

        assert len(top_tags) == 5
        assert top_tags[0] == {"tag": "가성비", "count": 3}
        assert top_tags[1] == {"tag": "친절", "count": 2}

    def test_recent_reviews_window(self):
        reviews = [
            _review(5, created_at=NOW - timedelta(days=1)),
            _review(4, created_at=NOW - timedelta(days=29)),
            _review(3, created_at=NOW - timedelta(days=31)),
        ]

        assert summarize_reviews("r1", reviews, NOW)["recentReviewsCount"] == 2

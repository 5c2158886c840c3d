"""Aggregations over visit history and reviews.

Pure functions over domain models; the caller loads the rows and supplies
the current time, so results are reproducible in tests.
"""

import math
from collections import Counter
from datetime import datetime, timedelta
from typing import Any, Dict, Iterable, List, Optional

from whateat.domain.models import Review, Visit
from whateat.utils.timestamps import ensure_utc, utc_now

PERIODS = ("today", "week", "month", "year", "all")

TOP_RESTAURANTS_LIMIT = 5
TOP_TAGS_LIMIT = 5
RECENT_REVIEW_WINDOW = timedelta(days=30)


def period_start(period: str, now: datetime) -> Optional[datetime]:
    """Lower bound of a statistics period, or None for "all".

    "today", "month" and "year" start at midnight UTC of the current day,
    the first of the month and January 1st; "week" is the trailing 7 days.

    Raises:
        ValueError: If period is not one of PERIODS
    """
    now = ensure_utc(now)
    midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)

    if period == "today":
        return midnight
    if period == "week":
        return now - timedelta(days=7)
    if period == "month":
        return midnight.replace(day=1)
    if period == "year":
        return midnight.replace(month=1, day=1)
    if period == "all":
        return None
    raise ValueError(f"Unknown period: {period!r}. Expected one of: {', '.join(PERIODS)}")


def compute_usage_stats(
    visits: Iterable[Visit], period: str = "all", now: Optional[datetime] = None
) -> Dict[str, Any]:
    """
    Summarize visits for the usage statistics endpoint.

    Visits older than the period start are ignored, so callers may pass a
    superset.

    Args:
        visits: Visits with their restaurant summary attached
        period: One of PERIODS
        now: Reference time for the period (defaults to the current time)

    Returns:
        Dict with period, totalVisits, favoriteCount, visitTypeStats,
        categoryStats and topRestaurants (at most 5, most visited first)
    """
    start = period_start(period, now or utc_now())
    selected = [v for v in visits if start is None or v.visited_at >= start]

    visit_types = Counter(v.visit_type for v in selected)
    categories = Counter(v.restaurant.category for v in selected if v.restaurant)

    per_restaurant: Dict[str, Dict[str, Any]] = {}
    for visit in selected:
        if not visit.restaurant:
            continue
        entry = per_restaurant.setdefault(
            visit.restaurant.id,
            {
                "id": visit.restaurant.id,
                "name": visit.restaurant.name,
                "category": visit.restaurant.category,
                "count": 0,
            },
        )
        entry["count"] += 1

    top_restaurants = sorted(per_restaurant.values(), key=lambda r: r["count"], reverse=True)

    return {
        "period": period,
        "totalVisits": len(selected),
        "favoriteCount": sum(1 for v in selected if v.is_favorite),
        "visitTypeStats": dict(visit_types),
        "categoryStats": dict(categories),
        "topRestaurants": top_restaurants[:TOP_RESTAURANTS_LIMIT],
    }


def _round_half_up(value: float, digits: int = 0) -> float:
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor


def summarize_reviews(
    restaurant_id: str, reviews: List[Review], now: datetime
) -> Dict[str, Any]:
    """
    Summarize the public reviews of one restaurant.

    Args:
        restaurant_id: Restaurant the reviews belong to
        reviews: Live public reviews
        now: Reference time for the 30-day recent window

    Returns:
        Dict with restaurant_id, totalReviews, averageRating (one decimal,
        0 without reviews), ratingDistribution keyed 1-5 by rounded rating,
        topTags as [{"tag", "count"}] and recentReviewsCount
    """
    distribution = {star: 0 for star in range(1, 6)}

    if not reviews:
        return {
            "restaurant_id": restaurant_id,
            "totalReviews": 0,
            "averageRating": 0,
            "ratingDistribution": distribution,
            "topTags": [],
            "recentReviewsCount": 0,
        }

    average = _round_half_up(sum(r.rating for r in reviews) / len(reviews), 1)

    for review in reviews:
        star = int(_round_half_up(review.rating))
        if star in distribution:
            distribution[star] += 1

    tag_counts = Counter(tag for review in reviews for tag in review.tags)
    top_tags = [
        {"tag": tag, "count": count} for tag, count in tag_counts.most_common(TOP_TAGS_LIMIT)
    ]

    recent_cutoff = ensure_utc(now) - RECENT_REVIEW_WINDOW
    recent = sum(1 for r in reviews if r.created_at > recent_cutoff)

    return {
        "restaurant_id": restaurant_id,
        "totalReviews": len(reviews),
        "averageRating": average,
        "ratingDistribution": distribution,
        "topTags": top_tags,
        "recentReviewsCount": recent,
    }

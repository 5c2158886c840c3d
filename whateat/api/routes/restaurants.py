"""Restaurant catalogue endpoints."""

import random
from typing import Optional

from fastapi import APIRouter, Query

from whateat.domain.models import RestaurantCreate
from whateat.persistence import RestaurantRepository, ReviewRepository, get_session
from whateat.stats import summarize_reviews
from whateat.utils.timestamps import utc_now

from ..errors import NOT_FOUND, ApiError
from ..schemas import success

router = APIRouter(prefix="/restaurants", tags=["restaurants"])


@router.get("")
def list_restaurants(
    category: Optional[str] = None,
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
):
    with get_session() as session:
        restaurants = RestaurantRepository(session).list_active(category, limit, offset)
    return success(restaurants, count=len(restaurants))


# Declared before /{restaurant_id} so the literal paths win
@router.get("/stats")
def restaurant_stats():
    with get_session() as session:
        stats = RestaurantRepository(session).category_stats()
    return success(stats)


@router.get("/random")
def random_restaurant():
    """One active restaurant picked uniformly at random."""
    with get_session() as session:
        restaurants = RestaurantRepository(session).list_all_active()
    if not restaurants:
        raise ApiError(404, "No restaurants found", NOT_FOUND)
    return success(random.choice(restaurants))


@router.get("/{restaurant_id}")
def get_restaurant(restaurant_id: str):
    with get_session() as session:
        restaurant = RestaurantRepository(session).get_active(restaurant_id)
    if restaurant is None:
        raise ApiError(404, "Restaurant not found", NOT_FOUND)
    return success(restaurant)


@router.post("", status_code=201)
def create_restaurant(body: RestaurantCreate):
    with get_session() as session:
        restaurant = RestaurantRepository(session).create(body)
    return success(restaurant)


@router.get("/{restaurant_id}/reviews/summary")
def review_summary(restaurant_id: str):
    """Rating average and distribution, top tags and recent activity."""
    with get_session() as session:
        reviews = ReviewRepository(session).public_for_restaurant(restaurant_id)
    return success(summarize_reviews(restaurant_id, reviews, utc_now()))

"""Review endpoints.

Private reviews are visible only to their author, identified by user_id or
the anonymous session_id the client sends.
"""

from typing import Optional

from fastapi import APIRouter, Query

from whateat.domain.models import ReviewCreate, ReviewUpdate
from whateat.persistence import RestaurantRepository, ReviewRepository, get_session

from ..errors import FORBIDDEN, INVALID_INPUT, NOT_FOUND, ApiError
from ..schemas import success

router = APIRouter(prefix="/reviews", tags=["reviews"])

OWNER_REQUIRED = "session_id 또는 user_id가 필요합니다."
PRIVATE_REVIEW = "비공개 리뷰는 작성자만 볼 수 있습니다."


@router.get("")
def list_reviews(
    restaurant_id: Optional[str] = None,
    session_id: Optional[str] = None,
    user_id: Optional[str] = None,
    include_private: bool = False,
    limit: int = Query(20, ge=1, le=200),
    offset: int = Query(0, ge=0),
):
    """Public reviews, plus the caller's private ones with include_private."""
    public_only = not (include_private and (session_id or user_id))
    with get_session() as session:
        reviews = ReviewRepository(session).list(
            restaurant_id=restaurant_id,
            public_only=public_only,
            user_id=user_id,
            session_id=session_id,
            limit=limit,
            offset=offset,
        )
    return success(reviews, count=len(reviews))


@router.get("/my")
def my_reviews(
    session_id: Optional[str] = None,
    user_id: Optional[str] = None,
    limit: int = Query(20, ge=1, le=200),
    offset: int = Query(0, ge=0),
):
    if not session_id and not user_id:
        raise ApiError(400, OWNER_REQUIRED, INVALID_INPUT)

    with get_session() as session:
        reviews = ReviewRepository(session).list_by_owner(
            user_id=user_id, session_id=session_id, limit=limit, offset=offset
        )
    return success(reviews, count=len(reviews))


@router.get("/{review_id}")
def get_review(
    review_id: str,
    session_id: Optional[str] = None,
    user_id: Optional[str] = None,
):
    with get_session() as session:
        review = ReviewRepository(session).get(review_id)

    if review is None:
        raise ApiError(404, "Review not found", NOT_FOUND)
    if not review.is_public and not review.is_owned_by(user_id, session_id):
        raise ApiError(403, PRIVATE_REVIEW, FORBIDDEN)
    return success(review)


@router.post("", status_code=201)
def create_review(body: ReviewCreate):
    with get_session() as session:
        if RestaurantRepository(session).get_active(body.restaurant_id) is None:
            raise ApiError(404, "Restaurant not found", NOT_FOUND)
        review = ReviewRepository(session).create(body)
    return success(review)


@router.patch("/{review_id}")
def update_review(review_id: str, body: ReviewUpdate):
    with get_session() as session:
        review = ReviewRepository(session).update(review_id, body)
    return success(review)


@router.delete("/{review_id}")
def delete_review(review_id: str):
    with get_session() as session:
        ReviewRepository(session).soft_delete(review_id)
    return {"success": True, "message": "Review deleted successfully"}

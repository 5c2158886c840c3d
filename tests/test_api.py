"""Tests for the REST API: envelopes, status mapping and every route."""

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from whateat.adapters.exceptions import UpstreamAuthError, UpstreamCallError, UpstreamTimeoutError
from whateat.api import create_app
from whateat.api.schemas import clamp_search_count
from whateat.config.environment import EnvironmentConfig
from whateat.config.models import AppConfig
from whateat.persistence import close_database
from whateat.search import NearbySearchService, SearchResult


def _client(search_service, environment="local"):
    app = create_app(AppConfig(), EnvironmentConfig(environment=environment), search_service)
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def client(initialized_db, search_service):
    """API client over the in-memory database and recorded search pages."""
    return _client(search_service)


@pytest.fixture
def mock_service():
    service = MagicMock(spec=NearbySearchService)
    service.search.return_value = SearchResult(location="강남역", category="전체", restaurants=[])
    return service


@pytest.fixture
def mock_client(initialized_db, mock_service):
    return _client(mock_service)


def _create_restaurant(client, **overrides):
    body = {"name": "한우마을", "category": "한식", "emoji": "🥩", "average_price": 15000}
    body.update(overrides)
    response = client.post("/api/restaurants", json=body)
    assert response.status_code == 201
    return response.json()["data"]


# ============================================================================
# Health and framework errors
# ============================================================================


class TestHealth:
    """Tests for GET /api/health."""

    def test_healthy(self, client):
        response = client.get("/api/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"
        assert body["timestamp"].endswith("Z")

    def test_unhealthy_without_database(self, search_service):
        client = _client(search_service)
        close_database()

        response = client.get("/api/health")

        assert response.status_code == 500
        assert response.json()["status"] == "unhealthy"
        assert response.json()["database"] == "disconnected"


class TestErrorEnvelope:
    """Tests for the failure envelope on framework errors."""

    def test_unknown_route(self, client):
        response = client.get("/api/does-not-exist")

        assert response.status_code == 404
        assert response.json() == {"success": False, "error": "Not Found", "code": "NOT_FOUND"}

    def test_wrong_method(self, client):
        response = client.put("/api/health")

        assert response.status_code == 405
        assert response.json()["success"] is False

    def test_request_id_echoed(self, client):
        response = client.get("/api/health", headers={"X-Request-ID": "req-123"})

        assert response.headers["X-Request-ID"] == "req-123"

    def test_request_id_generated(self, client):
        response = client.get("/api/health")

        assert len(response.headers["X-Request-ID"]) == 12

    def test_unhandled_error_detail_in_local(self, initialized_db, mock_service):
        mock_service.search.side_effect = RuntimeError("kaboom")

        response = _client(mock_service).get("/api/nearby-restaurants?location=강남역")

        assert response.status_code == 500
        assert response.json() == {"success": False, "error": "kaboom", "code": "INTERNAL_ERROR"}

    def test_unhandled_error_hidden_in_production(self, initialized_db, mock_service):
        mock_service.search.side_effect = RuntimeError("kaboom")

        response = _client(mock_service, environment="production").get(
            "/api/nearby-restaurants?location=강남역"
        )

        assert response.status_code == 500
        assert response.json()["error"] == "Internal server error"


# ============================================================================
# Nearby search
# ============================================================================


class TestNearbyRestaurants:
    """Tests for GET /api/nearby-restaurants."""

    def test_search_envelope(self, client):
        response = client.get(
            "/api/nearby-restaurants", params={"location": "강남역", "category": "한식", "count": "10"}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert len(body["data"]) == 8
        assert body["meta"] == {
            "total": 8,
            "location": "강남역",
            "category": "한식",
            "source": "naver_local_search",
        }
        first = body["data"][0]
        assert first["name"] == "강남 한우마을"
        assert first["roadAddress"] == "서울특별시 강남구 강남대로 396"
        assert first["category"]["sub"] == "한식"
        assert first["coordinates"]["latitude"] == pytest.approx(37.498)

    def test_null_coordinates_serialized(self, client):
        body = client.get("/api/nearby-restaurants?location=강남역&category=한식").json()
        by_name = {r["name"]: r for r in body["data"]}

        assert by_name["진대감 강남점"]["coordinates"] is None
        assert by_name["먼바다 횟집"]["coordinates"]["latitude"] is None
        assert by_name["먼바다 횟집"]["coordinates"]["raw"] == {"mapx": 1000000, "mapy": 1997800}

    def test_category_defaults_to_all(self, mock_client, mock_service):
        body = mock_client.get("/api/nearby-restaurants?location=강남역").json()

        assert body["meta"]["category"] == "전체"
        mock_service.search.assert_called_once_with("강남역", "", 10)

    @pytest.mark.parametrize(
        "count,expected",
        [
            ("3", 3),
            ("10", 10),
            ("25", 10),
            ("0", 10),
            ("-3", 1),
            ("abc", 10),
            ("7개", 7),
            ("9" * 5000, 10),
        ],
    )
    def test_count_clamped(self, mock_client, mock_service, count, expected):
        mock_client.get("/api/nearby-restaurants", params={"location": "강남역", "count": count})

        assert mock_service.search.call_args.args[2] == expected

    @pytest.mark.parametrize("query", ["", "?location=", "?location=%20%20"])
    def test_location_required(self, mock_client, mock_service, query):
        response = mock_client.get(f"/api/nearby-restaurants{query}")

        assert response.status_code == 400
        assert response.json() == {
            "success": False,
            "error": "위치 정보(location)가 필요합니다.",
            "code": "INVALID_INPUT",
        }
        mock_service.search.assert_not_called()

    def test_coordinates_only_gets_hint(self, mock_client):
        response = mock_client.get("/api/nearby-restaurants?latitude=37.5&longitude=127.0")

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "위치 정보(location)가 필요합니다. 예: location=강남역"
        assert body["hint"] == "좌표 기반 검색은 향후 지원 예정입니다."

    def test_missing_credentials_is_503(self, mock_client, mock_service):
        mock_service.search.side_effect = UpstreamAuthError("not configured")

        response = mock_client.get("/api/nearby-restaurants?location=강남역")

        assert response.status_code == 503
        assert response.json() == {
            "success": False,
            "error": "외부 검색 서비스를 사용할 수 없습니다.",
            "code": "NAVER_API_CONFIG_ERROR",
        }

    @pytest.mark.parametrize(
        "error",
        [UpstreamCallError("bad gateway", status_code=500), UpstreamTimeoutError("slow")],
    )
    def test_upstream_failure_is_502(self, mock_client, mock_service, error):
        mock_service.search.side_effect = error

        response = mock_client.get("/api/nearby-restaurants?location=강남역")

        assert response.status_code == 502
        assert response.json()["code"] == "NAVER_API_ERROR"
        assert response.json()["error"] == "외부 검색 서비스 응답 오류"


class TestClampSearchCount:
    """Tests for clamp_search_count."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            (None, 10),
            ("", 10),
            ("1", 1),
            ("11", 10),
            ("-5", 1),
            ("0", 10),
            ("x", 10),
            ("1" * 5000, 10),
        ],
    )
    def test_clamp(self, raw, expected):
        assert clamp_search_count(raw) == expected


# ============================================================================
# Restaurants
# ============================================================================


class TestRestaurantRoutes:
    """Tests for /api/restaurants."""

    def test_create_and_get(self, client):
        created = _create_restaurant(client)

        response = client.get(f"/api/restaurants/{created['id']}")

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["name"] == "한우마을"
        assert data["is_active"] is True
        assert data["created_at"].endswith("Z")

    def test_get_missing(self, client):
        response = client.get("/api/restaurants/missing")

        assert response.status_code == 404
        assert response.json() == {
            "success": False,
            "error": "Restaurant not found",
            "code": "NOT_FOUND",
        }

    def test_create_invalid_body(self, client):
        response = client.post("/api/restaurants", json={"name": "   ", "category": "한식"})

        assert response.status_code == 400
        body = response.json()
        assert body["code"] == "INVALID_INPUT"
        assert body["error"].startswith("name:")

    def test_create_missing_field(self, client):
        response = client.post("/api/restaurants", json={"name": "이름"})

        assert response.status_code == 400
        assert response.json()["error"].startswith("category:")

    def test_list_with_category_and_count(self, client):
        _create_restaurant(client, name="a", category="한식")
        _create_restaurant(client, name="b", category="일식")

        body = client.get("/api/restaurants?category=한식").json()

        assert body["success"] is True
        assert body["count"] == 1
        assert body["data"][0]["name"] == "a"

    def test_list_limit_validated(self, client):
        response = client.get("/api/restaurants?limit=0")

        assert response.status_code == 400
        assert response.json()["error"].startswith("query.limit")

    def test_stats(self, client):
        _create_restaurant(client, name="a", category="한식", average_price=8000)
        _create_restaurant(client, name="b", category="한식", average_price=12000)

        body = client.get("/api/restaurants/stats").json()

        assert body["data"] == [{"category": "한식", "count": 2, "avg_price": 10000.0}]

    def test_random(self, client):
        created = _create_restaurant(client)

        body = client.get("/api/restaurants/random").json()

        assert body["data"]["id"] == created["id"]

    def test_random_empty(self, client):
        response = client.get("/api/restaurants/random")

        assert response.status_code == 404
        assert response.json()["error"] == "No restaurants found"

    def test_review_summary(self, client):
        restaurant = _create_restaurant(client)
        for rating, tags in ((5, ["가성비"]), (4, ["가성비", "친절"])):
            client.post(
                "/api/reviews",
                json={
                    "restaurant_id": restaurant["id"],
                    "rating": rating,
                    "content": "좋아요",
                    "tags": tags,
                },
            )

        body = client.get(f"/api/restaurants/{restaurant['id']}/reviews/summary").json()

        summary = body["data"]
        assert summary["totalReviews"] == 2
        assert summary["averageRating"] == 4.5
        assert summary["ratingDistribution"] == {"1": 0, "2": 0, "3": 0, "4": 1, "5": 1}
        assert summary["topTags"][0] == {"tag": "가성비", "count": 2}
        assert summary["recentReviewsCount"] == 2

    def test_review_summary_without_reviews(self, client):
        body = client.get("/api/restaurants/unknown/reviews/summary").json()

        assert body["data"]["totalReviews"] == 0
        assert body["data"]["averageRating"] == 0


# ============================================================================
# Visits
# ============================================================================


class TestVisitRoutes:
    """Tests for /api/visits and /api/usage-stats."""

    def test_record_and_list(self, client):
        restaurant = _create_restaurant(client)

        response = client.post(
            "/api/visits",
            json={"restaurant_id": restaurant["id"], "session_id": "s1", "visit_type": "gacha"},
        )
        assert response.status_code == 201
        visit = response.json()["data"]
        assert visit["restaurant"]["name"] == "한우마을"

        body = client.get("/api/visits?session_id=s1").json()
        assert body["count"] == 1
        assert body["data"][0]["visit_type"] == "gacha"
        assert client.get("/api/visits?session_id=other").json()["count"] == 0

    def test_record_for_missing_restaurant(self, client):
        response = client.post("/api/visits", json={"restaurant_id": "missing"})

        assert response.status_code == 404

    def test_favorite_toggle(self, client):
        restaurant = _create_restaurant(client)
        visit = client.post("/api/visits", json={"restaurant_id": restaurant["id"]}).json()["data"]

        response = client.patch(f"/api/visits/{visit['id']}/favorite", json={"is_favorite": True})

        assert response.status_code == 200
        assert response.json()["data"]["is_favorite"] is True
        assert client.get("/api/visits?is_favorite=true").json()["count"] == 1

    def test_favorite_missing_visit(self, client):
        response = client.patch("/api/visits/missing/favorite", json={"is_favorite": True})

        assert response.status_code == 404
        assert response.json()["code"] == "NOT_FOUND"

    def test_invalid_date_filter(self, client):
        response = client.get("/api/visits?start_date=yesterday")

        assert response.status_code == 400
        assert "start_date" in response.json()["error"]

    def test_date_filter(self, client):
        restaurant = _create_restaurant(client)
        client.post("/api/visits", json={"restaurant_id": restaurant["id"]})

        assert client.get("/api/visits?start_date=2000-01-01").json()["count"] == 1
        assert client.get("/api/visits?end_date=2000-01-01").json()["count"] == 0

    def test_usage_stats(self, client):
        hanwoo = _create_restaurant(client)
        sushi = _create_restaurant(client, name="스시로", category="일식")
        for restaurant_id, visit_type in (
            (hanwoo["id"], "gacha"),
            (hanwoo["id"], "manual"),
            (sushi["id"], "gacha"),
        ):
            client.post(
                "/api/visits",
                json={"restaurant_id": restaurant_id, "session_id": "s1", "visit_type": visit_type},
            )

        body = client.get("/api/usage-stats?session_id=s1&period=week").json()

        stats = body["data"]
        assert stats["period"] == "week"
        assert stats["totalVisits"] == 3
        assert stats["visitTypeStats"] == {"gacha": 2, "manual": 1}
        assert stats["categoryStats"] == {"한식": 2, "일식": 1}
        assert stats["topRestaurants"][0]["name"] == "한우마을"
        assert stats["topRestaurants"][0]["count"] == 2

    def test_unknown_period_counts_everything(self, client):
        restaurant = _create_restaurant(client)
        client.post("/api/visits", json={"restaurant_id": restaurant["id"], "session_id": "s1"})

        response = client.get("/api/usage-stats?session_id=s1&period=decade")

        assert response.status_code == 200
        assert response.json()["data"]["period"] == "all"
        assert response.json()["data"]["totalVisits"] == 1


# ============================================================================
# Reviews
# ============================================================================


class TestReviewRoutes:
    """Tests for /api/reviews."""

    @pytest.fixture
    def restaurant_id(self, client):
        return _create_restaurant(client)["id"]

    def _post_review(self, client, restaurant_id, **overrides):
        body = {"restaurant_id": restaurant_id, "rating": 4, "content": "맛있어요"}
        body.update(overrides)
        response = client.post("/api/reviews", json=body)
        assert response.status_code == 201
        return response.json()["data"]

    def test_create(self, client, restaurant_id):
        review = self._post_review(client, restaurant_id, tags=["가성비"], session_id="s1")

        assert review["rating"] == 4
        assert review["tags"] == ["가성비"]
        assert review["is_public"] is True
        assert review["restaurant"]["name"] == "한우마을"

    def test_create_for_missing_restaurant(self, client):
        response = client.post(
            "/api/reviews", json={"restaurant_id": "missing", "rating": 4, "content": "x"}
        )

        assert response.status_code == 404

    @pytest.mark.parametrize("rating", [0, 6])
    def test_rating_out_of_range(self, client, restaurant_id, rating):
        response = client.post(
            "/api/reviews", json={"restaurant_id": restaurant_id, "rating": rating, "content": "x"}
        )

        assert response.status_code == 400
        assert response.json()["error"].startswith("rating:")

    def test_private_reviews_listing(self, client, restaurant_id):
        self._post_review(client, restaurant_id, content="공개")
        self._post_review(client, restaurant_id, content="비공개", is_public=False, session_id="s1")

        public = client.get(f"/api/reviews?restaurant_id={restaurant_id}").json()
        own = client.get("/api/reviews?session_id=s1&include_private=true").json()
        without_flag = client.get("/api/reviews?session_id=s1").json()

        assert [r["content"] for r in public["data"]] == ["공개"]
        assert own["count"] == 2
        assert without_flag["count"] == 1

    def test_get_private_review(self, client, restaurant_id):
        review = self._post_review(client, restaurant_id, is_public=False, session_id="s1")

        forbidden = client.get(f"/api/reviews/{review['id']}")
        allowed = client.get(f"/api/reviews/{review['id']}?session_id=s1")

        assert forbidden.status_code == 403
        assert forbidden.json() == {
            "success": False,
            "error": "비공개 리뷰는 작성자만 볼 수 있습니다.",
            "code": "FORBIDDEN",
        }
        assert allowed.status_code == 200

    def test_get_missing_review(self, client):
        assert client.get("/api/reviews/missing").status_code == 404

    def test_my_reviews(self, client, restaurant_id):
        self._post_review(client, restaurant_id, user_id="u1", is_public=False)
        self._post_review(client, restaurant_id, user_id="u2")

        body = client.get("/api/reviews/my?user_id=u1").json()

        assert body["count"] == 1

    def test_my_reviews_requires_owner(self, client):
        response = client.get("/api/reviews/my")

        assert response.status_code == 400
        assert response.json()["error"] == "session_id 또는 user_id가 필요합니다."

    def test_update(self, client, restaurant_id):
        review = self._post_review(client, restaurant_id, title="제목")

        response = client.patch(f"/api/reviews/{review['id']}", json={"rating": 5, "tags": ["재방문"]})

        data = response.json()["data"]
        assert response.status_code == 200
        assert data["rating"] == 5
        assert data["tags"] == ["재방문"]
        assert data["title"] == "제목"

    def test_update_missing(self, client):
        response = client.patch("/api/reviews/missing", json={"rating": 5})

        assert response.status_code == 404

    def test_delete(self, client, restaurant_id):
        review = self._post_review(client, restaurant_id)

        response = client.delete(f"/api/reviews/{review['id']}")

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Review deleted successfully"}
        assert client.get(f"/api/reviews/{review['id']}").status_code == 404
        assert client.delete(f"/api/reviews/{review['id']}").status_code == 404

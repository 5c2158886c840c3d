"""Request-scoped providers for route handlers."""

from fastapi import Request

from whateat.search.service import NearbySearchService


def get_search_service(request: Request) -> NearbySearchService:
    return request.app.state.search_service

"""API routers, mounted under /api by create_app()."""

from . import health, restaurants, reviews, search, visits

ROUTERS = (
    health.router,
    search.router,
    restaurants.router,
    visits.router,
    reviews.router,
)

__all__ = ["ROUTERS"]

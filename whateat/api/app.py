"""FastAPI application factory."""

import time
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from whateat import __version__
from whateat.adapters.factory import get_search_adapter
from whateat.config.environment import EnvironmentConfig
from whateat.config.models import AppConfig
from whateat.logging import get_logger
from whateat.logging.context import new_correlation_id, pop_log_context, push_log_context
from whateat.search.service import NearbySearchService

from .errors import register_exception_handlers
from .routes import ROUTERS

logger = get_logger(__name__, component="api")

API_PREFIX = "/api"
REQUEST_ID_HEADER = "X-Request-ID"


def create_app(
    app_config: AppConfig,
    env_config: EnvironmentConfig,
    search_service: Optional[NearbySearchService] = None,
) -> FastAPI:
    """
    Build the API application.

    The database must already be initialized with init_database(); routes
    open their own sessions per request.

    Args:
        app_config: Validated application configuration
        env_config: Environment configuration (credentials, environment name)
        search_service: Search service to use; built from config when omitted
    """
    app = FastAPI(title="What Eat Today", version=__version__)

    if search_service is None:
        adapter = get_search_adapter(app_config.http, env_config)
        search_service = NearbySearchService(adapter, app_config.search)

    app.state.search_service = search_service
    app.state.environment = env_config.environment

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_config.server.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def request_context(request: Request, call_next):
        """Attach request_id/method/path to every log record of the request."""
        request_id = request.headers.get(REQUEST_ID_HEADER) or new_correlation_id()
        token = push_log_context(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )
        started = time.monotonic()
        try:
            response = await call_next(request)
            response.headers[REQUEST_ID_HEADER] = request_id
            logger.info(
                f"{request.method} {request.url.path} -> {response.status_code}",
                extra={
                    "event": "api.request.completed",
                    "status_code": response.status_code,
                    "duration_ms": int((time.monotonic() - started) * 1000),
                },
            )
            return response
        finally:
            pop_log_context(token)

    register_exception_handlers(app)

    for router in ROUTERS:
        app.include_router(router, prefix=API_PREFIX)

    logger.info(
        "API application created",
        extra={
            "event": "api.app.created",
            "search_configured": env_config.has_search_credentials,
        },
    )
    return app

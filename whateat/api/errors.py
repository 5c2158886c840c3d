"""Error envelope and exception handlers.

Every failure leaves the API as {"success": false, "error": ..., "code"?,
"hint"?}. Register the handlers on an app via register_exception_handlers(app).
"""

from typing import Any, Dict, Optional

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from whateat.adapters.exceptions import AdapterError, UpstreamAuthError
from whateat.logging import get_logger
from whateat.persistence.exceptions import PersistenceError, RecordNotFoundError
from whateat.search.exceptions import InvalidInputError

logger = get_logger(__name__, component="api")

INVALID_INPUT = "INVALID_INPUT"
NOT_FOUND = "NOT_FOUND"
FORBIDDEN = "FORBIDDEN"
NAVER_API_CONFIG_ERROR = "NAVER_API_CONFIG_ERROR"
NAVER_API_ERROR = "NAVER_API_ERROR"
INTERNAL_ERROR = "INTERNAL_ERROR"

SEARCH_UNAVAILABLE_MESSAGE = "외부 검색 서비스를 사용할 수 없습니다."
SEARCH_UPSTREAM_MESSAGE = "외부 검색 서비스 응답 오류"


class ApiError(Exception):
    """Raised by route handlers to return a failure envelope."""

    def __init__(
        self,
        status_code: int,
        message: str,
        code: Optional[str] = None,
        hint: Optional[str] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.code = code
        self.hint = hint


def error_body(message: str, code: Optional[str] = None, hint: Optional[str] = None) -> Dict[str, Any]:
    body: Dict[str, Any] = {"success": False, "error": message}
    if code:
        body["code"] = code
    if hint:
        body["hint"] = hint
    return body


def error_response(
    status_code: int, message: str, code: Optional[str] = None, hint: Optional[str] = None
) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=error_body(message, code, hint))


async def api_error_handler(request: Request, exc: ApiError):
    return error_response(exc.status_code, exc.message, exc.code, exc.hint)


async def invalid_input_handler(request: Request, exc: InvalidInputError):
    return error_response(400, str(exc), INVALID_INPUT, exc.hint)


async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Request body/query validation failures become 400 INVALID_INPUT."""
    errors = exc.errors()
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{location}: {first.get('msg', 'invalid value')}" if location else first.get("msg")
    else:
        message = "Invalid request"
    return error_response(400, message, INVALID_INPUT)


async def upstream_error_handler(request: Request, exc: AdapterError):
    """Search provider failures: 503 for credentials, 502 for everything else."""
    if isinstance(exc, UpstreamAuthError):
        logger.error(
            f"Search provider unavailable: {exc}",
            extra={"event": "api.search.unavailable", "status_code": exc.status_code},
        )
        return error_response(503, SEARCH_UNAVAILABLE_MESSAGE, NAVER_API_CONFIG_ERROR)

    logger.error(
        f"Search provider call failed: {exc}",
        extra={
            "event": "api.search.upstream_failed",
            "error_type": type(exc).__name__,
            "status_code": getattr(exc, "status_code", None),
        },
    )
    return error_response(502, SEARCH_UPSTREAM_MESSAGE, NAVER_API_ERROR)


async def persistence_error_handler(request: Request, exc: PersistenceError):
    if isinstance(exc, RecordNotFoundError):
        return error_response(404, str(exc), NOT_FOUND)

    logger.error(
        f"Persistence failure: {exc}",
        extra={"event": "api.persistence.failed", "error_type": type(exc).__name__},
    )
    return error_response(500, "Database error", INTERNAL_ERROR)


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    """Unknown routes, wrong methods and other framework errors."""
    message = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    code = NOT_FOUND if exc.status_code == 404 else None
    return error_response(exc.status_code, message, code)


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error(
        f"Unhandled exception: {exc}",
        exc_info=exc,
        extra={"event": "api.request.unhandled", "error_type": type(exc).__name__},
    )
    environment = getattr(request.app.state, "environment", "local")
    message = str(exc) if environment == "local" else "Internal server error"
    return error_response(500, message, INTERNAL_ERROR)


def register_exception_handlers(app) -> None:
    """Register all exception handlers on the given FastAPI app."""
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(InvalidInputError, invalid_input_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(AdapterError, upstream_error_handler)
    app.add_exception_handler(PersistenceError, persistence_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

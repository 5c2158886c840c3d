from fastapi import APIRouter
from fastapi.responses import JSONResponse

from whateat.persistence import check_connection
from whateat.utils.timestamps import format_timestamp, utc_now

router = APIRouter(tags=["health"])


@router.get("/health")
def health():
    """Database probe: 200 when a trivial query succeeds, 500 otherwise."""
    timestamp = format_timestamp(utc_now())
    if check_connection():
        return {"status": "healthy", "database": "connected", "timestamp": timestamp}

    return JSONResponse(
        status_code=500,
        content={
            "status": "unhealthy",
            "database": "disconnected",
            "timestamp": timestamp,
        },
    )

"""Current-position lookup as a single awaitable with a tagged result.

A position provider is any coroutine function returning a Position or
raising one of the Geolocation*Error exceptions. get_current_position()
turns every outcome, including a timeout, into a GeolocationResult.
"""

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Optional

from whateat.logging import get_logger

logger = get_logger(__name__, component="geolocation")

DEFAULT_TIMEOUT_SECONDS = 10.0


class GeolocationStatus(str, Enum):
    OK = "ok"
    PERMISSION_DENIED = "permission_denied"
    UNAVAILABLE = "unavailable"
    TIMEOUT = "timeout"


MESSAGES = {
    GeolocationStatus.PERMISSION_DENIED: "위치 권한이 거부되었어요. 설정에서 위치 접근을 허용해 주세요.",
    GeolocationStatus.UNAVAILABLE: "현재 위치를 확인할 수 없어요. 지역명으로 검색해 주세요.",
    GeolocationStatus.TIMEOUT: "위치 확인 시간이 초과되었어요. 다시 시도해 주세요.",
}


class GeolocationError(Exception):
    """Base class for provider failures."""

    pass


class GeolocationPermissionError(GeolocationError):
    """The user refused location access."""

    pass


class GeolocationUnavailableError(GeolocationError):
    """The device could not determine a position."""

    pass


@dataclass(frozen=True)
class Position:
    latitude: float
    longitude: float
    accuracy: Optional[float] = None


@dataclass(frozen=True)
class GeolocationResult:
    """Tagged outcome: position is set only when status is OK."""

    status: GeolocationStatus
    position: Optional[Position] = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.status is GeolocationStatus.OK

    @classmethod
    def failure(cls, status: GeolocationStatus) -> "GeolocationResult":
        return cls(status=status, message=MESSAGES[status])


PositionProvider = Callable[[], Awaitable[Position]]


async def get_current_position(
    provider: PositionProvider, timeout: float = DEFAULT_TIMEOUT_SECONDS
) -> GeolocationResult:
    """
    Ask provider for the current position.

    Args:
        provider: Coroutine function returning a Position
        timeout: Seconds to wait before giving up

    Returns:
        GeolocationResult tagged OK with the position, or PERMISSION_DENIED,
        UNAVAILABLE or TIMEOUT with a user-facing message
    """
    if timeout <= 0:
        raise ValueError(f"timeout must be positive, got: {timeout}")

    try:
        position = await asyncio.wait_for(provider(), timeout=timeout)
    except asyncio.TimeoutError:
        status = GeolocationStatus.TIMEOUT
    except GeolocationPermissionError:
        status = GeolocationStatus.PERMISSION_DENIED
    except GeolocationUnavailableError:
        status = GeolocationStatus.UNAVAILABLE
    else:
        return GeolocationResult(status=GeolocationStatus.OK, position=position)

    logger.info(
        f"Position lookup failed: {status.value}",
        extra={"event": "geolocation.failed", "status": status.value},
    )
    return GeolocationResult.failure(status)

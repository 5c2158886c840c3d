"""Gacha restaurant picker.

Example:
    >>> session = GachaSession()
    >>> outcome = asyncio.run(session.spin())
    >>> if outcome.revealed:
    ...     session.select()
"""

from .geolocation import (
    GeolocationError,
    GeolocationPermissionError,
    GeolocationResult,
    GeolocationStatus,
    GeolocationUnavailableError,
    Position,
    get_current_position,
)
from .machine import (
    GachaMachine,
    GachaState,
    GachaStateError,
    PhaseDurations,
    SpinOutcome,
    SpinStatus,
)
from .pool import FALLBACK_CANDIDATES, GachaCandidate, candidates_from_search
from .session import GachaSession

__all__ = [
    "GachaMachine",
    "GachaState",
    "GachaStateError",
    "PhaseDurations",
    "SpinOutcome",
    "SpinStatus",
    "GachaCandidate",
    "GachaSession",
    "FALLBACK_CANDIDATES",
    "candidates_from_search",
    "get_current_position",
    "GeolocationResult",
    "GeolocationStatus",
    "GeolocationError",
    "GeolocationPermissionError",
    "GeolocationUnavailableError",
    "Position",
]

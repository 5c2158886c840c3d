"""Gacha picker state machine.

    IDLE -> ANTICIPATION -> SPINNING -> DECELERATING -> REVEALED -> IDLE

The candidate is drawn once when the reel starts spinning; the timed phases
only pace the reveal. A spin requested while another is in flight is
refused, as is a spin over an empty pool.
"""

import asyncio
import random
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Optional, Sequence

from whateat.logging import get_logger

from .pool import GachaCandidate

logger = get_logger(__name__, component="gacha")

EMPTY_POOL_MESSAGE = "뽑을 식당이 없어요. 먼저 주변 식당을 검색해 주세요."
BUSY_MESSAGE = "이미 뽑는 중이에요."


class GachaState(str, Enum):
    IDLE = "idle"
    ANTICIPATION = "anticipation"
    SPINNING = "spinning"
    DECELERATING = "decelerating"
    REVEALED = "revealed"


class SpinStatus(str, Enum):
    REVEALED = "revealed"
    BUSY = "busy"
    EMPTY_POOL = "empty_pool"


class GachaStateError(Exception):
    """retry() or select() called while no candidate is revealed."""

    def __init__(self, action: str, state: GachaState):
        super().__init__(f"Cannot {action} while picker is {state.value}")
        self.action = action
        self.state = state


@dataclass(frozen=True)
class SpinOutcome:
    """Result of a spin request.

    candidate is set only when status is REVEALED; message carries the
    user-facing text for the other statuses.
    """

    status: SpinStatus
    candidate: Optional[GachaCandidate] = None
    message: str = ""

    @property
    def revealed(self) -> bool:
        return self.status is SpinStatus.REVEALED


@dataclass(frozen=True)
class PhaseDurations:
    """Seconds spent in each timed phase."""

    anticipation: float = 0.4
    spin: float = 2.0
    decelerate: float = 0.8

    def __post_init__(self):
        for name in ("anticipation", "spin", "decelerate"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} duration cannot be negative")


Sleep = Callable[[float], Awaitable[None]]
StateListener = Callable[[GachaState], None]


class GachaMachine:
    """
    Drives one picker through its phases.

    Args:
        durations: Phase timings (defaults 0.4s / 2.0s / 0.8s)
        rng: Random source for the draw; pass a seeded Random in tests
        sleep: Coroutine used for the timed waits
        on_state_change: Called with each new state, e.g. to drive a UI
    """

    def __init__(
        self,
        durations: Optional[PhaseDurations] = None,
        rng: Optional[random.Random] = None,
        sleep: Sleep = asyncio.sleep,
        on_state_change: Optional[StateListener] = None,
    ):
        self.durations = durations or PhaseDurations()
        self._rng = rng or random.Random()
        self._sleep = sleep
        self._on_state_change = on_state_change
        self._state = GachaState.IDLE
        self._revealed: Optional[GachaCandidate] = None

    @property
    def state(self) -> GachaState:
        return self._state

    @property
    def revealed(self) -> Optional[GachaCandidate]:
        return self._revealed

    @property
    def is_busy(self) -> bool:
        return self._state is not GachaState.IDLE

    def _enter(self, state: GachaState) -> None:
        self._state = state
        logger.debug(f"Gacha state -> {state.value}", extra={"event": "gacha.state.changed"})
        if self._on_state_change is not None:
            self._on_state_change(state)

    async def spin(self, candidates: Sequence[GachaCandidate]) -> SpinOutcome:
        """
        Run a full spin over candidates and reveal one of them.

        Returns:
            SpinOutcome with status BUSY if a spin is already in flight or a
            result is still on display, EMPTY_POOL if candidates is empty,
            otherwise REVEALED with the drawn candidate. The machine stays in
            REVEALED until retry() or select().
        """
        if self.is_busy:
            logger.info(
                "Spin ignored: picker busy",
                extra={"event": "gacha.spin.rejected", "state": self._state.value},
            )
            return SpinOutcome(SpinStatus.BUSY, message=BUSY_MESSAGE)

        if not candidates:
            logger.warning(
                "Spin refused: empty candidate pool",
                extra={"event": "gacha.spin.empty_pool"},
            )
            return SpinOutcome(SpinStatus.EMPTY_POOL, message=EMPTY_POOL_MESSAGE)

        pool = list(candidates)
        try:
            self._enter(GachaState.ANTICIPATION)
            await self._sleep(self.durations.anticipation)

            self._enter(GachaState.SPINNING)
            drawn = pool[self._rng.randrange(len(pool))]
            await self._sleep(self.durations.spin)

            self._enter(GachaState.DECELERATING)
            await self._sleep(self.durations.decelerate)
        except BaseException:
            self._revealed = None
            self._enter(GachaState.IDLE)
            raise

        self._revealed = drawn
        self._enter(GachaState.REVEALED)
        logger.info(
            f"Gacha revealed {drawn.name}",
            extra={
                "event": "gacha.spin.revealed",
                "candidate_id": drawn.id,
                "pool_size": len(pool),
            },
        )
        return SpinOutcome(SpinStatus.REVEALED, candidate=drawn)

    def retry(self) -> None:
        """Dismiss the revealed candidate and return to IDLE.

        Raises:
            GachaStateError: If nothing is revealed
        """
        if self._state is not GachaState.REVEALED:
            raise GachaStateError("retry", self._state)
        self._revealed = None
        self._enter(GachaState.IDLE)

    def select(self) -> GachaCandidate:
        """Accept the revealed candidate and return to IDLE.

        Raises:
            GachaStateError: If nothing is revealed
        """
        if self._state is not GachaState.REVEALED:
            raise GachaStateError("select", self._state)
        chosen = self._revealed
        self._revealed = None
        self._enter(GachaState.IDLE)
        return chosen

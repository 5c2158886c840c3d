"""Per-user picker session: candidate pool, machine and last selection."""

from typing import Iterable, List, Optional

from whateat.domain.models import NormalizedRestaurant
from whateat.logging import get_logger

from .machine import GachaMachine, SpinOutcome
from .pool import FALLBACK_CANDIDATES, GachaCandidate, candidates_from_search

logger = get_logger(__name__, component="gacha")

SELECTION_MESSAGE = "{name}(으)로 결정했어요! 맛있게 드세요! 🎉"


class GachaSession:
    """
    Everything one user's picker needs, passed around explicitly.

    The pool starts as the static fallback list and is replaced whenever the
    user runs a nearby search.
    """

    def __init__(
        self,
        machine: Optional[GachaMachine] = None,
        candidates: Optional[Iterable[GachaCandidate]] = None,
    ):
        self.machine = machine or GachaMachine()
        self._pool: List[GachaCandidate] = list(
            FALLBACK_CANDIDATES if candidates is None else candidates
        )
        self.selection: Optional[GachaCandidate] = None

    @property
    def pool(self) -> List[GachaCandidate]:
        return list(self._pool)

    def use_search_results(self, restaurants: Iterable[NormalizedRestaurant]) -> int:
        """Replace the pool with search results; returns the new pool size."""
        self._pool = candidates_from_search(restaurants)
        logger.info(
            "Gacha pool replaced with search results",
            extra={"event": "gacha.pool.replaced", "pool_size": len(self._pool)},
        )
        return len(self._pool)

    def use_fallback(self) -> None:
        self._pool = list(FALLBACK_CANDIDATES)

    async def spin(self) -> SpinOutcome:
        return await self.machine.spin(self._pool)

    def retry(self) -> None:
        self.machine.retry()

    def select(self) -> GachaCandidate:
        """Accept the revealed candidate and remember it as the selection."""
        self.selection = self.machine.select()
        logger.info(
            f"Gacha selection: {self.selection.name}",
            extra={"event": "gacha.selected", "candidate_id": self.selection.id},
        )
        return self.selection

    def selection_message(self) -> str:
        """Confirmation text for the current selection, or "" if none."""
        if self.selection is None:
            return ""
        return SELECTION_MESSAGE.format(name=self.selection.name)

"""Candidate pools for the gacha picker."""

from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from whateat.domain.models import DEFAULT_EMOJI, NormalizedRestaurant

# Emoji shown for a search result, keyed by a word found in its category
CATEGORY_EMOJI: Tuple[Tuple[str, str], ...] = (
    ("카레", "🍛"),
    ("국수", "🍜"),
    ("라멘", "🍜"),
    ("피자", "🍕"),
    ("버거", "🍔"),
    ("초밥", "🍣"),
    ("스시", "🍣"),
    ("찌개", "🍲"),
    ("파스타", "🍝"),
    ("타코", "🌮"),
    ("도시락", "🍱"),
    ("샐러드", "🥗"),
    ("치킨", "🍗"),
    ("카페", "☕"),
    ("한식", "🍚"),
    ("중식", "🥟"),
    ("일식", "🍣"),
    ("양식", "🍝"),
)


@dataclass(frozen=True)
class GachaCandidate:
    """One restaurant the picker can land on.

    Attributes:
        id: Identifier within the pool
        name: Display name
        emoji: Reel symbol
        category: Display category, e.g. "한식 · 국수"
        rating: Star rating, if known
        distance: Display distance, e.g. "350m"
        price: Display price, e.g. "8,000원"
        address: Street address for search-backed candidates
    """

    id: str
    name: str
    emoji: str = DEFAULT_EMOJI
    category: str = ""
    rating: Optional[float] = None
    distance: str = ""
    price: str = ""
    address: str = ""

    @classmethod
    def from_restaurant(cls, restaurant: NormalizedRestaurant, index: int) -> "GachaCandidate":
        """Build a candidate from a search result at position index."""
        category = restaurant.category
        label = " · ".join(part for part in (category.sub, category.detail) if part)
        return cls(
            id=f"search-{index + 1}",
            name=restaurant.name,
            emoji=emoji_for_category(category.raw or category.main),
            category=label or category.main,
            address=restaurant.road_address or restaurant.address,
        )


def emoji_for_category(category: str) -> str:
    """First matching emoji for a category string, or the default."""
    for keyword, emoji in CATEGORY_EMOJI:
        if keyword in category:
            return emoji
    return DEFAULT_EMOJI


FALLBACK_CANDIDATES: Tuple[GachaCandidate, ...] = (
    GachaCandidate("1", "황금카레", "🍛", "일식 · 카레", 4.7, "120m", "9,000원"),
    GachaCandidate("2", "맛있는 국수집", "🍜", "한식 · 국수", 4.5, "350m", "8,000원"),
    GachaCandidate("3", "피자파티", "🍕", "양식 · 피자", 4.8, "500m", "15,000원"),
    GachaCandidate("4", "버거하우스", "🍔", "양식 · 버거", 4.3, "650m", "12,000원"),
    GachaCandidate("5", "스시도쿄", "🍣", "일식 · 초밥", 4.9, "800m", "25,000원"),
    GachaCandidate("6", "엄마손찌개", "🍲", "한식 · 찌개", 4.6, "200m", "10,000원"),
    GachaCandidate("7", "파스타공방", "🍝", "양식 · 파스타", 4.4, "450m", "14,000원"),
    GachaCandidate("8", "타코마니아", "🌮", "멕시칸 · 타코", 4.2, "700m", "11,000원"),
    GachaCandidate("9", "도시락명가", "🍱", "한식 · 도시락", 4.5, "300m", "7,000원"),
    GachaCandidate("10", "샐러드팜", "🥗", "양식 · 샐러드", 4.7, "550m", "13,000원"),
)


def candidates_from_search(restaurants: Iterable[NormalizedRestaurant]) -> List[GachaCandidate]:
    return [GachaCandidate.from_restaurant(r, i) for i, r in enumerate(restaurants)]

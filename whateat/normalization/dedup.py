"""Duplicate removal across paginated search results."""

from typing import Iterable, List

from whateat.domain.models import RawSearchItem

from .service import strip_html_tags

KEY_SEPARATOR = "|"


def restaurant_key(item: RawSearchItem) -> str:
    """Identity key: tag-stripped title, '|', address exactly as received."""
    return f"{strip_html_tags(item.title)}{KEY_SEPARATOR}{item.address}"


def remove_duplicates(items: Iterable[RawSearchItem]) -> List[RawSearchItem]:
    """Drop items whose identity key was already seen.

    The first occurrence wins and order is preserved, so applying this twice
    gives the same list as applying it once. Returned items are the original
    raw objects; normalization happens afterwards.
    """
    seen = set()
    unique = []
    for item in items:
        key = restaurant_key(item)
        if key in seen:
            continue
        seen.add(key)
        unique.append(item)
    return unique

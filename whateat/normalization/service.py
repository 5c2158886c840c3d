"""Normalization of raw local search items into NormalizedRestaurant records.

Everything here is pure: no I/O, no logging, and no exceptions for
malformed input. Missing fields become empty strings and unusable
coordinates become null.
"""

import re
from typing import Iterable, List, Optional

from whateat.domain.models import (
    DEFAULT_MAIN_CATEGORY,
    Category,
    NormalizedRestaurant,
    RawSearchItem,
)

from .coordinates import convert_naver_coordinates

CATEGORY_SEPARATOR = ">"

_HTML_TAG = re.compile(r"<[^>]*>")


def strip_html_tags(text: Optional[str]) -> str:
    """Remove every HTML tag and trim surrounding whitespace.

    The provider highlights matched terms with <b> tags:

        >>> strip_html_tags("<b>맛집</b> 추천")
        '맛집 추천'
    """
    if not text:
        return ""
    return _HTML_TAG.sub("", text).strip()


def parse_category(category: Optional[str]) -> Category:
    """Split a provider category such as "음식점>한식>삼겹살".

    Segments map to main/sub/detail; main falls back to "음식점" and the
    others to "" when missing. The original string is kept in raw.
    """
    if not category:
        return Category(main=DEFAULT_MAIN_CATEGORY, sub="", detail="", raw="")

    parts = [part.strip() for part in category.split(CATEGORY_SEPARATOR)]
    parts += [""] * (3 - len(parts))

    return Category(
        main=parts[0] or DEFAULT_MAIN_CATEGORY,
        sub=parts[1],
        detail=parts[2],
        raw=category,
    )


def normalize_item(item: RawSearchItem) -> NormalizedRestaurant:
    """Map one provider item onto the application's restaurant shape."""
    return NormalizedRestaurant(
        name=strip_html_tags(item.title),
        address=item.address,
        road_address=item.road_address,
        category=parse_category(item.category),
        telephone=item.telephone,
        description=strip_html_tags(item.description),
        link=item.link,
        mapx=item.mapx,
        mapy=item.mapy,
        coordinates=convert_naver_coordinates(item.mapx, item.mapy),
    )


def normalize_items(items: Iterable[RawSearchItem]) -> List[NormalizedRestaurant]:
    return [normalize_item(item) for item in items]

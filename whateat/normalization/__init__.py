"""Normalization layer for local search results.

- convert_naver_coordinates: projected mapx/mapy to latitude/longitude
- normalize_item: RawSearchItem to NormalizedRestaurant
- remove_duplicates: first-seen dedup on the name|address key
"""

from .coordinates import convert_naver_coordinates
from .dedup import remove_duplicates, restaurant_key
from .service import normalize_item, normalize_items, parse_category, strip_html_tags

__all__ = [
    "convert_naver_coordinates",
    "normalize_item",
    "normalize_items",
    "parse_category",
    "strip_html_tags",
    "remove_duplicates",
    "restaurant_key",
]

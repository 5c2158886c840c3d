"""Coordinate transform for local search results.

The provider reports mapx/mapy as projected (KATEC-style) coordinates
multiplied by 10. The conversion below is a linear approximation centred on
Korea, not a geodetic transform; its constants are kept so converted values
match coordinates already stored by earlier releases.
"""

from typing import Any, Optional

from whateat.domain.models import Coordinates, RawCoordinates
from whateat.utils.parsing import parse_leading_int

COORDINATE_SCALE = 10

FALSE_EASTING = 500000
FALSE_NORTHING = 200000
METERS_PER_DEGREE = 110000
ORIGIN_LONGITUDE = 127.5
ORIGIN_LATITUDE = 37.5

# Plausible bounding box for the Korean peninsula, bounds inclusive
LATITUDE_RANGE = (33.0, 43.0)
LONGITUDE_RANGE = (124.0, 132.0)

DECIMAL_PLACES = 6


def in_bounds(latitude: float, longitude: float) -> bool:
    lat_min, lat_max = LATITUDE_RANGE
    lon_min, lon_max = LONGITUDE_RANGE
    return lat_min <= latitude <= lat_max and lon_min <= longitude <= lon_max


def convert_naver_coordinates(mapx: Any, mapy: Any) -> Optional[Coordinates]:
    """Convert provider mapx/mapy into latitude/longitude.

    Args:
        mapx: X coordinate (longitude direction), projected value × 10
        mapy: Y coordinate (latitude direction), projected value × 10

    Returns:
        None if either input is missing or not an integer.
        Coordinates with latitude/longitude None and the parsed inputs in
        raw if the result falls outside the bounding box.
        Otherwise Coordinates rounded to 6 decimal places.
    """
    if mapx in (None, "") or mapy in (None, ""):
        return None

    x = parse_leading_int(mapx)
    y = parse_leading_int(mapy)
    if x is None or y is None:
        return None

    projected_x = x / COORDINATE_SCALE
    projected_y = y / COORDINATE_SCALE

    longitude = (projected_x - FALSE_EASTING) / METERS_PER_DEGREE + ORIGIN_LONGITUDE
    latitude = (projected_y - FALSE_NORTHING) / METERS_PER_DEGREE + ORIGIN_LATITUDE

    if not in_bounds(latitude, longitude):
        return Coordinates(latitude=None, longitude=None, raw=RawCoordinates(mapx=x, mapy=y))

    return Coordinates(
        latitude=round(latitude, DECIMAL_PLACES),
        longitude=round(longitude, DECIMAL_PLACES),
    )

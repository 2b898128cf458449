"""
Geographic primitives in WGS84 decimal degrees
"""

import math
from dataclasses import dataclass

KM_PER_DEGREE_LAT = 111.0


def is_valid_lat(value: float) -> bool:
    return -90.0 <= value <= 90.0


def is_valid_lng(value: float) -> bool:
    return -180.0 <= value <= 180.0


@dataclass(frozen=True)
class Coordinates:
    lat: float
    lng: float

    @property
    def is_valid(self) -> bool:
        return is_valid_lat(self.lat) and is_valid_lng(self.lng)


@dataclass(frozen=True)
class BoundingBox:
    """
    Axis-aligned box with ``north > south`` and ``east > west``.

    Boxes crossing the antimeridian are not representable; callers only
    work with small local viewports.
    """
    north: float
    south: float
    east: float
    west: float

    def __post_init__(self):
        if not (is_valid_lat(self.north) and is_valid_lat(self.south)):
            raise ValueError("latitude bounds must be within [-90, 90]")
        if not (is_valid_lng(self.east) and is_valid_lng(self.west)):
            raise ValueError("longitude bounds must be within [-180, 180]")
        if self.north <= self.south:
            raise ValueError("north must be greater than south")
        if self.east <= self.west:
            raise ValueError("east must be greater than west")

    @classmethod
    def around(cls, lat: float, lng: float, radius_km: float) -> "BoundingBox":
        """
        Approximate box extending ``radius_km`` in each direction from a point.

        One degree of latitude is taken as 111 km; the longitude span is
        widened by ``1 / cos(lat)``. Edges are clamped to valid ranges.
        """
        if radius_km <= 0:
            raise ValueError("radius_km must be positive")
        if not (is_valid_lat(lat) and is_valid_lng(lng)):
            raise ValueError("center must be a valid WGS84 coordinate")

        lat_delta = radius_km / KM_PER_DEGREE_LAT
        cos_lat = math.cos(math.radians(lat))
        # Near the poles every longitude is within reach
        lng_delta = 180.0 if cos_lat < 1e-6 else radius_km / (KM_PER_DEGREE_LAT * cos_lat)

        return cls(
            north=min(lat + lat_delta, 90.0),
            south=max(lat - lat_delta, -90.0),
            east=min(lng + lng_delta, 180.0),
            west=max(lng - lng_delta, -180.0),
        )

    def to_overpass(self) -> str:
        """Overpass bbox filter order: south, west, north, east"""
        return f"{self.south},{self.west},{self.north},{self.east}"

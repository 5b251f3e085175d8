"""
Data models shared by the Cercalia client and its callers.
"""

from dataclasses import dataclass
from typing import Any, Optional

from .errors import CercaliaError
from .normalizer import get_attr
from .parsers import parse_float_or_none, parse_required_coordinate


def _format_number(value: float) -> str:
    # 2.0 -> "2.0", keeps the JSON spelling used by the service
    return repr(float(value))


@dataclass(frozen=True)
class Coordinate:
    """Geographic coordinate in WGS84 degrees."""
    lat: float
    lng: float

    def to_cercalia_string(self) -> str:
        """Cercalia wire order is "lng,lat"."""
        return f"{_format_number(self.lng)},{_format_number(self.lat)}"

    def to_lat_lng_string(self) -> str:
        return f"{_format_number(self.lat)},{_format_number(self.lng)}"

    @classmethod
    def from_cercalia_string(cls, text: str) -> "Coordinate":
        """
        Parse a "lng,lat" string.

        Raises:
            CercaliaError: VALIDATION error for malformed input
        """
        parts = (text or "").split(",")
        if len(parts) != 2:
            raise CercaliaError.validation(f"Invalid coordinate string: {text}")

        lng = parse_float_or_none(parts[0])
        lat = parse_float_or_none(parts[1])
        if lng is None or lat is None:
            raise CercaliaError.validation(f"Invalid coordinate string: {text}")

        return cls(lat=lat, lng=lng)

    @classmethod
    def from_node(cls, node: Any) -> "Coordinate":
        """
        Build from a response "coord" node with "x" (lng) and "y" (lat).

        Raises:
            CercaliaError: VALIDATION error when either axis is missing or bad
        """
        lat = parse_required_coordinate(get_attr(node, "y"), "latitude")
        lng = parse_required_coordinate(get_attr(node, "x"), "longitude")
        return cls(lat=lat, lng=lng)


@dataclass(frozen=True)
class BoundingBox:
    """Rectangle given by its south-west and north-east corners."""
    min_lat: float
    min_lng: float
    max_lat: float
    max_lng: float

    @classmethod
    def from_corners(cls, southwest: Coordinate, northeast: Coordinate) -> "BoundingBox":
        return cls(
            min_lat=southwest.lat,
            min_lng=southwest.lng,
            max_lat=northeast.lat,
            max_lng=northeast.lng,
        )

    @property
    def southwest(self) -> Coordinate:
        return Coordinate(lat=self.min_lat, lng=self.min_lng)

    @property
    def northeast(self) -> Coordinate:
        return Coordinate(lat=self.max_lat, lng=self.max_lng)

    def contains(self, coord: Coordinate) -> bool:
        return (
            self.min_lat <= coord.lat <= self.max_lat
            and self.min_lng <= coord.lng <= self.max_lng
        )


@dataclass(frozen=True)
class RetryAttempt:
    """
    Record of one failed attempt that will be retried.

    Only used for logging and retry observers.
    """
    operation: str
    attempt: int
    max_attempts: int
    wait: float
    error: Optional[BaseException] = None

    @property
    def error_message(self) -> str:
        return str(self.error) if self.error is not None else ""

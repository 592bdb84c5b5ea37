"""ORM models for the catalog tables."""

from .city import CityRow
from .place import PlaceRow

__all__ = [
    "CityRow",
    "PlaceRow",
]

"""Catalog access: read-only place and city sources with a TTL cache."""

import logging
import threading
import time
from collections.abc import Sequence
from typing import Any, Protocol

from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from travelme.engine.db.base import read_session
from travelme.engine.db.models import CityRow, PlaceRow
from travelme.engine.exceptions import CatalogUnavailableError
from travelme.engine.models.catalog import CatalogPlace, CityRecord, ReviewSummary
from travelme.engine.models.common import Geo

logger = logging.getLogger(__name__)


class CatalogSource(Protocol):
    """Read-only source of catalog places and cities."""

    def fetch_places(self) -> list[CatalogPlace]:
        """Fetch every place.

        Raises:
            CatalogUnavailableError: If the store cannot be read.
        """
        ...

    def fetch_cities(self) -> list[CityRecord]:
        """Fetch the city name -> id table.

        Raises:
            CatalogUnavailableError: If the store cannot be read.
        """
        ...


class StaticCatalogSource:
    """Catalog source backed by in-memory lists."""

    def __init__(
        self, places: Sequence[CatalogPlace], cities: Sequence[CityRecord] = ()
    ) -> None:
        self._places = list(places)
        self._cities = list(cities)

    def fetch_places(self) -> list[CatalogPlace]:
        return list(self._places)

    def fetch_cities(self) -> list[CityRecord]:
        return list(self._cities)


class SqlCatalogSource:
    """Catalog source reading the ``places`` and ``cities`` tables."""

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    def fetch_places(self) -> list[CatalogPlace]:
        try:
            with read_session(self._session_factory) as session:
                rows = session.scalars(select(PlaceRow)).all()
                places = []
                for row in rows:
                    try:
                        places.append(self._parse_place(row))
                    except (ValidationError, ValueError, TypeError) as e:
                        logger.warning(
                            f"Skipping invalid catalog row {row.id}: {e}",
                            extra={"place_id": row.id},
                        )
                return places
        except SQLAlchemyError as e:
            raise CatalogUnavailableError(f"Failed to fetch places: {e}") from e

    def fetch_cities(self) -> list[CityRecord]:
        try:
            with read_session(self._session_factory) as session:
                rows = session.scalars(select(CityRow)).all()
                return [CityRecord(id=row.id, name=row.name) for row in rows]
        except SQLAlchemyError as e:
            raise CatalogUnavailableError(f"Failed to fetch cities: {e}") from e

    def _parse_place(self, row: PlaceRow) -> CatalogPlace:
        """Map a places row to a CatalogPlace, filling catalog defaults."""
        return CatalogPlace(
            id=str(row.id),
            title=row.title,
            type=row.type or "",
            description=row.description or "",
            tags=tuple(row.tags or ()),
            rating=row.rating,
            safety_score=row.safety_score or 90,
            price_level=row.price_level if row.price_level is not None else 0,
            location=self._parse_location(row.coordinates),
            address=row.address or None,
            contact=row.contact or None,
            opening_hours=row.opening_hours or None,
            image_url=row.image_url or "",
            reviews=self._parse_reviews(row.reviews),
            verified=bool(row.verified),
            city_id=row.city_id or "",
        )

    def _parse_location(self, coordinates: dict[str, Any] | None) -> Geo | None:
        if not coordinates:
            return None
        lat = coordinates.get("latitude")
        lon = coordinates.get("longitude")
        if lat is None or lon is None:
            return None
        return Geo(lat=float(lat), lon=float(lon))

    def _parse_reviews(self, reviews: dict[str, Any] | None) -> ReviewSummary | None:
        if not reviews:
            return None
        return ReviewSummary(
            count=int(reviews.get("count") or 0), average=reviews.get("average")
        )


class CatalogRepository:
    """Cached access to the catalog with city resolution.

    The place list is cached for ``ttl_seconds``; on source failure the
    stale cache is served. The city table is fetched once per repository.
    """

    def __init__(self, source: CatalogSource, ttl_seconds: int = 300) -> None:
        self._source = source
        self._ttl_seconds = ttl_seconds
        self._places: list[CatalogPlace] = []
        self._loaded_at: float | None = None
        self._city_map: dict[str, str] | None = None
        self._lock = threading.Lock()

    def load_catalog(self) -> list[CatalogPlace]:
        """Return the catalog, refreshing it when the cache has expired.

        Never raises; a failing source yields the stale cache (possibly empty).
        """
        with self._lock:
            now = time.monotonic()
            if (
                self._places
                and self._loaded_at is not None
                and now - self._loaded_at < self._ttl_seconds
            ):
                return self._places

            try:
                places = self._source.fetch_places()
            except CatalogUnavailableError as e:
                logger.error(
                    f"Catalog fetch failed, serving {len(self._places)} cached places: {e}",
                    extra={"cached_places": len(self._places)},
                )
                return self._places

            self._places = places
            self._loaded_at = now
            logger.info(f"Loaded {len(places)} catalog places")
            return self._places

    def invalidate(self) -> None:
        """Drop the cached catalog; the next load hits the source."""
        with self._lock:
            self._places = []
            self._loaded_at = None

    def _get_city_map(self) -> dict[str, str]:
        with self._lock:
            if self._city_map is not None:
                return self._city_map

            try:
                cities = self._source.fetch_cities()
            except CatalogUnavailableError as e:
                logger.warning(f"Failed to load cities table: {e}")
                return {}

            city_map: dict[str, str] = {}
            for city in cities:
                city_map.setdefault(city.name.lower(), city.id)
            self._city_map = city_map
            return city_map

    def resolve_city(self, name: str) -> str | None:
        """Resolve a city name to its id, case-insensitively."""
        return self._get_city_map().get(name.lower())

    def filter_by_city(
        self, catalog: list[CatalogPlace], name: str
    ) -> list[CatalogPlace]:
        """Restrict the catalog to one city.

        Falls back to the unfiltered catalog when nothing matches.
        """
        if not name:
            return catalog

        city_id = self.resolve_city(name)
        if city_id:
            filtered = [p for p in catalog if p.city_id == city_id]
            if filtered:
                return filtered
            logger.warning(
                f"City id {city_id[:8]}... matched no places, returning all",
                extra={"city": name},
            )
            return catalog

        logger.warning(f"Could not resolve city {name!r} to an id", extra={"city": name})
        needle = name.lower()
        filtered = [
            p
            for p in catalog
            if p.city_id
            and (
                p.city_id.lower() == needle
                or needle in p.city_id.lower()
                or p.city_id.lower() in needle
            )
        ]
        if filtered:
            return filtered

        logger.warning(
            f"No places matched city {name!r}, returning all {len(catalog)}",
            extra={"city": name},
        )
        return catalog

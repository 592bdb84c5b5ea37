"""Routing service adapter for OSRM-compatible HTTP APIs."""

import logging
from typing import Any

import httpx

from travelme.engine.config import Settings, get_settings
from travelme.engine.exec import call_with_deadline
from travelme.engine.models.common import Geo, TravelMode
from travelme.engine.models.routing import Route, RouteSegment

logger = logging.getLogger(__name__)


def decode_polyline(encoded: str, precision: int = 5) -> list[tuple[float, float]]:
    """Decode an encoded polyline into (lat, lon) pairs."""
    factor = 10**precision
    points: list[tuple[float, float]] = []
    index = lat = lon = 0

    def _next_value() -> int:
        nonlocal index
        shift = result = 0
        while True:
            b = ord(encoded[index]) - 63
            index += 1
            result |= (b & 0x1F) << shift
            shift += 5
            if b < 0x20:
                break
        return ~(result >> 1) if result & 1 else result >> 1

    while index < len(encoded):
        lat += _next_value()
        lon += _next_value()
        points.append((lat / factor, lon / factor))
    return points


def format_duration(minutes: int) -> str:
    """Format minutes, e.g. '< 1 мин', '25 мин', '1 ч 10 мин'."""
    if minutes < 1:
        return "< 1 мин"
    if minutes < 60:
        return f"{minutes} мин"
    hours, rest = divmod(minutes, 60)
    return f"{hours} ч {rest} мин" if rest else f"{hours} ч"


def format_km(km: float) -> str:
    """Format kilometers, e.g. '450 м' or '2.3 км'."""
    if km < 1:
        return f"{round(km * 1000)} м"
    return f"{km:.1f} км"


def _round_minutes(seconds: float) -> int:
    return round(seconds / 60)


def _round_km(meters: float) -> float:
    return round(meters / 100) / 10


class RoutingClient:
    """Client for the OSRM ``route`` endpoint."""

    def __init__(
        self,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize routing client.

        Args:
            settings: Settings with base URL and timeout; defaults to global.
            transport: Optional httpx transport, e.g. MockTransport in tests.
        """
        settings = settings or get_settings()
        self.base_url = settings.routing_base_url.rstrip("/")
        self.timeout = settings.routing_timeout_s
        self._transport = transport

    def _build_url(self, waypoints: list[Geo], mode: TravelMode) -> str:
        coords = ";".join(f"{w.lon},{w.lat}" for w in waypoints)
        return f"{self.base_url}/route/v1/{mode.value}/{coords}"

    async def _fetch(self, url: str) -> dict[str, Any]:
        async with httpx.AsyncClient(
            timeout=self.timeout, transport=self._transport
        ) as client:
            response = await client.get(
                url,
                params={
                    "overview": "full",
                    "geometries": "polyline",
                    "steps": "false",
                    "alternatives": "false",
                },
            )
            response.raise_for_status()
            return response.json()

    async def get_route(
        self, waypoints: list[Geo], mode: TravelMode = TravelMode.foot
    ) -> Route | None:
        """Fetch a route through the ordered waypoints.

        Returns:
            Route with one segment per consecutive pair, or None when fewer
            than two waypoints are given or the service gives no route.
        """
        if len(waypoints) < 2:
            return None

        result = await call_with_deadline(
            self._fetch(self._build_url(waypoints, mode)), self.timeout, "routing"
        )
        if not result.ok:
            return None

        data = result.value if isinstance(result.value, dict) else {}
        if data.get("code") != "Ok" or not data.get("routes"):
            logger.warning(
                f"Routing service returned no route (code={data.get('code')!r})",
                extra={"mode": mode.value, "waypoints": len(waypoints)},
            )
            return None

        return self._parse_route(data["routes"][0], waypoints)

    def _parse_route(self, route: dict[str, Any], waypoints: list[Geo]) -> Route:
        segments = [
            RouteSegment(
                from_geo=waypoints[i],
                to_geo=waypoints[i + 1],
                duration_minutes=_round_minutes(leg.get("duration", 0)),
                distance_km=_round_km(leg.get("distance", 0)),
            )
            for i, leg in enumerate(route.get("legs", [])[: len(waypoints) - 1])
        ]
        geometry = route.get("geometry")
        return Route(
            segments=segments,
            total_duration_minutes=_round_minutes(route.get("duration", 0)),
            total_distance_km=_round_km(route.get("distance", 0)),
            geometry=decode_polyline(geometry) if isinstance(geometry, str) else [],
        )

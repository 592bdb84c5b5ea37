"""Annotate plan stops with routed travel times between consecutive stops."""

import asyncio
import logging

from travelme.engine.adapters.routing import RoutingClient, format_duration, format_km
from travelme.engine.metrics.registry import MetricsClient
from travelme.engine.models.common import Geo, TravelMode
from travelme.engine.models.plan import Plan, Stop

logger = logging.getLogger(__name__)


class TravelTimeEnricher:
    """Fills ``walking_time`` and ``segment_distance_km`` on shown stops."""

    def __init__(
        self, routing: RoutingClient, metrics: MetricsClient | None = None
    ) -> None:
        self._routing = routing
        self._metrics = metrics
        # Strong references keep detached tasks alive until they finish
        self._tasks: set[asyncio.Task[None]] = set()

    def _record(self, outcome: str) -> None:
        if self._metrics:
            self._metrics.inc_enrichment(outcome)

    async def enrich(self, plan: Plan, mode: TravelMode = TravelMode.foot) -> None:
        """Annotate the plan in place; failures leave it unchanged."""
        stops: list[Stop] = [
            option.stop
            for section in plan.sections
            for option in section.options
            if option.stop.has_coordinates
        ]
        if len(stops) < 2:
            self._record("skipped")
            return

        waypoints = [Geo(lat=s.latitude, lon=s.longitude) for s in stops]
        try:
            route = await self._routing.get_route(waypoints, mode)
        except Exception as e:
            logger.warning(f"Travel-time enrichment failed: {e}")
            self._record("failed")
            return
        if route is None:
            logger.warning("Travel-time enrichment got no route, keeping estimates")
            self._record("failed")
            return

        for i, segment in enumerate(route.segments):
            if i + 1 >= len(stops):
                break
            next_stop = stops[i + 1]
            next_stop.walking_time = (
                f"{format_duration(segment.duration_minutes)} · {format_km(segment.distance_km)}"
            )
            next_stop.segment_distance_km = segment.distance_km

        logger.info(f"Enriched {len(route.segments)} travel segments")
        self._record("enriched")

    def schedule(
        self, plan: Plan, mode: TravelMode = TravelMode.foot
    ) -> asyncio.Task[None]:
        """Run enrichment as a detached task; must be called inside a running loop."""
        task = asyncio.get_running_loop().create_task(self.enrich(plan, mode))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    @property
    def pending(self) -> int:
        return len(self._tasks)

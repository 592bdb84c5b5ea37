"""Projection of catalog places into plan stops and options."""

from travelme.engine.models.catalog import CatalogPlace
from travelme.engine.models.common import ConfidenceLevel, Geo, SafetyLevel
from travelme.engine.models.plan import PlanOption, Stop
from travelme.engine.utils.geo import haversine_km

from .tables import budget_label

SAFE_SCORE_THRESHOLD = 85


def build_stop(place: CatalogPlace, user_location: Geo | None = None) -> Stop:
    """Project a catalog place into its presentation form."""
    distance_km = None
    if user_location is not None and place.location is not None:
        distance_km = haversine_km(user_location, place.location)

    return Stop(
        id=place.id,
        title=place.title,
        type=place.type,
        tags=list(place.tags),
        description=place.description,
        image_url=place.image_url,
        rating=place.rating,
        address=place.address,
        price_level=place.price_level,
        opening_hours=place.opening_hours,
        contact=place.contact,
        review_count=place.reviews.count if place.reviews else 0,
        verified=place.verified,
        safety_score=place.safety_score,
        safety_level=(
            SafetyLevel.safe
            if place.safety_score >= SAFE_SCORE_THRESHOLD
            else SafetyLevel.warning
        ),
        latitude=place.location.lat if place.location else None,
        longitude=place.location.lon if place.location else None,
        distance_km=distance_km,
    )


def build_option(
    place: CatalogPlace,
    why: str,
    user_location: Geo | None = None,
    budget_hint: str | None = None,
) -> PlanOption:
    """Build a verified option for a catalog place."""
    return PlanOption(
        stop=build_stop(place, user_location),
        why=why,
        budget_hint=budget_hint or budget_label(place.price_level),
        confidence=1.0,
        confidence_level=ConfidenceLevel.verified,
    )

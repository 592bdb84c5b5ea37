"""Refinement engine: replace one shown option without calling any service."""

from __future__ import annotations

import copy
import logging
from collections.abc import Sequence

from travelme.engine.models.catalog import CatalogPlace
from travelme.engine.models.common import Geo
from travelme.engine.models.plan import Plan
from travelme.engine.planning.stops import build_option

logger = logging.getLogger(__name__)

POOL_DEFAULT_WHY = "Рекомендованное место"


def replace_option(
    plan: Plan,
    section_index: int,
    option_index: int,
    catalog: Sequence[CatalogPlace],
    user_location: Geo | None = None,
) -> Plan:
    """
    Replace one shown option in a copy of the plan.

    The removed option's slot is filled by the section's first reserve, or
    else by the next id from the scored pool. An exhausted pool leaves the
    slot empty. Synchronous and deterministic; the input plan is never
    mutated.

    Args:
        plan: Plan previously returned to the caller
        section_index: Index of the section holding the option
        option_index: Index of the option within the section's shown options
        catalog: Catalog the plan was built from, used to resolve pool ids
        user_location: Optional user position for the new stop's distance

    Returns:
        The input plan itself when an index is out of range, otherwise a new Plan
    """
    if not 0 <= section_index < len(plan.sections):
        return plan
    if not 0 <= option_index < len(plan.sections[section_index].options):
        return plan

    new_plan = copy.deepcopy(plan)
    section = new_plan.sections[section_index]
    removed = section.options.pop(option_index)

    if section.reserves:
        replacement = section.reserves.pop(0)
        section.options.insert(option_index, replacement)
        logger.info(
            f"Replaced {removed.stop.id} with reserve {replacement.stop.id}",
            extra={"section_index": section_index, "option_index": option_index},
        )
        return new_plan

    if not new_plan.scored_pool:
        logger.info(
            f"Removed {removed.stop.id}; scored pool exhausted, slot left empty",
            extra={"section_index": section_index, "option_index": option_index},
        )
        return new_plan

    next_id = new_plan.scored_pool.pop(0)
    place = next((p for p in catalog if p.id == next_id), None)
    if place is None:
        logger.warning(f"Pool id {next_id} not in catalog, slot left empty")
        return new_plan

    section.options.insert(
        option_index,
        build_option(place, place.description or POOL_DEFAULT_WHY, user_location),
    )
    logger.info(
        f"Replaced {removed.stop.id} with pool place {next_id}",
        extra={"section_index": section_index, "option_index": option_index},
    )
    return new_plan

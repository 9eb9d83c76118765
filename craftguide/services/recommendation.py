"""Tool recommendation filter.

Recommends catalog tools for a craft and skill level, excluding anything the
user already owns. Results are ordered by priority (high first); entries with
equal priority keep their catalog order.
"""
import logging
from typing import Iterable, List, Optional, Union

from craftguide.schemas.guidance import (
    CraftSpecialization,
    Priority,
    SkillLevel,
    ToolRecommendation,
    UserContext,
)
from craftguide.services.tool_catalog import TOOL_CATALOG, CatalogTool, ToolCatalog
from craftguide.settings import settings

logger = logging.getLogger(__name__)

PRIORITY_WEIGHTS = {
    Priority.HIGH: 3,
    Priority.MEDIUM: 2,
    Priority.LOW: 1,
}


def _to_craft(craft_type: Union[str, CraftSpecialization]) -> Optional[CraftSpecialization]:
    if isinstance(craft_type, CraftSpecialization):
        return craft_type
    try:
        return CraftSpecialization((craft_type or "").strip().lower())
    except ValueError:
        return None


def _to_recommendation(tool: CatalogTool, craft: CraftSpecialization) -> ToolRecommendation:
    return ToolRecommendation(
        tool_name=tool.name,
        category=tool.category,
        reason=tool.reason,
        priority=tool.priority,
        craft_type=craft,
        estimated_cost=tool.estimated_cost,
        alternatives=list(tool.alternatives),
    )


def sort_by_priority(recommendations: List[ToolRecommendation]) -> List[ToolRecommendation]:
    """Stable sort, highest priority first."""
    return sorted(recommendations, key=lambda r: PRIORITY_WEIGHTS[r.priority], reverse=True)


def recommend_tools(
    craft_type: Union[str, CraftSpecialization],
    skill_level: SkillLevel,
    owned_tool_names: Optional[Iterable[str]] = None,
    catalog: Optional[ToolCatalog] = None,
) -> List[ToolRecommendation]:
    """
    Recommend catalog tools the user does not own.

    Args:
        craft_type: Craft to recommend for (unknown crafts yield no results)
        skill_level: User's skill level; only tools suitable for it are kept
        owned_tool_names: Tools the user already has, matched case-insensitively
        catalog: Catalog override (defaults to the bundled catalog)

    Returns:
        Recommendations sorted by priority descending
    """
    catalog = TOOL_CATALOG if catalog is None else catalog

    craft = _to_craft(craft_type)
    if craft is None:
        logger.debug(f"No tool catalog for unknown craft '{craft_type}'")
        return []

    owned = {name.strip().casefold() for name in owned_tool_names or [] if name and name.strip()}

    recommendations = [
        _to_recommendation(tool, craft)
        for tool in catalog.get(craft, ())
        if tool.name.strip().casefold() not in owned and skill_level in tool.skill_levels
    ]

    return sort_by_priority(recommendations)


def recommend_tools_for_user(
    user_context: UserContext,
    limit: Optional[int] = None,
    catalog: Optional[ToolCatalog] = None,
) -> List[ToolRecommendation]:
    """
    Recommend tools across all of a user's specializations.

    Falls back to the general catalog when the user lists no specialization.
    A tool appearing under several crafts is recommended once, for the first
    craft that yields it.
    """
    limit = limit or settings.TOOL_RECOMMENDATIONS_MAX
    crafts = user_context.craft_specializations or [CraftSpecialization.GENERAL.value]

    seen = set()
    combined = []
    for craft in crafts:
        for rec in recommend_tools(craft, user_context.skill_level, user_context.owned_tools, catalog):
            key = rec.tool_name.casefold()
            if key in seen:
                continue
            seen.add(key)
            combined.append(rec)

    recommendations = sort_by_priority(combined)[:limit]
    logger.debug(f"Recommended {len(recommendations)} tools for crafts {crafts}")
    return recommendations

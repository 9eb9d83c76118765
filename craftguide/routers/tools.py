"""Tool recommendation API endpoint."""
from typing import Optional

from fastapi import APIRouter, Query

from craftguide.schemas.guidance import CraftSpecialization, SkillLevel, ToolRecommendation
from craftguide.services.recommendation import recommend_tools

router = APIRouter(prefix="/api/tools", tags=["tools"])


@router.get("/recommendations", response_model=list[ToolRecommendation])
async def tool_recommendations(
    craft_type: str = Query(
        CraftSpecialization.GENERAL.value,
        description="Craft to recommend for (unknown crafts yield no tools)",
    ),
    skill_level: SkillLevel = Query(SkillLevel.NOVICE, description="User's skill level"),
    owned: Optional[list[str]] = Query(None, description="Tools already owned"),
):
    """Catalog tools for a craft and skill level, excluding owned tools."""
    return recommend_tools(craft_type, skill_level, owned or [])

"""Pydantic schemas."""
from craftguide.schemas.knowledge import (
    ArticleCategory,
    ArticleMetadata,
    Difficulty,
    KnowledgeArticle,
    KnowledgeStats,
    RelevanceTier,
    SearchFilters,
    SearchQuery,
    SearchResult,
)
from craftguide.schemas.guidance import (
    ContentStatus,
    CraftSpecialization,
    EnrichedQuery,
    GuidanceRequest,
    GuidanceResponse,
    Priority,
    PromptContext,
    SkillLevel,
    ToolCategory,
    ToolRecommendation,
    UserContext,
)

__all__ = [
    "ArticleCategory",
    "ArticleMetadata",
    "Difficulty",
    "KnowledgeArticle",
    "KnowledgeStats",
    "RelevanceTier",
    "SearchFilters",
    "SearchQuery",
    "SearchResult",
    "ContentStatus",
    "CraftSpecialization",
    "EnrichedQuery",
    "GuidanceRequest",
    "GuidanceResponse",
    "Priority",
    "PromptContext",
    "SkillLevel",
    "ToolCategory",
    "ToolRecommendation",
    "UserContext",
]

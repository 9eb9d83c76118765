"""Knowledge article and search Pydantic schemas."""
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from craftguide.settings import settings


class ArticleCategory(str, Enum):
    """Closed set of knowledge article categories."""
    TECHNIQUES = "techniques"
    MATERIALS = "materials"
    TOOLS = "tools"
    SAFETY = "safety"
    PROJECTS = "projects"
    TROUBLESHOOTING = "troubleshooting"
    FINISHING = "finishing"
    PLANNING = "planning"
    WORKSHOP = "workshop"


class Difficulty(str, Enum):
    """Article difficulty levels."""
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    EXPERT = "expert"


class RelevanceTier(str, Enum):
    """Coarse display bucket derived from a relevance score."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


def normalize_keywords(values: Optional[list[str]]) -> list[str]:
    """Lowercase, trim and de-duplicate keywords, keeping first-seen order."""
    normalized = []
    for value in values or []:
        keyword = value.strip().lower()
        if keyword and keyword not in normalized:
            normalized.append(keyword)
    return normalized


class ArticleMetadata(BaseModel):
    """Curation metadata. Mutated by collaborators, never by the ranker."""
    author: str
    created_at: datetime
    updated_at: datetime
    view_count: int = Field(0, ge=0)
    rating: float = Field(0.0, ge=0.0, le=5.0)
    source: str = ""

    class Config:
        frozen = True


class KnowledgeArticle(BaseModel):
    """A read-only knowledge article."""
    id: str = Field(..., min_length=1)
    title: str
    content: str
    category: ArticleCategory
    craft_types: list[str] = Field(..., description="Craft-domain tags, lowercase")
    difficulty: Difficulty
    tags: list[str] = Field(..., description="Free-form keywords, lowercase")
    metadata: ArticleMetadata

    class Config:
        frozen = True
        from_attributes = True

    @field_validator("craft_types", "tags")
    @classmethod
    def validate_keyword_set(cls, v: list[str]) -> list[str]:
        """Keyword sets are non-empty and lowercase."""
        normalized = normalize_keywords(v)
        if not normalized:
            raise ValueError("must contain at least one non-empty value")
        return normalized


class SearchFilters(BaseModel):
    """Optional filter axes. An absent or empty axis is unconstrained."""
    craft_types: Optional[list[str]] = None
    difficulties: Optional[list[Difficulty]] = None
    categories: Optional[list[ArticleCategory]] = None

    @field_validator("craft_types")
    @classmethod
    def validate_craft_types(cls, v: Optional[list[str]]) -> Optional[list[str]]:
        if v is None:
            return None
        return normalize_keywords(v) or None

    def is_unconstrained(self) -> bool:
        """True when no axis restricts the scan."""
        return not (self.craft_types or self.difficulties or self.categories)


class SearchQuery(BaseModel):
    """Ranker input. Malformed limits and thresholds are rejected, not clamped."""
    text: str = ""
    filters: SearchFilters = Field(default_factory=SearchFilters)
    limit: int = Field(default_factory=lambda: settings.SEARCH_DEFAULT_LIMIT, gt=0)
    min_score: float = Field(default_factory=lambda: settings.SEARCH_MIN_SCORE, ge=0.0, le=1.0)


class SearchResult(BaseModel):
    """A ranked article with its score and relevance tier."""
    article: KnowledgeArticle
    score: float = Field(..., ge=0.0, le=1.0)
    relevance_tier: RelevanceTier


class KnowledgeStats(BaseModel):
    """Corpus summary."""
    total_articles: int = 0
    categories: list[str] = Field(default_factory=list)
    craft_types: list[str] = Field(default_factory=list)
    difficulties: list[str] = Field(default_factory=list)
    average_rating: float = 0.0
    total_views: int = 0

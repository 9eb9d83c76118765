"""User context, guidance and tool recommendation Pydantic schemas."""
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from craftguide.schemas.knowledge import KnowledgeArticle, SearchResult, normalize_keywords


class CraftSpecialization(str, Enum):
    """Crafts with an entry in the tool recommendation catalog."""
    WOODWORKING = "woodworking"
    METALWORKING = "metalworking"
    LEATHERCRAFT = "leathercraft"
    POTTERY = "pottery"
    WEAVING = "weaving"
    BLACKSMITHING = "blacksmithing"
    BUSHCRAFT = "bushcraft"
    STONEMASONRY = "stonemasonry"
    GLASSBLOWING = "glassblowing"
    JEWELRY = "jewelry"
    GENERAL = "general"


class SkillLevel(str, Enum):
    """Ordered craftsperson skill levels, lowest first."""
    NOVICE = "novice"
    APPRENTICE = "apprentice"
    JOURNEYMAN = "journeyman"
    CRAFTSMAN = "craftsman"
    MASTER = "master"


class ToolCategory(str, Enum):
    """Tool inventory categories."""
    HAND_TOOLS = "hand-tools"
    POWER_TOOLS = "power-tools"
    MEASURING = "measuring"
    SAFETY = "safety"
    FINISHING = "finishing"
    SPECIALIZED = "specialized"


class Priority(str, Enum):
    """Recommendation priority."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ContentStatus(str, Enum):
    """Whether guidance prose came back from the generation collaborator."""
    GENERATED = "generated"
    UNAVAILABLE = "unavailable"


def dedupe_tool_names(values: Optional[list[str]]) -> list[str]:
    """Trim tool names and drop case-insensitive duplicates, keeping first spelling."""
    seen = set()
    names = []
    for value in values or []:
        name = value.strip()
        key = name.casefold()
        if name and key not in seen:
            seen.add(key)
            names.append(name)
    return names


class UserContext(BaseModel):
    """Profile facts supplied by the user profile store."""
    craft_specializations: list[str] = Field(default_factory=list)
    skill_level: SkillLevel = SkillLevel.NOVICE
    owned_tools: list[str] = Field(default_factory=list)
    missing_tools: list[str] = Field(default_factory=list)
    bio: Optional[str] = None

    @field_validator("craft_specializations", mode="before")
    @classmethod
    def validate_specializations(cls, v):
        return normalize_keywords(v)

    @field_validator("owned_tools", "missing_tools", mode="before")
    @classmethod
    def validate_tools(cls, v):
        return dedupe_tool_names(v)


class EnrichedQuery(BaseModel):
    """Raw query text merged with user state."""
    original_text: str
    augmented_text: str
    derived_craft_filter: Optional[list[str]] = None


class PromptContext(BaseModel):
    """Everything handed to the generation collaborator."""
    augmented_text: str
    articles: list[KnowledgeArticle] = Field(default_factory=list)
    craft_specializations: list[str] = Field(default_factory=list)
    skill_level: SkillLevel = SkillLevel.NOVICE
    bio: Optional[str] = None


class ToolRecommendation(BaseModel):
    """A catalog tool recommended for a craft and skill level."""
    tool_name: str
    category: ToolCategory
    reason: str
    priority: Priority
    craft_type: CraftSpecialization
    estimated_cost: Optional[float] = None
    alternatives: list[str] = Field(default_factory=list)


class GuidanceResponse(BaseModel):
    """Structured, explainable guidance for one query."""
    query_id: str
    content: str
    content_status: ContentStatus = ContentStatus.GENERATED
    confidence: int = Field(..., ge=0, le=100)
    cited_knowledge: list[SearchResult] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)
    follow_up_questions: list[str] = Field(default_factory=list)
    tool_recommendations: list[ToolRecommendation] = Field(default_factory=list)
    processing_time_ms: int = Field(0, ge=0)
    degraded: bool = False


# Request Schemas
class GuidanceRequest(BaseModel):
    """Schema for a guidance request."""
    text: str = Field(..., max_length=4000, description="Free-text question")
    user_context: UserContext = Field(default_factory=UserContext)
    include_tool_recommendations: bool = False

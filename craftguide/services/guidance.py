"""Guidance composition: enrich, rank, generate, assemble.

The composer never raises for collaborator failures. A knowledge store outage
yields an uncited degraded response; a generation outage keeps the citations
but flags the content as unavailable. Both carry a fixed low confidence.
"""
import logging
import time
from decimal import ROUND_HALF_UP, Decimal
from typing import List, Optional
from uuid import uuid4

from craftguide.exceptions import InvalidQueryError
from craftguide.schemas.guidance import (
    ContentStatus,
    CraftSpecialization,
    GuidanceResponse,
    PromptContext,
    UserContext,
)
from craftguide.schemas.knowledge import (
    ArticleCategory,
    SearchFilters,
    SearchQuery,
    SearchResult,
    normalize_keywords,
)
from craftguide.services.enrichment import enrich_query
from craftguide.services.generation import GenerationService
from craftguide.services.ranker import RelevanceRanker
from craftguide.services.recommendation import recommend_tools_for_user
from craftguide.services.tool_catalog import TOOL_CATALOG, ToolCatalog
from craftguide.settings import settings

logger = logging.getLogger(__name__)

UNAVAILABLE_CONTENT = (
    "Guidance is temporarily unavailable. "
    "Any cited knowledge articles below may still help."
)

SAFETY_FOLLOW_UP = "What safety precautions apply to {category} in {craft}?"

FOLLOW_UP_TEMPLATES = (
    SAFETY_FOLLOW_UP,
    "Which tools are essential for {category} in {craft}?",
    "What common mistakes should I avoid with {category} in {craft}?",
    "What beginner project would help me practice {category} in {craft}?",
)

GENERIC_FOLLOW_UPS = (
    "What tools do you currently have available?",
    "What's your experience level with this technique?",
    "Are you working on this as part of a larger project?",
)

# Query templates for the convenience flows
TECHNIQUE_QUERY = "How do I perform {technique} in {craft_type}?"
TROUBLESHOOT_QUERY = "I'm having this problem with {craft_type}: {problem}. How can I fix it?"
PROJECT_SUGGESTIONS_QUERY = "Suggest craft projects suitable for my skill level and interests"
ANALYZE_POST_QUERY = "Analyze this {craft_type} project and provide feedback: {description}"
PROJECT_TOOLS_QUERY = "What tools do I need for this {craft_type} project: {description}"
TECHNIQUE_TOP_K = 3
TROUBLESHOOT_TOP_K = 3
ANALYZE_POST_TOP_K = 4
PROJECT_TOOLS_TOP_K = 3


def score_to_percent(score: float) -> int:
    """Score in [0, 1] as a whole percentage, halves rounded up."""
    return int((Decimal(str(score)) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def compute_confidence(
    results: List[SearchResult],
    no_results_confidence: int,
    corroboration_step: int,
    corroboration_cap: int,
) -> int:
    """
    Confidence from the ranked set.

    The top score as a percentage, plus a bonus per corroborating source,
    clamped to [0, 100]. With no results the fixed baseline is used.
    """
    if not results:
        return max(0, min(no_results_confidence, 100))

    base = score_to_percent(results[0].score)
    bonus = min(corroboration_cap, (len(results) - 1) * corroboration_step)
    return max(0, min(base + bonus, 100))


def derive_suggestions(original_text: str, results: List[SearchResult], cap: int) -> List[str]:
    """Tags of cited articles not already present in the query, first-seen order."""
    text = original_text.lower()
    suggestions = []
    for result in results:
        for tag in result.article.tags:
            if tag in text or tag in suggestions:
                continue
            suggestions.append(tag)
            if len(suggestions) >= cap:
                return suggestions
    return suggestions


def derive_follow_ups(
    results: List[SearchResult],
    craft_filter: Optional[List[str]],
    cap: int,
) -> List[str]:
    """
    Follow-up questions for the top citation's category and the craft filter.

    Uses the generic set when nothing was cited. The safety question is
    skipped when the top article is itself about safety.
    """
    if not results:
        return list(GENERIC_FOLLOW_UPS[:cap])

    category = results[0].article.category
    craft = craft_filter[0] if craft_filter else CraftSpecialization.GENERAL.value

    templates = [
        t for t in FOLLOW_UP_TEMPLATES
        if not (t == SAFETY_FOLLOW_UP and category == ArticleCategory.SAFETY)
    ]
    return [t.format(category=category.value, craft=craft) for t in templates[:cap]]


class GuidanceComposer:
    """
    Orchestrates a guidance request end to end.

    Collaborators are injected; tunables default to settings.
    """

    def __init__(
        self,
        ranker: RelevanceRanker,
        generator: GenerationService,
        catalog: Optional[ToolCatalog] = None,
        top_k: Optional[int] = None,
        min_score: Optional[float] = None,
        suggestion_cap: Optional[int] = None,
        follow_up_cap: Optional[int] = None,
        no_results_confidence: Optional[int] = None,
        degraded_confidence: Optional[int] = None,
        corroboration_step: Optional[int] = None,
        corroboration_cap: Optional[int] = None,
    ):
        self.ranker = ranker
        self.generator = generator
        self.catalog = TOOL_CATALOG if catalog is None else catalog
        self.top_k = top_k if top_k is not None else settings.GUIDANCE_TOP_K
        self.min_score = min_score if min_score is not None else settings.GUIDANCE_MIN_SCORE
        self.suggestion_cap = suggestion_cap if suggestion_cap is not None else settings.GUIDANCE_SUGGESTION_CAP
        self.follow_up_cap = follow_up_cap if follow_up_cap is not None else settings.GUIDANCE_FOLLOW_UP_CAP
        self.no_results_confidence = (
            no_results_confidence if no_results_confidence is not None
            else settings.GUIDANCE_NO_RESULTS_CONFIDENCE
        )
        self.degraded_confidence = (
            degraded_confidence if degraded_confidence is not None
            else settings.GUIDANCE_DEGRADED_CONFIDENCE
        )
        self.corroboration_step = (
            corroboration_step if corroboration_step is not None
            else settings.GUIDANCE_CORROBORATION_STEP
        )
        self.corroboration_cap = (
            corroboration_cap if corroboration_cap is not None
            else settings.GUIDANCE_CORROBORATION_CAP
        )

    def compose(
        self,
        text: Optional[str],
        user_context: Optional[UserContext] = None,
        include_tool_recommendations: bool = False,
        craft_filter: Optional[List[str]] = None,
        top_k: Optional[int] = None,
        include_follow_ups: bool = True,
    ) -> GuidanceResponse:
        """
        Compose a guidance response for a question.

        Args:
            text: Raw question
            user_context: Profile facts (empty context if None)
            include_tool_recommendations: Attach catalog tool recommendations
            craft_filter: Craft filter override (defaults to the user's specializations)
            top_k: Citation cap override
            include_follow_ups: Derive follow-up questions (empty list when False)

        Returns:
            GuidanceResponse, degraded rather than raising on collaborator failure

        Raises:
            InvalidQueryError: If the text is blank and there is no craft filter
        """
        user_context = user_context or UserContext()
        query_id = str(uuid4())
        start = time.perf_counter()

        enriched = enrich_query(text, user_context)
        craft_filter = normalize_keywords(craft_filter) or enriched.derived_craft_filter

        if not enriched.original_text.strip() and not craft_filter:
            raise InvalidQueryError("Query text is empty and no craft filter applies")

        search_query = SearchQuery(
            text=enriched.original_text,
            filters=SearchFilters(craft_types=craft_filter),
            limit=top_k or self.top_k,
            min_score=self.min_score,
        )

        degraded = False
        try:
            results = self.ranker.search(search_query)
        except Exception:
            # Any store failure degrades the response; generation is skipped
            logger.error(f"Knowledge store unavailable for query {query_id}", exc_info=True)
            results = []
            degraded = True

        content = UNAVAILABLE_CONTENT
        content_status = ContentStatus.UNAVAILABLE
        if not degraded:
            prompt_context = PromptContext(
                augmented_text=enriched.augmented_text,
                articles=[r.article for r in results],
                craft_specializations=user_context.craft_specializations,
                skill_level=user_context.skill_level,
                bio=user_context.bio,
            )
            try:
                content = self.generator.generate(prompt_context)
                content_status = ContentStatus.GENERATED
            except Exception:
                # Any generator failure is recoverable; citations are still returned
                logger.error(f"Generation failed for query {query_id}", exc_info=True)
                degraded = True

        processing_time_ms = int((time.perf_counter() - start) * 1000)

        if degraded:
            confidence = self.degraded_confidence
        else:
            confidence = compute_confidence(
                results,
                self.no_results_confidence,
                self.corroboration_step,
                self.corroboration_cap,
            )

        follow_up_questions = []
        if include_follow_ups:
            follow_up_questions = derive_follow_ups(results, craft_filter, self.follow_up_cap)

        tool_recommendations = []
        if include_tool_recommendations:
            tool_recommendations = recommend_tools_for_user(user_context, catalog=self.catalog)

        response = GuidanceResponse(
            query_id=query_id,
            content=content,
            content_status=content_status,
            confidence=confidence,
            cited_knowledge=results,
            suggestions=derive_suggestions(enriched.original_text, results, self.suggestion_cap),
            follow_up_questions=follow_up_questions,
            tool_recommendations=tool_recommendations,
            processing_time_ms=processing_time_ms,
            degraded=degraded,
        )

        logger.info(
            f"Composed guidance {query_id}: {len(results)} citations, "
            f"confidence={confidence}, degraded={degraded}, {processing_time_ms}ms",
            extra={"extra_fields": {
                "query_id": query_id,
                "citations": [r.article.id for r in results],
                "confidence": confidence,
                "degraded": degraded,
                "duration_ms": processing_time_ms,
            }},
        )
        return response

    def technique_guidance(
        self,
        technique: str,
        craft_type: str,
        user_context: Optional[UserContext] = None,
    ) -> GuidanceResponse:
        """Step-by-step guidance for a technique within one craft."""
        craft_type = craft_type.strip().lower()
        text = TECHNIQUE_QUERY.format(technique=technique, craft_type=craft_type)
        return self.compose(text, user_context, craft_filter=[craft_type], top_k=TECHNIQUE_TOP_K)

    def troubleshoot(
        self,
        problem: str,
        craft_type: str,
        user_context: Optional[UserContext] = None,
    ) -> GuidanceResponse:
        """Causes and fixes for a problem within one craft."""
        craft_type = craft_type.strip().lower()
        text = TROUBLESHOOT_QUERY.format(craft_type=craft_type, problem=problem)
        return self.compose(text, user_context, craft_filter=[craft_type], top_k=TROUBLESHOOT_TOP_K)

    def project_suggestions(self, user_context: Optional[UserContext] = None) -> GuidanceResponse:
        """Project ideas for the user's crafts and skill level."""
        return self.compose(PROJECT_SUGGESTIONS_QUERY, user_context)

    def analyze_post(
        self,
        description: str,
        craft_type: str,
        user_context: Optional[UserContext] = None,
    ) -> GuidanceResponse:
        """Feedback on a finished or in-progress project post."""
        craft_type = craft_type.strip().lower()
        text = ANALYZE_POST_QUERY.format(craft_type=craft_type, description=description)
        return self.compose(text, user_context, craft_filter=[craft_type], top_k=ANALYZE_POST_TOP_K)

    def project_tool_guidance(
        self,
        description: str,
        craft_type: str,
        user_context: Optional[UserContext] = None,
    ) -> GuidanceResponse:
        """Tools needed for a described project. No follow-up questions."""
        craft_type = craft_type.strip().lower()
        text = PROJECT_TOOLS_QUERY.format(craft_type=craft_type, description=description)
        return self.compose(
            text,
            user_context,
            craft_filter=[craft_type],
            top_k=PROJECT_TOOLS_TOP_K,
            include_follow_ups=False,
        )


def build_guidance_composer(ranker: RelevanceRanker, generator: GenerationService) -> GuidanceComposer:
    """Composer tuned from settings with the bundled tool catalog."""
    return GuidanceComposer(ranker=ranker, generator=generator, catalog=TOOL_CATALOG)

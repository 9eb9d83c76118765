"""Relevance ranking over a knowledge store."""
import logging
from typing import List, Optional

from craftguide.schemas.knowledge import (
    KnowledgeArticle,
    RelevanceTier,
    SearchFilters,
    SearchQuery,
    SearchResult,
)
from craftguide.services.knowledge_store import KnowledgeStore
from craftguide.services.scoring import KeywordRelevanceScorer, RelevanceScorer

logger = logging.getLogger(__name__)

HIGH_RELEVANCE_THRESHOLD = 0.7
MEDIUM_RELEVANCE_THRESHOLD = 0.4


def relevance_tier(score: float) -> RelevanceTier:
    """Bucket a score: high above 0.7, medium above 0.4, otherwise low."""
    if score > HIGH_RELEVANCE_THRESHOLD:
        return RelevanceTier.HIGH
    if score > MEDIUM_RELEVANCE_THRESHOLD:
        return RelevanceTier.MEDIUM
    return RelevanceTier.LOW


class RelevanceRanker:
    """
    Filter, score, threshold, sort and truncate.

    Scoring is delegated to a RelevanceScorer so an embedding-based scorer can
    replace the keyword scorer without touching the ranking contract.
    """

    def __init__(self, store: KnowledgeStore, scorer: Optional[RelevanceScorer] = None):
        self.store = store
        self.scorer = scorer or KeywordRelevanceScorer()

    def search(self, query: SearchQuery) -> List[SearchResult]:
        """
        Rank store articles against a query.

        Args:
            query: Validated search query

        Returns:
            Results with score >= query.min_score, sorted by score descending
            then article id ascending, at most query.limit long
        """
        if not query.text.strip() and query.filters.is_unconstrained():
            # Listing everything goes through browse(), not an empty ranker call
            return []

        candidates = list(self.store.scan(query.filters))

        results = []
        for article in candidates:
            score = max(0.0, min(float(self.scorer.score(query.text, article)), 1.0))
            if score < query.min_score:
                continue
            results.append(
                SearchResult(article=article, score=score, relevance_tier=relevance_tier(score))
            )

        results.sort(key=lambda r: (-r.score, r.article.id))
        ranked = results[:query.limit]

        logger.debug(
            f"Ranked {len(ranked)} of {len(candidates)} candidates "
            f"(limit={query.limit}, min_score={query.min_score})"
        )
        return ranked

    def browse(self, filters: Optional[SearchFilters] = None, limit: int = 50) -> List[KnowledgeArticle]:
        """List articles matching filters, ordered by id, without scoring."""
        if limit < 1:
            raise ValueError("limit must be a positive integer")
        articles = sorted(self.store.scan(filters or SearchFilters()), key=lambda a: a.id)
        return articles[:limit]

    def similar(self, article_id: str, limit: int = 5) -> List[SearchResult]:
        """
        Find articles related to a given article.

        Uses the article's title and tags as the query, restricted to its craft
        types. The article itself is never returned.

        Returns:
            Ranked results, or an empty list for an unknown id
        """
        target = self.store.get(article_id)
        if target is None:
            return []

        query = SearchQuery(
            text=target.title + " " + " ".join(target.tags),
            filters=SearchFilters(craft_types=list(target.craft_types)),
            limit=limit + 1,
        )
        results = [r for r in self.search(query) if r.article.id != article_id]
        return results[:limit]

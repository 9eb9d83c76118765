"""Knowledge search and lookup API endpoints."""
import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from craftguide.dependencies import get_knowledge_store, get_ranker
from craftguide.schemas.knowledge import KnowledgeArticle, KnowledgeStats, SearchQuery, SearchResult
from craftguide.services.knowledge_store import KnowledgeStore
from craftguide.services.ranker import RelevanceRanker

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/knowledge", tags=["knowledge"])


@router.post("/search", response_model=list[SearchResult])
def search_knowledge(
    query: SearchQuery,
    ranker: RelevanceRanker = Depends(get_ranker),
):
    """Rank knowledge articles against a query with optional filters."""
    results = ranker.search(query)
    logger.info(f"Knowledge search returned {len(results)} results")
    return results


@router.get("/stats", response_model=KnowledgeStats)
def knowledge_stats(store: KnowledgeStore = Depends(get_knowledge_store)):
    """Corpus summary."""
    return store.stats()


@router.get("/{article_id}", response_model=KnowledgeArticle)
def get_article(article_id: str, store: KnowledgeStore = Depends(get_knowledge_store)):
    """Get one knowledge article."""
    article = store.get(article_id)
    if not article:
        raise HTTPException(status_code=404, detail="Knowledge article not found")
    return article


@router.get("/{article_id}/similar", response_model=list[SearchResult])
def similar_articles(
    article_id: str,
    limit: int = Query(5, ge=1, le=20),
    store: KnowledgeStore = Depends(get_knowledge_store),
    ranker: RelevanceRanker = Depends(get_ranker),
):
    """Articles related to the given article, excluding itself."""
    if not store.get(article_id):
        raise HTTPException(status_code=404, detail="Knowledge article not found")
    return ranker.similar(article_id, limit=limit)

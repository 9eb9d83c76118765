"""FastAPI dependencies for engine components built at startup."""
from fastapi import HTTPException, Request, status

from craftguide.services.guidance import GuidanceComposer
from craftguide.services.knowledge_store import KnowledgeStore
from craftguide.services.ranker import RelevanceRanker


def _get_component(request: Request, name: str):
    component = getattr(request.app.state, name, None)
    if component is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Guidance engine is not initialized"
        )
    return component


def get_knowledge_store(request: Request) -> KnowledgeStore:
    """Knowledge store shared across requests."""
    return _get_component(request, "knowledge_store")


def get_ranker(request: Request) -> RelevanceRanker:
    """Relevance ranker shared across requests."""
    return _get_component(request, "ranker")


def get_composer(request: Request) -> GuidanceComposer:
    """Guidance composer shared across requests."""
    return _get_component(request, "composer")

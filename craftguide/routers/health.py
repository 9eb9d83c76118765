"""Health check endpoints."""
from fastapi import APIRouter, Request, Response, status

router = APIRouter(tags=["health"])


@router.get("/health")
async def health():
    """
    Basic health check - process is alive.

    Returns 200 if the application is running.
    """
    return {"status": "healthy"}


@router.get("/ready")
async def ready(request: Request, response: Response):
    """
    Readiness check - verifies the knowledge store can be read.

    Returns 200 with corpus stats if ready, 503 if not.
    """
    store = getattr(request.app.state, "knowledge_store", None)
    if store is None:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return {
            "status": "not_ready",
            "knowledge_store": "not_initialized",
        }

    try:
        stats = store.stats()
    except Exception as e:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return {
            "status": "not_ready",
            "knowledge_store": "unavailable",
            "error": str(e),
            "message": "Knowledge store could not be read"
        }

    return {
        "status": "ready",
        "knowledge_store": "available",
        "total_articles": stats.total_articles,
    }

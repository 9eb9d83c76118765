"""FastAPI application entrypoint."""
from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from craftguide import __version__
from craftguide.exceptions import InvalidQueryError, KnowledgeStoreUnavailableError
from craftguide.middleware import RequestLoggingMiddleware, setup_logging
from craftguide.routers import guidance, health, knowledge, tools
from craftguide.services.generation import get_generation_service
from craftguide.services.guidance import build_guidance_composer
from craftguide.services.knowledge_store import get_knowledge_store
from craftguide.services.ranker import RelevanceRanker
from craftguide.services.scoring import get_relevance_scorer
from craftguide.settings import settings
from craftguide.startup import run_startup_validation

# Configure logging before anything else
setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan with startup validation.

    Builds the knowledge store, ranker, generator and composer once and
    shares them through app.state. Fails fast if configuration is invalid.
    """
    logger.info(f"Starting application in {settings.ENV} environment")

    try:
        store = get_knowledge_store()
        run_startup_validation(store)

        ranker = RelevanceRanker(store, get_relevance_scorer())
        generator = get_generation_service()

        app.state.knowledge_store = store
        app.state.ranker = ranker
        app.state.composer = build_guidance_composer(ranker, generator)
        logger.info(f"Guidance engine ready (generation={settings.GENERATION_PROVIDER})")

    except Exception as e:
        logger.error(f"Startup validation failed: {e}")
        logger.error("Application will not start")
        raise

    yield

    logger.info("Shutting down application")


app = FastAPI(
    title="CraftGuide",
    description="Knowledge retrieval and contextual guidance for craftspeople",
    version=__version__,
    lifespan=lifespan
)

app.add_middleware(RequestLoggingMiddleware)


@app.exception_handler(InvalidQueryError)
async def invalid_query_handler(request: Request, exc: InvalidQueryError):
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": str(exc)},
    )


@app.exception_handler(KnowledgeStoreUnavailableError)
async def store_unavailable_handler(request: Request, exc: KnowledgeStoreUnavailableError):
    logger.error(f"Knowledge store unavailable: {exc}")
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "Knowledge store unavailable"},
    )


app.include_router(health.router)
app.include_router(knowledge.router)
app.include_router(guidance.router)
app.include_router(tools.router)

"""Pytest configuration and fixtures."""
import os

# Configure the engine for tests before any craftguide import reads settings
os.environ.setdefault("GENERATION_PROVIDER", "local_stub")
os.environ.setdefault("KNOWLEDGE_STORE_BACKEND", "memory")
os.environ.setdefault("LOG_FORMAT", "text")

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from craftguide.db import Base, create_db_engine, create_session_factory
from craftguide.exceptions import GenerationUnavailableError
from craftguide.main import app
from craftguide.schemas.knowledge import KnowledgeArticle
from craftguide.services.generation import LocalStubGenerationService
from craftguide.services.guidance import GuidanceComposer
from craftguide.services.knowledge_store import InMemoryKnowledgeStore
from craftguide.services.ranker import RelevanceRanker


def make_article(
    id: str,
    title: str,
    content: str = "",
    category: str = "techniques",
    craft_types=("woodworking",),
    difficulty: str = "beginner",
    tags=("general",),
    rating: float = 4.5,
    view_count: int = 100,
) -> KnowledgeArticle:
    """Build a valid article with sensible metadata defaults."""
    return KnowledgeArticle(
        id=id,
        title=title,
        content=content or f"About {title.lower()}.",
        category=category,
        craft_types=list(craft_types),
        difficulty=difficulty,
        tags=list(tags),
        metadata={
            "author": "Test Author",
            "created_at": datetime(2024, 1, 1, tzinfo=timezone.utc),
            "updated_at": datetime(2024, 6, 1, tzinfo=timezone.utc),
            "view_count": view_count,
            "rating": rating,
            "source": "Test Guild",
        },
    )


@pytest.fixture
def article_factory():
    """Factory for valid articles."""
    return make_article


@pytest.fixture
def sample_articles():
    """Small mixed-craft corpus."""
    return [
        make_article(
            "tools_002",
            "Sharpening Chisels and Plane Irons",
            content="Flatten the back, hone the bevel on finer stones and strop off the burr.",
            category="tools",
            tags=["tools", "sharpening", "maintenance"],
        ),
        make_article(
            "wood_001",
            "Mortise and Tenon Joinery Basics",
            content="Mark carefully, cut the tenon first and chop the mortise with a sharp chisel.",
            category="techniques",
            difficulty="intermediate",
            tags=["joinery", "furniture", "hand-tools"],
        ),
        make_article(
            "wood_005",
            "Outdoor Wood Finishes",
            content="Spar varnish and penetrating oils protect outdoor projects from weather.",
            category="finishing",
            difficulty="intermediate",
            tags=["outdoor", "finishing", "maintenance"],
        ),
        make_article(
            "pottery_002",
            "Pottery Wheel Basics: Centering and Pulling",
            content="Brace your elbows, keep the clay wet and cone it up before opening.",
            craft_types=["pottery", "ceramics"],
            difficulty="intermediate",
            tags=["wheel-throwing", "centering", "pottery"],
        ),
        make_article(
            "safety_001",
            "Workshop Safety: Essential Guidelines",
            content="Wear eye and hearing protection and keep an extinguisher nearby.",
            category="safety",
            craft_types=["general", "woodworking", "pottery"],
            tags=["safety", "ppe", "workshop"],
            rating=5.0,
        ),
    ]


@pytest.fixture
def store(sample_articles):
    """In-memory store over the sample corpus."""
    return InMemoryKnowledgeStore(sample_articles)


@pytest.fixture
def ranker(store):
    """Keyword ranker over the sample corpus."""
    return RelevanceRanker(store)


@pytest.fixture
def stub_generator():
    """Deterministic generator."""
    return LocalStubGenerationService()


@pytest.fixture
def failing_generator():
    """Generator that always fails."""
    generator = MagicMock()
    generator.generate.side_effect = GenerationUnavailableError("Request timed out")
    return generator


@pytest.fixture
def composer(ranker, stub_generator):
    """Composer with default tunables and the stub generator."""
    return GuidanceComposer(ranker=ranker, generator=stub_generator)


@pytest.fixture(scope="function")
def session_factory():
    """Fresh in-memory SQLite database with the knowledge table."""
    engine = create_db_engine("sqlite:///:memory:")
    Base.metadata.create_all(bind=engine)
    try:
        yield create_session_factory(engine)
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture(scope="function")
def client():
    """Test client running the app lifespan over the bundled corpus."""
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()

"""Tests for the SQLAlchemy-backed knowledge store."""
from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from craftguide.exceptions import KnowledgeStoreUnavailableError
from craftguide.models import KnowledgeArticleRecord
from craftguide.schemas.knowledge import ArticleCategory, Difficulty, SearchFilters, SearchQuery
from craftguide.services.guidance import GuidanceComposer
from craftguide.services.knowledge_store import SqlKnowledgeStore, seed_articles
from craftguide.services.ranker import RelevanceRanker


@pytest.fixture
def sql_store(session_factory, sample_articles):
    """SQL store seeded with the sample corpus."""
    seed_articles(session_factory, sample_articles)
    return SqlKnowledgeStore(session_factory)


class TestSeedArticles:
    """Test seeding."""

    def test_seed_count(self, session_factory, sample_articles):
        assert seed_articles(session_factory, sample_articles) == len(sample_articles)
        with session_factory() as db:
            assert db.query(KnowledgeArticleRecord).count() == len(sample_articles)

    def test_reseed_replaces(self, session_factory, sample_articles):
        """Seeding twice does not duplicate rows."""
        seed_articles(session_factory, sample_articles)
        seed_articles(session_factory, sample_articles)
        with session_factory() as db:
            assert db.query(KnowledgeArticleRecord).count() == len(sample_articles)


class TestSqlKnowledgeStore:
    """Test the store contract over SQLite."""

    def test_round_trip(self, sql_store, sample_articles):
        """Stored articles come back with their fields intact."""
        original = sample_articles[0]
        loaded = sql_store.get(original.id)
        assert loaded.title == original.title
        assert loaded.tags == original.tags
        assert loaded.category == original.category
        assert loaded.metadata.rating == original.metadata.rating

    def test_get_unknown(self, sql_store):
        assert sql_store.get("missing") is None

    def test_scan_filters(self, sql_store):
        ids = {a.id for a in sql_store.scan(SearchFilters(craft_types=["pottery"]))}
        assert ids == {"pottery_002", "safety_001"}

        ids = {a.id for a in sql_store.scan(SearchFilters(categories=[ArticleCategory.SAFETY]))}
        assert ids == {"safety_001"}

        ids = {a.id for a in sql_store.scan(SearchFilters(difficulties=[Difficulty.INTERMEDIATE]))}
        assert ids == {"wood_001", "wood_005", "pottery_002"}

    def test_stats(self, sql_store, sample_articles):
        assert sql_store.stats().total_articles == len(sample_articles)

    def test_ranker_over_sql_store(self, sql_store):
        """Ranking behaves the same over the SQL store."""
        results = RelevanceRanker(sql_store).search(SearchQuery(text="sharpening chisels"))
        assert results[0].article.id == "tools_002"

    def test_database_error_wrapped(self):
        """SQLAlchemy failures surface as store unavailability."""
        session = MagicMock()
        session.__enter__.return_value.query.side_effect = OperationalError("SELECT", {}, Exception("down"))
        store = SqlKnowledgeStore(MagicMock(return_value=session))

        with pytest.raises(KnowledgeStoreUnavailableError):
            store.scan()


class TestInvalidRows:
    """Rows that no longer validate as articles."""

    @pytest.fixture
    def corrupt_store(self, session_factory, sample_articles):
        seed_articles(session_factory, sample_articles)
        now = datetime(2024, 1, 1, tzinfo=timezone.utc)
        with session_factory() as db:
            db.add(KnowledgeArticleRecord(
                id="bad_001",
                title="Broken row",
                content="Left behind by a manual edit.",
                category="not-a-category",
                craft_types=["woodworking"],
                difficulty="beginner",
                tags=[],
                author="Unknown",
                created_at=now,
                updated_at=now,
            ))
            db.commit()
        return SqlKnowledgeStore(session_factory)

    def test_scan_wraps_validation_error(self, corrupt_store):
        with pytest.raises(KnowledgeStoreUnavailableError):
            corrupt_store.scan()

    def test_get_wraps_validation_error(self, corrupt_store):
        with pytest.raises(KnowledgeStoreUnavailableError):
            corrupt_store.get("bad_001")

    def test_valid_rows_still_readable(self, corrupt_store):
        assert corrupt_store.get("tools_002").title == "Sharpening Chisels and Plane Irons"

    def test_composer_degrades(self, corrupt_store, stub_generator):
        """A corrupt row degrades guidance instead of failing the request."""
        composer = GuidanceComposer(ranker=RelevanceRanker(corrupt_store), generator=stub_generator)
        response = composer.compose("sharpening chisels")

        assert response.degraded
        assert response.cited_knowledge == []
        assert response.confidence == 20

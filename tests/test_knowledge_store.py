"""Tests for knowledge stores, corpus loading and article validation."""
import json

import pytest
from pydantic import ValidationError

from craftguide.schemas.knowledge import ArticleCategory, Difficulty, SearchFilters
from craftguide.services.knowledge_store import (
    DEFAULT_KNOWLEDGE_BASE_PATH,
    InMemoryKnowledgeStore,
    article_matches,
    compute_stats,
    load_articles,
)


class TestArticleValidation:
    """Test KnowledgeArticle invariants."""

    def test_tags_and_crafts_normalized(self, article_factory):
        """Keywords are lowercased, trimmed and de-duplicated."""
        article = article_factory(
            "a1", "Welding", craft_types=["Metalworking", "metalworking "], tags=["MIG", "mig", " TIG"]
        )
        assert article.craft_types == ["metalworking"]
        assert article.tags == ["mig", "tig"]

    def test_empty_tags_rejected(self, article_factory):
        """An article must carry at least one tag."""
        with pytest.raises(ValidationError):
            article_factory("a1", "No tags", tags=[])

    def test_empty_craft_types_rejected(self, article_factory):
        """An article must carry at least one craft type."""
        with pytest.raises(ValidationError):
            article_factory("a1", "No crafts", craft_types=[" "])

    def test_rating_bounded(self, article_factory):
        """Ratings outside [0, 5] are rejected."""
        with pytest.raises(ValidationError):
            article_factory("a1", "Too good", rating=5.5)

    def test_negative_view_count_rejected(self, article_factory):
        """View counts cannot be negative."""
        with pytest.raises(ValidationError):
            article_factory("a1", "Unseen", view_count=-1)

    def test_unknown_category_rejected(self, article_factory):
        """Categories are a closed set."""
        with pytest.raises(ValidationError):
            article_factory("a1", "Mystery", category="gossip")

    def test_articles_are_frozen(self, article_factory):
        """Articles are read-only."""
        article = article_factory("a1", "Frozen")
        with pytest.raises(ValidationError):
            article.title = "Changed"


class TestArticleMatches:
    """Test filter axis semantics."""

    def test_no_filters_matches(self, article_factory):
        """Absent filters match everything."""
        assert article_matches(article_factory("a1", "Any"), None)
        assert article_matches(article_factory("a1", "Any"), SearchFilters())

    def test_craft_types_intersect(self, article_factory):
        """Craft filter matches on any shared craft."""
        article = article_factory("a1", "Wheel", craft_types=["pottery", "ceramics"])
        assert article_matches(article, SearchFilters(craft_types=["ceramics", "glasswork"]))
        assert not article_matches(article, SearchFilters(craft_types=["woodworking"]))

    def test_empty_axis_is_unconstrained(self, article_factory):
        """An empty list constrains nothing."""
        article = article_factory("a1", "Any")
        filters = SearchFilters(craft_types=[], difficulties=[], categories=[])
        assert filters.is_unconstrained()
        assert article_matches(article, filters)

    def test_difficulty_and_category_membership(self, article_factory):
        """Difficulty and category must both be members when given."""
        article = article_factory("a1", "Finish", category="finishing", difficulty="advanced")
        assert article_matches(
            article,
            SearchFilters(difficulties=[Difficulty.ADVANCED], categories=[ArticleCategory.FINISHING]),
        )
        assert not article_matches(article, SearchFilters(difficulties=[Difficulty.BEGINNER]))
        assert not article_matches(article, SearchFilters(categories=[ArticleCategory.SAFETY]))


class TestInMemoryKnowledgeStore:
    """Test the in-memory store."""

    def test_scan_applies_filters(self, store):
        """Scan returns only matching articles."""
        ids = {a.id for a in store.scan(SearchFilters(craft_types=["pottery"]))}
        assert ids == {"pottery_002", "safety_001"}

    def test_get(self, store):
        """Get by id, None when unknown."""
        assert store.get("wood_001").title == "Mortise and Tenon Joinery Basics"
        assert store.get("missing") is None

    def test_duplicate_ids_rejected(self, article_factory):
        """Ids must be unique."""
        with pytest.raises(ValueError, match="Duplicate"):
            InMemoryKnowledgeStore([article_factory("a1", "One"), article_factory("a1", "Two")])

    def test_stats(self, store, sample_articles):
        """Stats summarize the corpus."""
        stats = store.stats()
        assert stats.total_articles == len(sample_articles)
        assert "pottery" in stats.craft_types
        assert "safety" in stats.categories
        assert stats.total_views == sum(a.metadata.view_count for a in sample_articles)

    def test_empty_stats(self):
        """An empty corpus has zeroed stats."""
        stats = compute_stats([])
        assert stats.total_articles == 0
        assert stats.average_rating == 0.0


class TestLoadArticles:
    """Test JSON corpus loading."""

    def test_bundled_corpus_loads(self):
        """The bundled corpus validates and has unique ids."""
        articles = load_articles()
        ids = [a.id for a in articles]
        assert len(ids) == len(set(ids))
        assert "tools_002" in ids
        assert DEFAULT_KNOWLEDGE_BASE_PATH.exists()

    def test_bundled_tags_lowercase(self):
        """Mixed-case tags in the corpus are normalized."""
        by_id = {a.id: a for a in load_articles()}
        assert "mig" in by_id["metal_002"].tags
        assert "ppe" in by_id["safety_001"].tags

    def test_duplicate_ids_in_file(self, tmp_path, sample_articles):
        """A file with duplicate ids is rejected."""
        item = json.loads(sample_articles[0].model_dump_json())
        path = tmp_path / "kb.json"
        path.write_text(json.dumps([item, item]))

        with pytest.raises(ValueError, match="Duplicate"):
            load_articles(path)

    def test_non_list_rejected(self, tmp_path):
        """The corpus must be a JSON list."""
        path = tmp_path / "kb.json"
        path.write_text(json.dumps({"id": "a1"}))

        with pytest.raises(ValueError, match="JSON list"):
            load_articles(path)

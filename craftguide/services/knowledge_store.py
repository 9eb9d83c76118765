"""Knowledge store implementations with filtered scans."""
import json
import logging
from pathlib import Path
from typing import Iterable, List, Optional, Protocol

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from craftguide.exceptions import KnowledgeStoreUnavailableError
from craftguide.models.knowledge import KnowledgeArticleRecord
from craftguide.schemas.knowledge import KnowledgeArticle, KnowledgeStats, SearchFilters
from craftguide.settings import settings

logger = logging.getLogger(__name__)

DEFAULT_KNOWLEDGE_BASE_PATH = Path(__file__).resolve().parent.parent / "data" / "knowledge_base.json"


class KnowledgeStore(Protocol):
    """Protocol for read-only knowledge stores."""

    def scan(self, filters: Optional[SearchFilters] = None) -> Iterable[KnowledgeArticle]:
        """Return articles matching every constrained filter axis, in no particular order."""
        ...

    def get(self, article_id: str) -> Optional[KnowledgeArticle]:
        """Return one article or None."""
        ...

    def stats(self) -> KnowledgeStats:
        """Summarize the corpus."""
        ...


def article_matches(article: KnowledgeArticle, filters: Optional[SearchFilters]) -> bool:
    """
    Check an article against the filter axes.

    Craft types match on intersection; difficulty and category match on
    membership. An absent axis always matches.
    """
    if filters is None:
        return True

    if filters.craft_types and not set(article.craft_types) & set(filters.craft_types):
        return False
    if filters.difficulties and article.difficulty not in filters.difficulties:
        return False
    if filters.categories and article.category not in filters.categories:
        return False

    return True


def compute_stats(articles: List[KnowledgeArticle]) -> KnowledgeStats:
    """Aggregate corpus statistics."""
    if not articles:
        return KnowledgeStats()

    return KnowledgeStats(
        total_articles=len(articles),
        categories=sorted({a.category.value for a in articles}),
        craft_types=sorted({craft for a in articles for craft in a.craft_types}),
        difficulties=sorted({a.difficulty.value for a in articles}),
        average_rating=round(sum(a.metadata.rating for a in articles) / len(articles), 2),
        total_views=sum(a.metadata.view_count for a in articles),
    )


def load_articles(path: Optional[Path] = None) -> List[KnowledgeArticle]:
    """
    Load and validate a JSON corpus.

    Args:
        path: JSON file holding a list of article objects (bundled corpus if None)

    Returns:
        Validated articles in file order

    Raises:
        ValueError: If the file is not a list or contains duplicate ids
    """
    path = Path(path) if path else DEFAULT_KNOWLEDGE_BASE_PATH

    with open(path, encoding="utf-8") as f:
        raw = json.load(f)

    if not isinstance(raw, list):
        raise ValueError(f"Knowledge base {path} must contain a JSON list of articles")

    articles = [KnowledgeArticle.model_validate(item) for item in raw]

    seen = set()
    for article in articles:
        if article.id in seen:
            raise ValueError(f"Duplicate knowledge article id: {article.id}")
        seen.add(article.id)

    logger.info(f"Loaded {len(articles)} knowledge articles from {path}")
    return articles


class InMemoryKnowledgeStore:
    """Knowledge store over an immutable in-process corpus."""

    def __init__(self, articles: Iterable[KnowledgeArticle]):
        self._articles = tuple(articles)
        self._by_id = {}
        for article in self._articles:
            if article.id in self._by_id:
                raise ValueError(f"Duplicate knowledge article id: {article.id}")
            self._by_id[article.id] = article

    def __len__(self) -> int:
        return len(self._articles)

    def scan(self, filters: Optional[SearchFilters] = None) -> List[KnowledgeArticle]:
        return [a for a in self._articles if article_matches(a, filters)]

    def get(self, article_id: str) -> Optional[KnowledgeArticle]:
        return self._by_id.get(article_id)

    def stats(self) -> KnowledgeStats:
        return compute_stats(list(self._articles))


class SqlKnowledgeStore:
    """
    Knowledge store backed by the knowledge_articles table.

    Category and difficulty are filtered in SQL; craft-type intersection is
    applied after loading because the tags live in a JSON column. Rows that
    fail article validation surface as KnowledgeStoreUnavailableError.
    """

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    def scan(self, filters: Optional[SearchFilters] = None) -> List[KnowledgeArticle]:
        try:
            with self._session_factory() as db:
                query = db.query(KnowledgeArticleRecord)

                if filters and filters.categories:
                    query = query.filter(
                        KnowledgeArticleRecord.category.in_([c.value for c in filters.categories])
                    )
                if filters and filters.difficulties:
                    query = query.filter(
                        KnowledgeArticleRecord.difficulty.in_([d.value for d in filters.difficulties])
                    )

                articles = [record.to_article() for record in query.all()]
        except SQLAlchemyError as e:
            raise KnowledgeStoreUnavailableError(f"Knowledge store scan failed: {e}") from e
        except ValidationError as e:
            raise KnowledgeStoreUnavailableError(f"Knowledge store holds an invalid article: {e}") from e

        return [a for a in articles if article_matches(a, filters)]

    def get(self, article_id: str) -> Optional[KnowledgeArticle]:
        try:
            with self._session_factory() as db:
                record = db.get(KnowledgeArticleRecord, article_id)
                return record.to_article() if record else None
        except SQLAlchemyError as e:
            raise KnowledgeStoreUnavailableError(f"Knowledge store lookup failed: {e}") from e
        except ValidationError as e:
            raise KnowledgeStoreUnavailableError(f"Knowledge article {article_id} is invalid: {e}") from e

    def stats(self) -> KnowledgeStats:
        return compute_stats(self.scan())


def seed_articles(session_factory: sessionmaker, articles: Iterable[KnowledgeArticle]) -> int:
    """
    Insert or replace articles in the knowledge_articles table.

    Returns:
        Number of articles written
    """
    count = 0
    with session_factory() as db:
        for article in articles:
            db.merge(KnowledgeArticleRecord.from_article(article))
            count += 1
        db.commit()
    return count


def get_knowledge_store() -> KnowledgeStore:
    """
    Build the configured knowledge store.

    The caller owns the returned store's lifetime.
    """
    if settings.KNOWLEDGE_STORE_BACKEND == "database":
        from craftguide.db import create_db_engine, create_session_factory

        engine = create_db_engine(settings.DATABASE_URL)
        return SqlKnowledgeStore(create_session_factory(engine))

    path = Path(settings.KNOWLEDGE_BASE_PATH) if settings.KNOWLEDGE_BASE_PATH else None
    return InMemoryKnowledgeStore(load_articles(path))

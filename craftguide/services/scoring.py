"""Relevance scoring strategies."""
from typing import List, Protocol

from craftguide.schemas.knowledge import KnowledgeArticle
from craftguide.settings import settings

TITLE_BOOST = 0.3
TAG_BOOST = 0.2
MIN_TOKEN_LENGTH = 3


class RelevanceScorer(Protocol):
    """Protocol for query/article scorers. Scores must fall in [0, 1]."""

    def score(self, query_text: str, article: KnowledgeArticle) -> float:
        """Score one article against the raw query text."""
        ...


def tokenize(text: str, min_length: int = MIN_TOKEN_LENGTH) -> List[str]:
    """Lowercase, split on whitespace, and drop tokens shorter than min_length."""
    return [token for token in text.lower().split() if len(token) >= min_length]


def searchable_text(article: KnowledgeArticle) -> str:
    """Lowercase concatenation of the fields a query token may hit."""
    return (
        article.title + " " +
        article.content + " " +
        " ".join(article.tags) + " " +
        " ".join(article.craft_types)
    ).lower()


class KeywordRelevanceScorer:
    """
    Token-overlap scorer with title and tag boosts.

    score = min(match_ratio + title_boost + tag_boost, 1.0) where match_ratio is
    the share of query tokens found as substrings of the article's searchable
    text (0 when the query has no tokens), the title boost applies when the
    whole query is a substring of the title, and the tag boost applies when
    any tag is a substring of the query.
    """

    def __init__(
        self,
        title_boost: float = TITLE_BOOST,
        tag_boost: float = TAG_BOOST,
        min_token_length: int = MIN_TOKEN_LENGTH,
    ):
        self.title_boost = title_boost
        self.tag_boost = tag_boost
        self.min_token_length = min_token_length

    def match_ratio(self, query_text: str, article: KnowledgeArticle) -> float:
        tokens = tokenize(query_text, self.min_token_length)
        if not tokens:
            return 0.0

        haystack = searchable_text(article)
        matched = sum(1 for token in tokens if token in haystack)
        return matched / len(tokens)

    def score(self, query_text: str, article: KnowledgeArticle) -> float:
        query_lower = query_text.lower()

        title_score = self.title_boost if query_lower and query_lower in article.title.lower() else 0.0
        tag_score = self.tag_boost if any(tag.lower() in query_lower for tag in article.tags) else 0.0

        return min(self.match_ratio(query_text, article) + title_score + tag_score, 1.0)


def get_relevance_scorer() -> RelevanceScorer:
    """Keyword scorer tuned from settings."""
    return KeywordRelevanceScorer(
        title_boost=settings.SCORING_TITLE_BOOST,
        tag_boost=settings.SCORING_TAG_BOOST,
        min_token_length=settings.SCORING_MIN_TOKEN_LENGTH,
    )

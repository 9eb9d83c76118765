"""Knowledge article table."""
from sqlalchemy import Column, String, Integer, Float, DateTime, Text, JSON

from craftguide.db import Base
from craftguide.schemas.knowledge import KnowledgeArticle


class KnowledgeArticleRecord(Base):
    """Curated knowledge article row."""

    __tablename__ = "knowledge_articles"

    id = Column(String, primary_key=True)
    title = Column(String, nullable=False)
    content = Column(Text, nullable=False)
    category = Column(String, nullable=False, index=True)
    craft_types = Column(JSON, nullable=False)  # List of lowercase craft tags
    difficulty = Column(String, nullable=False, index=True)
    tags = Column(JSON, nullable=False)  # List of lowercase keywords

    # Curation metadata
    author = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)
    view_count = Column(Integer, default=0, nullable=False)
    rating = Column(Float, default=0.0, nullable=False)
    source = Column(String, default="", nullable=False)

    @classmethod
    def from_article(cls, article: KnowledgeArticle) -> "KnowledgeArticleRecord":
        """Build a row from a validated article."""
        return cls(
            id=article.id,
            title=article.title,
            content=article.content,
            category=article.category.value,
            craft_types=list(article.craft_types),
            difficulty=article.difficulty.value,
            tags=list(article.tags),
            author=article.metadata.author,
            created_at=article.metadata.created_at,
            updated_at=article.metadata.updated_at,
            view_count=article.metadata.view_count,
            rating=article.metadata.rating,
            source=article.metadata.source,
        )

    def to_article(self) -> KnowledgeArticle:
        """Validate the row back into a read-only article."""
        return KnowledgeArticle(
            id=self.id,
            title=self.title,
            content=self.content,
            category=self.category,
            craft_types=self.craft_types or [],
            difficulty=self.difficulty,
            tags=self.tags or [],
            metadata={
                "author": self.author,
                "created_at": self.created_at,
                "updated_at": self.updated_at,
                "view_count": self.view_count,
                "rating": self.rating,
                "source": self.source,
            },
        )

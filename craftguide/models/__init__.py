"""Database models."""
from craftguide.models.knowledge import KnowledgeArticleRecord

__all__ = [
    "KnowledgeArticleRecord",
]

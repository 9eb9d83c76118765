#!/usr/bin/env python3
"""
Create the knowledge_articles table and load a JSON corpus into it.

Uses DATABASE_URL from the environment (or .env). Re-running is safe:
existing articles are replaced by id.

Usage:
    python seed_knowledge_db.py [path/to/knowledge_base.json]
"""
import sys
from pathlib import Path

from sqlalchemy.exc import SQLAlchemyError

from craftguide.db import Base, create_db_engine, create_session_factory
from craftguide.models import KnowledgeArticleRecord  # noqa: F401 registers the table
from craftguide.services.knowledge_store import load_articles, seed_articles
from craftguide.settings import settings


def main():
    if not settings.DATABASE_URL:
        print("❌ DATABASE_URL is not set")
        print("Example: DATABASE_URL=sqlite:///./craftguide.db python seed_knowledge_db.py")
        sys.exit(1)

    path = Path(sys.argv[1]) if len(sys.argv) > 1 else None

    try:
        articles = load_articles(path)
    except (OSError, ValueError) as e:
        print(f"❌ Could not load knowledge base: {e}")
        sys.exit(1)

    print(f"Loaded {len(articles)} articles")

    engine = create_db_engine(settings.DATABASE_URL)
    try:
        Base.metadata.create_all(bind=engine)
        count = seed_articles(create_session_factory(engine), articles)
    except SQLAlchemyError as e:
        print(f"❌ Failed to seed database: {e}")
        sys.exit(1)

    print(f"✅ Seeded {count} articles into {engine.url.render_as_string(hide_password=True)}")
    print("Set KNOWLEDGE_STORE_BACKEND=database to serve from this database.")


if __name__ == "__main__":
    main()

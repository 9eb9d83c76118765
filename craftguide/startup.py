"""Application startup validation."""
import logging

from craftguide.services.knowledge_store import KnowledgeStore
from craftguide.services.tool_catalog import TOOL_CATALOG, ToolCatalog, missing_catalog_crafts
from craftguide.settings import settings

logger = logging.getLogger(__name__)


def validate_settings() -> None:
    """
    Validate all required settings at startup.

    Raises:
        ValueError: If required settings are missing or invalid
    """
    logger.info(f"Validating settings for ENV={settings.ENV}")

    settings.validate_required_for_env()
    settings.validate_generation_config()

    logger.info("✓ Settings validation passed")


def validate_knowledge_store(store: KnowledgeStore) -> None:
    """
    Check the knowledge store is readable.

    An empty corpus is allowed but logged, since every query will then come
    back uncited.

    Raises:
        Exception: If the store cannot be read
    """
    logger.info(f"Validating knowledge store (backend={settings.KNOWLEDGE_STORE_BACKEND})...")

    try:
        stats = store.stats()
    except Exception as e:
        logger.error(f"✗ Knowledge store validation failed: {e}")
        raise

    if stats.total_articles == 0:
        logger.warning("Knowledge store is empty; guidance will carry no citations")
    else:
        logger.info(
            f"✓ Knowledge store ready: {stats.total_articles} articles across "
            f"{len(stats.craft_types)} crafts"
        )


def validate_tool_catalog(catalog: ToolCatalog = TOOL_CATALOG) -> None:
    """
    Check every craft specialization has a catalog entry.

    Raises:
        ValueError: If any craft is missing
    """
    missing = missing_catalog_crafts(catalog)
    if missing:
        raise ValueError(
            f"Tool catalog is missing crafts: {', '.join(c.value for c in missing)}"
        )
    logger.info(f"✓ Tool catalog covers {len(catalog)} crafts")


def run_startup_validation(store: KnowledgeStore) -> None:
    """
    Run all startup validations.

    Fails fast with clear error messages if any validation fails.

    Raises:
        Exception: If any validation fails
    """
    logger.info("=" * 60)
    logger.info("Starting application startup validation")
    logger.info("=" * 60)

    try:
        validate_settings()
        validate_knowledge_store(store)
        validate_tool_catalog()

        logger.info("=" * 60)
        logger.info("✓ All startup validations passed")
        logger.info("=" * 60)

    except Exception as e:
        logger.error("=" * 60)
        logger.error("✗ Startup validation failed")
        logger.error("=" * 60)
        logger.error(f"Error: {e}")
        logger.error("")
        logger.error("Application will not start until this is resolved.")
        raise

"""Merge user tool and craft context into a raw query."""
from typing import List, Optional

from craftguide.schemas.guidance import EnrichedQuery, UserContext

TOOL_INSTRUCTION = "Please consider my available tools when providing recommendations."


def _format_tool_list(tools: List[str]) -> str:
    return ", ".join(tools) if tools else "none"


def build_augmented_text(text: str, owned_tools: List[str], missing_tools: List[str]) -> str:
    """
    Append the tool inventory block to a query.

    The layout is fixed: original text, blank line, owned tools line,
    missing tools line, blank line, instruction sentence.
    """
    return (
        f"{text or ''}\n"
        f"\n"
        f"My available tools: {_format_tool_list(owned_tools)}\n"
        f"Tools I don't have: {_format_tool_list(missing_tools)}\n"
        f"\n"
        f"{TOOL_INSTRUCTION}"
    )


def enrich_query(text: Optional[str], user_context: Optional[UserContext] = None) -> EnrichedQuery:
    """
    Build an enriched query from raw text and the user's context.

    Args:
        text: Raw question (None is treated as empty)
        user_context: Profile facts (defaults to an empty context)

    Returns:
        EnrichedQuery whose derived craft filter is the user's specializations,
        or None when the user has none
    """
    text = text or ""
    context = user_context or UserContext()

    return EnrichedQuery(
        original_text=text,
        augmented_text=build_augmented_text(text, context.owned_tools, context.missing_tools),
        derived_craft_filter=list(context.craft_specializations) or None,
    )

"""Guidance prose generation with pluggable providers."""
import hashlib
import logging
import re
from typing import List, Protocol

from openai import OpenAI

from craftguide.exceptions import GenerationUnavailableError
from craftguide.schemas.guidance import PromptContext
from craftguide.schemas.knowledge import KnowledgeArticle
from craftguide.settings import settings

logger = logging.getLogger(__name__)

SUPPORTED_CRAFTS = (
    "woodworking, metalworking, blacksmithing, pottery, ceramics, leathercraft, "
    "weaving, textiles, stone carving, glasswork, jewelry making, bookbinding, "
    "and general workshop practices"
)

CONFIDENCE_PATTERN = re.compile(r"confidence[:\s]*\d+%", re.IGNORECASE)
BLANK_LINES_PATTERN = re.compile(r"\n\s*\n")


class GenerationService(Protocol):
    """Protocol for guidance generators."""

    def generate(self, prompt_context: PromptContext) -> str:
        """Produce guidance prose grounded in the prompt context."""
        ...


def build_system_prompt(prompt_context: PromptContext) -> str:
    """System prompt carrying the user's craft profile."""
    specializations = ", ".join(prompt_context.craft_specializations) or "general crafts"

    return f"""You are an expert multi-craft assistant with deep knowledge across traditional and modern crafts, including {SUPPORTED_CRAFTS}.

Current user context:
- Craft specializations: {specializations}
- Skill level: {prompt_context.skill_level.value}
- Bio: {prompt_context.bio or 'Not provided'}

Guidelines:
1. Identify the craft from the question and give advice specific to it
2. Help even when the question falls outside the user's specializations
3. Work with the user's available tools, and name alternatives for tools they lack
4. Call out safety considerations specific to the craft
5. Include materials, tool requirements and time estimates where relevant
6. Pitch the explanation at the user's skill level
7. Cite the retrieved articles you rely on using [1], [2], etc.

Keep an encouraging, practical tone."""


def build_context(articles: List[KnowledgeArticle], max_length: int) -> str:
    """Numbered article context, truncated to max_length characters."""
    context = "\n\n".join(
        f"[{i + 1}] {article.title}\n{article.content}" for i, article in enumerate(articles)
    )
    if len(context) > max_length:
        context = context[:max_length] + "..."
    return context


def build_user_prompt(prompt_context: PromptContext, max_length: int) -> str:
    """User prompt: the enriched question plus any retrieved articles."""
    if not prompt_context.articles:
        return prompt_context.augmented_text

    context = build_context(prompt_context.articles, max_length)

    return f"""{prompt_context.augmented_text}

Retrieved knowledge base articles:

{context}

Base your answer primarily on the articles above. If they are not enough, you may add general knowledge, but say which parts come from the articles."""


def clean_generated_text(text: str) -> str:
    """Strip self-reported confidence statements and collapse blank lines."""
    text = CONFIDENCE_PATTERN.sub("", text or "")
    text = BLANK_LINES_PATTERN.sub("\n\n", text)
    return text.strip()


class OpenAIGenerationService:
    """OpenAI chat completion generator."""

    def __init__(
        self,
        api_key: str,
        model: str,
        temperature: float = 0.7,
        max_tokens: int = 800,
        timeout: float = 20.0,
        max_retries: int = 1,
        max_context_length: int = 4000,
    ):
        """Initialize OpenAI client with a bounded timeout and retry limit."""
        self.client = OpenAI(api_key=api_key, timeout=timeout, max_retries=max_retries)
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.max_context_length = max_context_length

    def generate(self, prompt_context: PromptContext) -> str:
        try:
            completion = self.client.chat.completions.create(
                model=self.model,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
                messages=[
                    {"role": "system", "content": build_system_prompt(prompt_context)},
                    {"role": "user", "content": build_user_prompt(prompt_context, self.max_context_length)},
                ],
            )
        except Exception as e:
            raise GenerationUnavailableError(f"Error generating guidance: {e}") from e

        content = completion.choices[0].message.content if completion.choices else None
        if not content:
            raise GenerationUnavailableError("Generation returned no content")

        logger.debug(f"Generated {len(content)} characters with {self.model}")
        return clean_generated_text(content)


class LocalStubGenerationService:
    """
    Deterministic stub generator for tests and local runs.

    Echoes the cited article titles with a short fingerprint of the prompt, so
    identical inputs always produce identical prose without any API call.
    """

    def generate(self, prompt_context: PromptContext) -> str:
        fingerprint = hashlib.sha256(prompt_context.augmented_text.encode()).hexdigest()[:8]

        if not prompt_context.articles:
            return f"No matching knowledge articles were found. [stub:{fingerprint}]"

        titles = "; ".join(
            f"[{i + 1}] {article.title}" for i, article in enumerate(prompt_context.articles)
        )
        return f"Guidance based on: {titles} [stub:{fingerprint}]"


def get_generation_service() -> GenerationService:
    """
    Get configured generation service.

    Raises:
        ValueError: If provider is 'openai' but API key is invalid
    """
    provider_type = settings.GENERATION_PROVIDER

    if provider_type == "openai":
        if not settings.OPENAI_API_KEY or settings.OPENAI_API_KEY.startswith("sk-your"):
            raise ValueError(
                "OpenAI provider selected but OPENAI_API_KEY is not configured. "
                "Set OPENAI_API_KEY or change GENERATION_PROVIDER to 'local_stub'."
            )
        return OpenAIGenerationService(
            api_key=settings.OPENAI_API_KEY,
            model=settings.OPENAI_CHAT_MODEL,
            temperature=settings.OPENAI_CHAT_TEMPERATURE,
            max_tokens=settings.OPENAI_MAX_TOKENS,
            timeout=settings.GENERATION_TIMEOUT_SECONDS,
            max_retries=settings.GENERATION_MAX_RETRIES,
            max_context_length=settings.RAG_MAX_CONTEXT_LENGTH,
        )

    return LocalStubGenerationService()

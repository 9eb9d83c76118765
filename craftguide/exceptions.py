"""Error taxonomy for the guidance engine."""


class CraftGuideError(Exception):
    """Base class for engine errors."""


class InvalidQueryError(CraftGuideError, ValueError):
    """Raised when a query is malformed at the engine boundary."""


class KnowledgeStoreUnavailableError(CraftGuideError):
    """Raised when the backing knowledge store cannot be read."""


class GenerationUnavailableError(CraftGuideError):
    """Raised when the generation collaborator fails or times out."""

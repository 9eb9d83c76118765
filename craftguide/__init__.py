"""CraftGuide knowledge retrieval and contextual guidance engine."""

__version__ = "0.1.0"

"""Blog article discovery and LLM refresh pipeline."""

__version__ = "0.1.0"

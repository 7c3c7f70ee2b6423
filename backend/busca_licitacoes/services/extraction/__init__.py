"""Extraction of structured filters from free-text questions."""

from .openai_extractor import FilterExtractor, OpenAIFilterExtractor

__all__ = ["FilterExtractor", "OpenAIFilterExtractor"]

"""
External integrations for the Animal Academy lesson generator.

Modules:
- gemini_client: Gemini text generation and Imagen panel illustration
"""
from .gemini_client import GeminiClient

__all__ = ["GeminiClient"]

from __future__ import annotations

from app.ai.providers.openai_provider import OpenAIProvider


class GeminiProvider(OpenAIProvider):
    """Gemini through Google AI Studio's OpenAI-compatible endpoint."""

    api_key_env = "GEMINI_API_KEY"
    base_url_env = "GEMINI_BASE_URL"
    default_base_url = "https://generativelanguage.googleapis.com/v1beta/openai/"

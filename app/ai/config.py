import os
from dataclasses import dataclass


@dataclass(frozen=True)
class AIConfig:
    provider: str
    model: str


_DEFAULT_MODELS = {
    "gemini": "gemini-2.5-flash",
    "openai": "gpt-4o-mini",
}


def load_ai_config() -> AIConfig:
    provider = os.getenv("AI_PROVIDER", "gemini").strip().lower()
    model = (os.getenv("AI_MODEL") or _DEFAULT_MODELS.get(provider, "")).strip()
    return AIConfig(provider=provider, model=model)

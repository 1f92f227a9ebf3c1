from __future__ import annotations

import os
from typing import Optional, Sequence

from openai import AsyncOpenAI

from app.ai.types import to_messages


class OpenAIProvider:
    api_key_env = "OPENAI_API_KEY"
    base_url_env = "OPENAI_BASE_URL"
    default_base_url: Optional[str] = None

    def __init__(
        self,
        model: str,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout_s: float = 30.0,
        max_retries: int = 0,
        temperature: float = 0.2,
    ):
        self._model = model
        self._temperature = temperature
        key = (api_key or os.getenv(self.api_key_env) or "").strip()
        if not key:
            raise RuntimeError(f"{self.api_key_env} is missing")

        self._client = AsyncOpenAI(
            api_key=key,
            base_url=(base_url or os.getenv(self.base_url_env) or self.default_base_url),
            timeout=float(os.getenv("AI_TIMEOUT_S", str(timeout_s))),
            max_retries=int(os.getenv("AI_MAX_RETRIES", str(max_retries))),
        )

    @property
    def model(self) -> str:
        return self._model

    async def generate(self, prompt_parts: Sequence[str]) -> str:
        payload = [{"role": m.role, "content": m.content} for m in to_messages(prompt_parts)]

        response = await self._client.chat.completions.create(
            model=self._model,
            messages=payload,
            temperature=self._temperature,
        )
        if not response.choices:
            return ""
        return response.choices[0].message.content or ""

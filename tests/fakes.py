from __future__ import annotations

from typing import Sequence


class FakeAIClient:
    """Stands in for a provider: returns a canned reply or raises a canned error."""

    def __init__(self, reply: str | None = None, error: Exception | None = None):
        self.reply = reply
        self.error = error
        self.calls: list[list[str]] = []

    async def generate(self, prompt_parts: Sequence[str]) -> str:
        self.calls.append(list(prompt_parts))
        if self.error is not None:
            raise self.error
        return self.reply or ""


def quota_error() -> Exception:
    return RuntimeError("[429 Too Many Requests] You exceeded your current quota")


def network_error() -> Exception:
    return ConnectionError("connection reset by peer")

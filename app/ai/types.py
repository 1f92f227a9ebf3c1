from dataclasses import dataclass
from typing import Literal, Protocol, Sequence


Role = Literal["system", "user", "assistant"]


@dataclass(frozen=True)
class ChatMessage:
    role: Role
    content: str


def to_messages(prompt_parts: Sequence[str]) -> list[ChatMessage]:
    """Flatten prompt parts into a single user turn, the way generateContent sends them."""
    text = "\n\n".join(part for part in prompt_parts if part)
    return [ChatMessage(role="user", content=text)]


class AIClient(Protocol):
    async def generate(self, prompt_parts: Sequence[str]) -> str: ...

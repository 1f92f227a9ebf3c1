from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from functools import lru_cache

from app.core.config.loader import get_policy_value


class Verdict(str, Enum):
    ALLOWED = "allowed"
    BLOCKED_TOPIC = "blocked_topic"
    NOT_CAREER_RELATED = "not_career_related"


@dataclass(frozen=True)
class TopicPolicy:
    blocked_patterns: tuple[str, ...]
    allowed_keywords: tuple[str, ...]
    blocked_message: str
    off_topic_message: str


@dataclass(frozen=True)
class TopicDecision:
    verdict: Verdict
    message: str | None = None
    matched: str | None = None

    @property
    def allowed(self) -> bool:
        return self.verdict is Verdict.ALLOWED


def _lowered(values) -> tuple[str, ...]:
    return tuple(str(v).strip().lower() for v in (values or []) if str(v).strip())


@lru_cache(maxsize=1)
def load_topic_policy() -> TopicPolicy:
    return TopicPolicy(
        blocked_patterns=_lowered(get_policy_value("topics.blocked_patterns", [])),
        allowed_keywords=_lowered(get_policy_value("topics.allowed_keywords", [])),
        blocked_message=str(get_policy_value("topics.blocked_message", "")).strip(),
        off_topic_message=str(get_policy_value("topics.off_topic_message", "")).strip(),
    )


def _first_hit(text: str, markers: tuple[str, ...]) -> str | None:
    for marker in markers:
        if marker in text:
            return marker
    return None


def classify(message: str, policy: TopicPolicy | None = None) -> TopicDecision:
    """Gate a chat message before any model call.

    Plain substring matching on the lower-cased message: the deny list always
    runs first, then at least one allow-list term must appear. There are no
    word boundaries, so "feesibility" is blocked by "fee".
    """
    policy = policy or load_topic_policy()
    lowered = (message or "").lower()

    blocked = _first_hit(lowered, policy.blocked_patterns)
    if blocked is not None:
        return TopicDecision(Verdict.BLOCKED_TOPIC, policy.blocked_message, blocked)

    allowed = _first_hit(lowered, policy.allowed_keywords)
    if allowed is None:
        return TopicDecision(Verdict.NOT_CAREER_RELATED, policy.off_topic_message)

    return TopicDecision(Verdict.ALLOWED, None, allowed)

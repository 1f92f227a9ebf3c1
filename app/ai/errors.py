from __future__ import annotations

from enum import Enum
from typing import Sequence

import openai

DEFAULT_QUOTA_MARKERS: tuple[str, ...] = ("quota", "Too Many Requests", "exceeded")


class UpstreamErrorKind(str, Enum):
    QUOTA = "quota"
    AUTH = "auth"
    TRANSIENT = "transient"


def error_message(exc: BaseException) -> str:
    return str(exc) or exc.__class__.__name__


def classify_upstream_error(
    exc: BaseException,
    quota_markers: Sequence[str] = DEFAULT_QUOTA_MARKERS,
) -> UpstreamErrorKind:
    """Map a model-call failure to a coarse kind.

    SDK exception types are checked first; anything else falls back to
    case-sensitive substring matching on the error message.
    """
    if isinstance(exc, openai.RateLimitError):
        return UpstreamErrorKind.QUOTA

    message = error_message(exc)
    if any(marker in message for marker in quota_markers):
        return UpstreamErrorKind.QUOTA

    if isinstance(exc, (openai.AuthenticationError, openai.PermissionDeniedError)):
        return UpstreamErrorKind.AUTH
    return UpstreamErrorKind.TRANSIENT

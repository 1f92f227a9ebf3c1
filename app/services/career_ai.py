"""Contract enforcement around every model call.

Each public coroutine here is total: the model call and the parsing of its
output are wrapped so that callers always get a value of the declared shape.
Failures are logged with a classified kind and replaced by deterministic
fallbacks built from ``config/career_policy.yaml``.
"""

from __future__ import annotations

import json
import logging
import math
import time
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Sequence

from app.ai.errors import UpstreamErrorKind, classify_upstream_error, error_message
from app.ai.factory import get_ai_client
from app.ai.prompts import (
    build_chat_parts,
    build_onboarding_parts,
    build_resume_analysis_parts,
    build_suggestion_parts,
)
from app.ai.types import AIClient
from app.core.config.loader import get_policy_value
from app.features.resume_scorer import round_half_up
from app.features.text_coercion import RAW_KEY, coerce_json, extract_json_array
from app.schemas.career import CareerOption, ChatTurn, ResumeAnalysisCore

logger = logging.getLogger("app.career_ai")

CareerPair = tuple[str, str]


@dataclass(frozen=True)
class OnboardingBranch:
    name: str
    interest_markers: tuple[str, ...]
    hobby_markers: tuple[str, ...]
    careers: tuple[CareerPair, ...]


@dataclass(frozen=True)
class CareerAIPolicy:
    quota_markers: tuple[str, ...]
    chat_system_prompt: str
    max_history_turns: int
    chat_quota_reply: str
    chat_fallback_reply: str
    summary_max_chars: int
    default_experience_level: str
    default_rating_10: int
    quota_missing_skills: tuple[str, ...]
    quota_summary: str
    skill_keywords: tuple[CareerPair, ...]
    baseline_missing_skills: tuple[str, ...]
    intern_marker: str
    intern_level: str
    default_level: str
    heuristic_job_roles: tuple[str, ...]
    heuristic_summary: str
    fallback_suggestions: tuple[str, ...]
    onboarding_branches: tuple[OnboardingBranch, ...]
    onboarding_default: tuple[CareerPair, ...]


def _strings(values: Any) -> tuple[str, ...]:
    return tuple(str(v) for v in (values or []))


def _pairs(items: Any) -> tuple[CareerPair, ...]:
    return tuple((str(item["title"]), str(item.get("why") or "")) for item in (items or []))


@lru_cache(maxsize=1)
def load_career_ai_policy() -> CareerAIPolicy:
    branches = tuple(
        OnboardingBranch(
            name=str(branch.get("name") or ""),
            interest_markers=tuple(m.lower() for m in _strings(branch.get("interest_markers"))),
            hobby_markers=tuple(m.lower() for m in _strings(branch.get("hobby_markers"))),
            careers=_pairs(branch.get("careers")),
        )
        for branch in get_policy_value("onboarding.branches", []) or []
    )
    keywords = get_policy_value("resume.heuristic.skill_keywords", {}) or {}
    return CareerAIPolicy(
        quota_markers=_strings(get_policy_value("upstream.quota_markers", [])),
        chat_system_prompt=str(get_policy_value("chat.system_prompt", "")).strip(),
        max_history_turns=int(get_policy_value("chat.max_history_turns", 6)),
        chat_quota_reply=str(get_policy_value("chat.quota_reply", "")).strip(),
        chat_fallback_reply=str(get_policy_value("chat.fallback_reply", "")).strip(),
        summary_max_chars=int(get_policy_value("resume.summary_max_chars", 300)),
        default_experience_level=str(get_policy_value("resume.default_experience_level", "unknown")),
        default_rating_10=int(get_policy_value("resume.default_rating_10", 5)),
        quota_missing_skills=_strings(get_policy_value("resume.quota.missing_skills", [])),
        quota_summary=str(get_policy_value("resume.quota.summary", "")),
        skill_keywords=tuple((str(k).lower(), str(v)) for k, v in keywords.items()),
        baseline_missing_skills=_strings(get_policy_value("resume.heuristic.baseline_missing_skills", [])),
        intern_marker=str(get_policy_value("resume.heuristic.intern_marker", "intern")).lower(),
        intern_level=str(get_policy_value("resume.heuristic.intern_level", "intern")),
        default_level=str(get_policy_value("resume.heuristic.default_level", "student")),
        heuristic_job_roles=_strings(get_policy_value("resume.heuristic.job_roles", [])),
        heuristic_summary=str(get_policy_value("resume.heuristic.summary", "")),
        fallback_suggestions=_strings(get_policy_value("suggestions.fallback", [])),
        onboarding_branches=branches,
        onboarding_default=_pairs(get_policy_value("onboarding.default", [])),
    )


async def _generate(client: AIClient | None, prompt_parts: Sequence[str]) -> str:
    ai = client or get_ai_client()
    text = await ai.generate(prompt_parts)
    return text if isinstance(text, str) else str(text or "")


def _log_failure(operation: str, exc: Exception, policy: CareerAIPolicy, started: float) -> UpstreamErrorKind:
    kind = classify_upstream_error(exc, policy.quota_markers)
    logger.warning(
        json.dumps(
            {
                "event": "ai_call_failed",
                "operation": operation,
                "kind": kind.value,
                "error": error_message(exc)[:300],
                "duration_ms": int((time.perf_counter() - started) * 1000),
            }
        )
    )
    return kind


def _log_malformed(operation: str, text: str) -> None:
    logger.info(
        json.dumps(
            {
                "event": "ai_output_malformed",
                "operation": operation,
                "text_len": len(text or ""),
            }
        )
    )


def _clean_text(value: Any) -> str:
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return ""


def _string_list(value: Any, *, split_commas: bool = False) -> list[str]:
    if isinstance(value, str):
        items: list[Any] = value.split(",") if split_commas else [value]
    elif isinstance(value, (list, tuple)):
        items = list(value)
    else:
        return []
    cleaned = (_clean_text(item) for item in items)
    return [item for item in cleaned if item]


def _rating_10(value: Any, default: int) -> int:
    if isinstance(value, bool):
        return default
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return default
    if not isinstance(value, (int, float)) or not math.isfinite(value):
        return default
    return max(1, min(10, round_half_up(value)))


# -- chat ---------------------------------------------------------------------


async def chat_reply(
    message: str,
    history: Sequence[ChatTurn] | None = None,
    *,
    client: AIClient | None = None,
    policy: CareerAIPolicy | None = None,
) -> str:
    """Model reply for an already-gated message; canned text when the model fails."""
    policy = policy or load_career_ai_policy()
    turns = list(history or [])[-policy.max_history_turns :] if policy.max_history_turns > 0 else []
    parts = build_chat_parts(policy.chat_system_prompt, message, turns)
    started = time.perf_counter()
    try:
        return await _generate(client, parts)
    except Exception as exc:  # noqa: BLE001 - canned reply replaces any upstream failure
        kind = _log_failure("chat_reply", exc, policy, started)
        if kind is UpstreamErrorKind.QUOTA:
            return policy.chat_quota_reply
        return policy.chat_fallback_reply


# -- resume analysis ----------------------------------------------------------


def conform_analysis(parsed: Any, policy: CareerAIPolicy) -> ResumeAnalysisCore:
    obj = parsed if isinstance(parsed, dict) else {}
    summary = _clean_text(obj.get("summary"))
    if not summary and obj.get(RAW_KEY):
        summary = str(obj[RAW_KEY])[: policy.summary_max_chars]
    return ResumeAnalysisCore(
        skills=_string_list(obj.get("skills"), split_commas=True),
        missing_skills=_string_list(obj.get("missing_skills"), split_commas=True),
        experience_level=_clean_text(obj.get("experience_level")) or policy.default_experience_level,
        job_roles=_string_list(obj.get("job_roles"), split_commas=True),
        summary=summary,
        rating_10=_rating_10(obj.get("rating_10"), policy.default_rating_10),
    )


def is_usable_analysis(parsed: Any) -> bool:
    return isinstance(parsed, dict) and bool(
        parsed.get("skills") or parsed.get("rating_10") or parsed.get("summary")
    )


def quota_analysis(policy: CareerAIPolicy) -> ResumeAnalysisCore:
    return ResumeAnalysisCore(
        skills=[],
        missing_skills=list(policy.quota_missing_skills),
        experience_level=policy.default_experience_level,
        job_roles=[],
        summary=policy.quota_summary,
        rating_10=policy.default_rating_10,
    )


def heuristic_analysis(resume_text: str | None, policy: CareerAIPolicy) -> ResumeAnalysisCore:
    lowered = (resume_text or "").lower()
    skills = [label for keyword, label in policy.skill_keywords if keyword in lowered]
    known = {skill.lower() for skill in skills}
    missing = [skill for skill in policy.baseline_missing_skills if skill.lower() not in known]
    level = policy.intern_level if policy.intern_marker in lowered else policy.default_level
    return ResumeAnalysisCore(
        skills=skills,
        missing_skills=missing,
        experience_level=level,
        job_roles=list(policy.heuristic_job_roles),
        summary=policy.heuristic_summary,
        rating_10=max(1, min(10, round_half_up(len(skills) / 5 * 10))),
    )


async def analyze_resume(
    resume_text: str,
    *,
    client: AIClient | None = None,
    policy: CareerAIPolicy | None = None,
) -> ResumeAnalysisCore:
    policy = policy or load_career_ai_policy()
    started = time.perf_counter()
    try:
        text = (await _generate(client, build_resume_analysis_parts(resume_text))).strip()
        parsed = coerce_json(text)
        if not is_usable_analysis(parsed):
            _log_malformed("analyze_resume", text)
        return conform_analysis(parsed, policy)
    except Exception as exc:  # noqa: BLE001 - deterministic fallback is expected
        kind = _log_failure("analyze_resume", exc, policy, started)
        if kind is UpstreamErrorKind.QUOTA:
            return quota_analysis(policy)
        return heuristic_analysis(resume_text, policy)


# -- suggestions --------------------------------------------------------------


def fallback_suggestions(policy: CareerAIPolicy) -> list[str]:
    return list(policy.fallback_suggestions)


def extract_suggestions(text: str) -> list[str]:
    parsed = coerce_json(text)
    if isinstance(parsed, list):
        candidates: Any = parsed
    elif isinstance(parsed, dict) and isinstance(parsed.get("suggestions"), list):
        candidates = parsed["suggestions"]
    else:
        candidates = extract_json_array(text)
    return _string_list(candidates)


async def suggest_improvements(
    resume_text: str,
    analysis: Any = None,
    *,
    client: AIClient | None = None,
    policy: CareerAIPolicy | None = None,
) -> list[str]:
    policy = policy or load_career_ai_policy()
    started = time.perf_counter()
    try:
        text = (await _generate(client, build_suggestion_parts(resume_text, analysis))).strip()
        suggestions = extract_suggestions(text)
        if suggestions:
            return suggestions
        _log_malformed("suggest_improvements", text)
    except Exception as exc:  # noqa: BLE001
        _log_failure("suggest_improvements", exc, policy, started)
    return fallback_suggestions(policy)


# -- onboarding ---------------------------------------------------------------


def heuristic_careers(interest: str | None, hobby: str | None, policy: CareerAIPolicy) -> list[CareerOption]:
    lowered_interest = (interest or "").lower()
    lowered_hobby = (hobby or "").lower()
    pairs = policy.onboarding_default
    for branch in policy.onboarding_branches:
        if any(m in lowered_interest for m in branch.interest_markers) or any(
            m in lowered_hobby for m in branch.hobby_markers
        ):
            pairs = branch.careers
            break
    return [CareerOption(title=title, why=why) for title, why in pairs[:3]]


def _career_option(item: Any) -> CareerOption | None:
    if isinstance(item, str):
        title = item.strip()
        return CareerOption(title=title, why="") if title else None
    if isinstance(item, dict):
        title = _clean_text(item.get("title"))
        if title:
            return CareerOption(title=title, why=_clean_text(item.get("why")))
    return None


def extract_careers(text: str) -> list[CareerOption]:
    parsed = coerce_json(text)
    if isinstance(parsed, dict) and isinstance(parsed.get("careers"), list):
        items = parsed["careers"]
    elif isinstance(parsed, list):
        items = parsed
    else:
        return []
    options = (_career_option(item) for item in items)
    return [option for option in options if option is not None][:3]


def _pad_careers(options: list[CareerOption], fallback: list[CareerOption]) -> list[CareerOption]:
    seen = {option.title.lower() for option in options}
    for option in fallback:
        if len(options) >= 3:
            break
        if option.title.lower() not in seen:
            options.append(option)
            seen.add(option.title.lower())
    return options[:3]


async def onboarding_careers(
    interest: str,
    hobby: str,
    education: str,
    *,
    client: AIClient | None = None,
    policy: CareerAIPolicy | None = None,
) -> list[CareerOption]:
    """Exactly three career options, ranked by the model or by the keyword table."""
    policy = policy or load_career_ai_policy()
    started = time.perf_counter()
    try:
        text = (await _generate(client, build_onboarding_parts(interest, hobby, education))).strip()
        options = extract_careers(text)
        if not options:
            _log_malformed("onboarding_careers", text)
            return heuristic_careers(interest, hobby, policy)
        if len(options) < 3:
            return _pad_careers(options, heuristic_careers(interest, hobby, policy))
        return options
    except Exception as exc:  # noqa: BLE001
        _log_failure("onboarding_careers", exc, policy, started)
        return heuristic_careers(interest, hobby, policy)

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass
from functools import lru_cache
from typing import Any

from app.core.config.loader import get_scoring_value


@dataclass(frozen=True)
class LengthPenalty:
    max_words: int
    penalty: int


@dataclass(frozen=True)
class ScoringRules:
    base: int
    skills_max_bonus: int
    experience_bonus: Mapping[str, int]
    project_keywords: tuple[str, ...]
    project_per_hit: int
    project_max_bonus: int
    length_penalties: tuple[LengthPenalty, ...]
    min_score: int
    max_score: int


@lru_cache(maxsize=1)
def load_scoring_rules() -> ScoringRules:
    experience = get_scoring_value("resume.experience_bonus", {}) or {}
    penalties = get_scoring_value("resume.length_penalties", []) or []
    return ScoringRules(
        base=int(get_scoring_value("resume.base", 40)),
        skills_max_bonus=int(get_scoring_value("resume.skills.max_bonus", 30)),
        experience_bonus={str(k).lower(): int(v) for k, v in experience.items()},
        project_keywords=tuple(
            str(k).lower() for k in get_scoring_value("resume.projects.keywords", []) or []
        ),
        project_per_hit=int(get_scoring_value("resume.projects.per_hit", 3)),
        project_max_bonus=int(get_scoring_value("resume.projects.max_bonus", 15)),
        length_penalties=tuple(
            LengthPenalty(max_words=int(p["max_words"]), penalty=int(p["penalty"]))
            for p in penalties
        ),
        min_score=int(get_scoring_value("resume.bounds.min", 0)),
        max_score=int(get_scoring_value("resume.bounds.max", 100)),
    )


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _field(analysis: Any, name: str, default: Any = None) -> Any:
    if analysis is None:
        return default
    if isinstance(analysis, Mapping):
        return analysis.get(name, default)
    return getattr(analysis, name, default)


def _folded(values: Any) -> list[str]:
    if not isinstance(values, (list, tuple)):
        return []
    return [str(v).lower() for v in values if v is not None]


def skills_bonus(analysis: Any, rules: ScoringRules) -> int:
    skills = _folded(_field(analysis, "skills"))
    if not skills:
        return 0
    missing = set(_folded(_field(analysis, "missing_skills")))
    recognized = sum(1 for skill in skills if skill not in missing)
    ratio = min(1.0, recognized / max(1, len(skills)))
    return round_half_up(ratio * rules.skills_max_bonus)


def experience_bonus(analysis: Any, rules: ScoringRules) -> int:
    level = str(_field(analysis, "experience_level") or "").lower()
    return rules.experience_bonus.get(level, 0)


def project_bonus(text: str, rules: ScoringRules) -> int:
    hits = sum(1 for keyword in rules.project_keywords if keyword in text)
    return min(rules.project_max_bonus, hits * rules.project_per_hit)


def length_penalty(text: str, rules: ScoringRules) -> int:
    word_count = len(text.split())
    return sum(p.penalty for p in rules.length_penalties if word_count < p.max_words)


def score_resume(analysis: Any, resume_text: str | None, rules: ScoringRules | None = None) -> int:
    """Deterministic 0-100 resume quality score; the model's own rating is ignored."""
    rules = rules or load_scoring_rules()
    text = (resume_text or "").lower()

    score = rules.base
    score += skills_bonus(analysis, rules)
    score += experience_bonus(analysis, rules)
    score += project_bonus(text, rules)
    score -= length_penalty(text, rules)
    return max(rules.min_score, min(rules.max_score, score))

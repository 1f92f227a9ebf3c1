from __future__ import annotations

import json
import logging
import time
from typing import Any

from app.core.config import settings
from app.features.resume_scorer import score_resume
from app.schemas.career import ResumeAnalysis
from app.schemas.users import ResumeAnalysisResponse, ResumeHistoryEntry, ResumeHistoryResponse
from app.services.career_ai import analyze_resume, suggest_improvements
from app.services.errors import InvalidInputError, PlanLimitError, ProOnlyError
from app.services.user_service import require_user
from app.store import records

logger = logging.getLogger(__name__)


def check_scan_allowance(user_id: str | None) -> dict[str, Any]:
    user = require_user(user_id)
    if user["plan"] == "free" and user["resume_scan_count"] >= settings.free_max_resume_scans:
        raise PlanLimitError("Free plan resume scan limit reached. Upgrade to Pro.")
    return user


async def build_analysis(resume_text: str) -> ResumeAnalysis:
    """Model analysis, local score, then suggestions fed with that analysis."""
    core = await analyze_resume(resume_text)
    rating = score_resume(core, resume_text)
    suggestions = await suggest_improvements(resume_text, core)
    return ResumeAnalysis(**core.model_dump(), suggestions=suggestions, rating=rating)


async def analyze_for_user(user_id: str | None, resume_text: str) -> ResumeAnalysisResponse:
    started_at = time.perf_counter()
    user = check_scan_allowance(user_id)
    text = (resume_text or "").strip()
    if not text:
        raise InvalidInputError(
            "No resume text provided. Upload a .txt/.md/.pdf/.docx or send raw text in resume_text."
        )

    analysis = await build_analysis(text)
    history_id = records.add_resume_analysis(
        user["id"], resume_text=text, analysis=analysis.model_dump()
    )
    records.increment_counter(user["id"], "resume_scan_count")

    logger.info(
        json.dumps(
            {
                "event": "resume_analyzed",
                "history_id": history_id,
                "word_count": len(text.split()),
                "skills": len(analysis.skills),
                "rating": analysis.rating,
                "rating_10": analysis.rating_10,
                "duration_ms": int((time.perf_counter() - started_at) * 1000),
            }
        )
    )
    return ResumeAnalysisResponse(analysis=analysis, history_id=history_id)


def history(user_id: str | None) -> ResumeHistoryResponse:
    user = require_user(user_id)
    if user["plan"] != "pro":
        raise ProOnlyError("Resume history is available for Pro users only.")
    rows = records.resume_history(user["id"], settings.resume_history_limit)
    return ResumeHistoryResponse(history=[ResumeHistoryEntry(**row) for row in rows])

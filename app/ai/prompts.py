import json
from typing import Any, Sequence

from app.schemas.career import ChatTurn


def build_chat_parts(
    system_prompt: str,
    message: str,
    history: Sequence[ChatTurn] | None = None,
) -> list[str]:
    parts = [system_prompt]
    for turn in history or []:
        parts.append(f"User: {turn.user_message}\nAssistant: {turn.ai_response}")
    parts.append(f"User: {message}")
    return parts


def build_resume_analysis_parts(resume_text: str) -> list[str]:
    prompt = (
        "You are an expert resume evaluator for software/tech roles in the CURRENT job market. "
        "Given the resume text below, respond ONLY in valid JSON with these keys:\n"
        "- skills: array of strings\n"
        "- missing_skills: array of strings describing important missing skills\n"
        "- experience_level: string (student/intern/junior/mid-level/senior)\n"
        "- job_roles: array of suitable job role titles\n"
        "- summary: short summary string (1-2 sentences)\n"
        "- rating_10: integer from 1 to 10 (overall resume strength for current market)\n\n"
        "Do NOT include any extra commentary outside the JSON.\n\n"
        f"Resume text:\n{resume_text}"
    )
    return [prompt]


def build_suggestion_parts(resume_text: str, analysis: Any) -> list[str]:
    if hasattr(analysis, "model_dump"):
        analysis = analysis.model_dump()
    analysis_json = json.dumps(analysis or {}, indent=2, ensure_ascii=False, default=str)
    prompt = (
        "You are a resume coach. Based on the resume text and the analysis JSON provided, "
        "return a JSON array of 5-8 specific, actionable suggestions (each suggestion as a short string). "
        "Return ONLY the JSON array.\n\n"
        f"Resume Text:\n{resume_text}\n\nAnalysis JSON:\n{analysis_json}"
    )
    return [prompt]


def build_onboarding_parts(interest: str, hobby: str, education: str) -> list[str]:
    prompt = (
        "You are a career counselor for students. Based on the user's interest, hobby and education, "
        "suggest EXACTLY 3 career options. Respond ONLY as JSON with structure:\n"
        '{"careers":[{"title":"...","why":"..."},{"title":"...","why":"..."},{"title":"...","why":"..."}]}\n\n'
        "User data:\n"
        f"Interest: {interest}\n"
        f"Hobby: {hobby}\n"
        f"Education: {education}\n\n"
        "Keep answers concise and practical, focusing on early-career paths and entry-level progression."
    )
    return [prompt]

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ChatTurn(BaseModel):
    model_config = ConfigDict(frozen=True)

    user_message: str
    ai_response: str


class ResumeAnalysisCore(BaseModel):
    skills: list[str] = Field(default_factory=list)
    missing_skills: list[str] = Field(default_factory=list)
    experience_level: str = "unknown"
    job_roles: list[str] = Field(default_factory=list)
    summary: str = ""
    rating_10: int = Field(default=5, ge=1, le=10)


class ResumeAnalysis(ResumeAnalysisCore):
    suggestions: list[str] = Field(default_factory=list)
    rating: int = Field(default=0, ge=0, le=100)


class CareerOption(BaseModel):
    title: str
    why: str = ""

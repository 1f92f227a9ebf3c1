from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from app.schemas.career import CareerOption, ResumeAnalysis

Plan = Literal["free", "pro"]


class UserCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    email: str = Field(min_length=3, max_length=200)

    @field_validator("email")
    @classmethod
    def _normalize_email(cls, value: str) -> str:
        normalized = value.strip().lower()
        if "@" not in normalized:
            raise ValueError("email must contain '@'")
        return normalized


class UserProfile(BaseModel):
    id: str
    name: str
    email: str
    plan: Plan = "free"
    chat_count: int = 0
    resume_scan_count: int = 0
    interest: str | None = None
    hobby: str | None = None
    education: str | None = None
    has_completed_onboarding: bool = False
    created_at: datetime | None = None


class SubscriptionResponse(BaseModel):
    message: str
    user: UserProfile


class OnboardingRequest(BaseModel):
    interest: str = ""
    hobby: str = ""
    education: str = ""


class OnboardingResponse(BaseModel):
    careers: list[CareerOption]


class ResumeAnalysisResponse(BaseModel):
    analysis: ResumeAnalysis
    history_id: int


class ResumeHistoryEntry(BaseModel):
    id: int
    resume_text: str
    analysis: ResumeAnalysis
    created_at: datetime


class ResumeHistoryResponse(BaseModel):
    history: list[ResumeHistoryEntry] = Field(default_factory=list)

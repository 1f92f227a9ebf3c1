from __future__ import annotations

from pydantic import BaseModel, Field


class ParsedResume(BaseModel):
    text: str = ""
    parsing_warnings: list[str] = Field(default_factory=list)

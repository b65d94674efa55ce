from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

MAX_LISTED_KEYWORDS = 20
MAX_IMPROVEMENT_TIPS = 8


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class KeywordAnalysis(_CamelModel):
    matched_keywords: list[str] = Field(default_factory=list, max_length=MAX_LISTED_KEYWORDS)
    missing_keywords: list[str] = Field(default_factory=list, max_length=MAX_LISTED_KEYWORDS)
    keyword_density: int = Field(default=0, ge=0, le=100)


class FormattingAnalysis(_CamelModel):
    has_proper_sections: bool
    has_contact_info: bool
    has_education: bool
    has_experience: bool
    has_skills: bool
    issues: list[str] = Field(default_factory=list)
    score: int = Field(ge=0, le=100)


class AtsResult(_CamelModel):
    ats_score: int = Field(ge=0, le=100)
    keyword_analysis: KeywordAnalysis
    formatting_analysis: FormattingAnalysis
    improvement_tips: list[str] = Field(default_factory=list, max_length=MAX_IMPROVEMENT_TIPS)


class AnalyzeResponse(AtsResult):
    id: str


class AnalysisRecord(AtsResult):
    id: str
    filename: str
    original_name: str
    resume_text: str
    job_description: str
    created_at: datetime


class HistoryItem(_CamelModel):
    id: str
    original_name: str
    ats_score: int
    created_at: datetime


class AnalyzeTextRequest(_CamelModel):
    resume_text: str = Field(min_length=1, max_length=200000)
    job_description: str = Field(default="", max_length=200000)
    original_name: str = Field(default="pasted-resume.txt", min_length=1, max_length=255)

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Sequence

from app.schemas.analysis import AtsResult, KeywordAnalysis

from .formatting import analyze_formatting
from .keywords import extract_job_keywords, extract_keywords
from .rules import DEFAULT_RULES, AnalysisRules
from .tips import generate_improvement_tips

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class KeywordMatch:
    matched: list[str] = field(default_factory=list)
    missing: list[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.matched) + len(self.missing)

    @property
    def score(self) -> float:
        if self.total == 0:
            return 0.0
        return len(self.matched) / self.total * 100


def round_half_up(value: float) -> int:
    """Round .5 upwards, unlike the builtin ``round`` which rounds half to even."""
    return int(math.floor(value + 0.5))


def match_keywords(resume_text: str, job_keywords: Sequence[str]) -> KeywordMatch:
    # Plain substring test: "java" matches a resume that only says "javascript".
    lowered = (resume_text or "").lower()
    result = KeywordMatch()
    for keyword in job_keywords:
        if keyword.lower() in lowered:
            result.matched.append(keyword)
        else:
            result.missing.append(keyword)
    return result


def composite_score(keyword_score: float, formatting_score: int, rules: AnalysisRules = DEFAULT_RULES) -> int:
    raw = keyword_score * rules.keyword_weight + formatting_score * rules.formatting_weight
    return max(0, min(100, round_half_up(raw)))


def analyze_ats(resume_text: str, job_description: str, rules: AnalysisRules = DEFAULT_RULES) -> AtsResult:
    resume_keywords = extract_keywords(resume_text, rules)
    job_keywords = extract_job_keywords(job_description, rules)

    match = match_keywords(resume_text, job_keywords)
    keyword_score = match.score
    formatting_analysis = analyze_formatting(resume_text, rules)
    ats_score = composite_score(keyword_score, formatting_analysis.score, rules)

    logger.debug(
        "ats_analysis resume_keywords=%s job_keywords=%s matched=%s missing=%s keyword_score=%.1f formatting=%s ats=%s",
        len(resume_keywords),
        len(job_keywords),
        len(match.matched),
        len(match.missing),
        keyword_score,
        formatting_analysis.score,
        ats_score,
    )

    cap = rules.keyword_list_cap
    return AtsResult(
        ats_score=ats_score,
        keyword_analysis=KeywordAnalysis(
            matched_keywords=match.matched[:cap],
            missing_keywords=match.missing[:cap],
            keyword_density=round_half_up(keyword_score),
        ),
        formatting_analysis=formatting_analysis,
        improvement_tips=generate_improvement_tips(
            match.matched,
            match.missing,
            formatting_analysis,
            ats_score,
            rules,
        ),
    )

from __future__ import annotations

from functools import lru_cache
from typing import Sequence

from app.schemas.analysis import AtsResult, FormattingAnalysis

from . import formatting, keywords, scorer, tips
from .rules import AnalysisRules, get_rules


class AtsEngine:
    """Resume analysis bound to one immutable rules table.

    Instances hold no mutable state, so a single engine can serve concurrent
    requests.
    """

    def __init__(self, rules: AnalysisRules | None = None) -> None:
        self._rules = rules if rules is not None else get_rules()

    @property
    def rules(self) -> AnalysisRules:
        return self._rules

    def extract_keywords(self, text: str) -> list[str]:
        return keywords.extract_keywords(text, self._rules)

    def extract_job_keywords(self, job_description: str) -> list[str]:
        return keywords.extract_job_keywords(job_description, self._rules)

    def analyze_formatting(self, resume_text: str) -> FormattingAnalysis:
        return formatting.analyze_formatting(resume_text, self._rules)

    def generate_improvement_tips(
        self,
        matched_keywords: Sequence[str],
        missing_keywords: Sequence[str],
        formatting_analysis: FormattingAnalysis,
        ats_score: int,
    ) -> list[str]:
        return tips.generate_improvement_tips(
            matched_keywords,
            missing_keywords,
            formatting_analysis,
            ats_score,
            self._rules,
        )

    def analyze(self, resume_text: str, job_description: str) -> AtsResult:
        return scorer.analyze_ats(resume_text, job_description, self._rules)


@lru_cache(maxsize=1)
def get_default_engine() -> AtsEngine:
    return AtsEngine(get_rules())

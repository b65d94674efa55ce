from __future__ import annotations

from typing import Sequence

from app.schemas.analysis import FormattingAnalysis

from .rules import DEFAULT_RULES, AnalysisRules

WEAK_ALIGNMENT_TIP = (
    "Your resume lacks key skills mentioned in the job description. "
    "Review and align your skills section."
)
LOW_SCORE_TIPS = (
    "Consider tailoring your resume more specifically to this job description",
    "Use exact phrases from the job posting where applicable",
)
MID_SCORE_TIPS = (
    "Good start! Focus on incorporating more technical keywords",
    "Ensure your most relevant experience is prominently displayed",
)
HIGH_SCORE_TIPS = ("Strong match! Fine-tune by adding any missing critical keywords",)
BEST_PRACTICE_TIPS = (
    "Use standard section headings (Experience, Education, Skills)",
    "Avoid graphics, tables, and complex formatting that ATS may not parse",
    "Save your resume as a .docx or .pdf file for best compatibility",
)


def score_band_tips(ats_score: int) -> tuple[str, ...]:
    if ats_score < 50:
        return LOW_SCORE_TIPS
    if ats_score < 70:
        return MID_SCORE_TIPS
    return HIGH_SCORE_TIPS


def generate_improvement_tips(
    matched_keywords: Sequence[str],
    missing_keywords: Sequence[str],
    formatting_analysis: FormattingAnalysis,
    ats_score: int,
    rules: AnalysisRules = DEFAULT_RULES,
) -> list[str]:
    tips: list[str] = []

    if len(missing_keywords) > rules.missing_tip_count:
        top_missing = ", ".join(missing_keywords[: rules.missing_tip_count])
        tips.append(f"Add these important keywords from the job description: {top_missing}")

    if len(matched_keywords) < rules.min_matched_keywords:
        tips.append(WEAK_ALIGNMENT_TIP)

    tips.extend(formatting_analysis.issues)
    tips.extend(score_band_tips(ats_score))

    if len(tips) < rules.min_tips_before_best_practices:
        tips.extend(BEST_PRACTICE_TIPS)

    return tips[: rules.tip_cap]

from __future__ import annotations

import re
from dataclasses import dataclass

from app.schemas.analysis import FormattingAnalysis

from .rules import DEFAULT_RULES, AnalysisRules, compile_pattern

_WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True, slots=True)
class ContactSignals:
    has_email: bool
    has_phone: bool
    has_linkedin: bool

    @property
    def has_contact_info(self) -> bool:
        return self.has_email or self.has_phone


@dataclass(frozen=True, slots=True)
class SectionSignals:
    has_education: bool
    has_experience: bool
    has_skills: bool
    has_summary: bool

    @property
    def has_proper_sections(self) -> bool:
        return self.has_education and self.has_experience and self.has_skills


def count_words(text: str) -> int:
    # Leading/trailing whitespace yields empty pieces that still count.
    return len(_WHITESPACE.split(text or ""))


def detect_contact_signals(resume_text: str, rules: AnalysisRules = DEFAULT_RULES) -> ContactSignals:
    text = resume_text or ""
    return ContactSignals(
        has_email=bool(compile_pattern(rules.email_pattern).search(text)),
        has_phone=bool(compile_pattern(rules.phone_pattern).search(text)),
        has_linkedin=bool(compile_pattern(rules.linkedin_pattern).search(text)),
    )


def detect_sections(resume_text: str, rules: AnalysisRules = DEFAULT_RULES) -> SectionSignals:
    lowered = (resume_text or "").lower()

    def _has(section: str) -> bool:
        pattern = rules.section_patterns.get(section)
        return bool(pattern and compile_pattern(pattern).search(lowered))

    return SectionSignals(
        has_education=_has("education"),
        has_experience=_has("experience"),
        has_skills=_has("skills"),
        has_summary=_has("summary"),
    )


def has_action_verbs(resume_text: str, rules: AnalysisRules = DEFAULT_RULES) -> bool:
    lowered = (resume_text or "").lower()
    return any(verb in lowered for verb in rules.action_verbs)


def has_quantifiable_achievements(resume_text: str, rules: AnalysisRules = DEFAULT_RULES) -> bool:
    return bool(compile_pattern(rules.achievement_pattern).search(resume_text or ""))


def detect_issue_ids(resume_text: str, rules: AnalysisRules = DEFAULT_RULES) -> list[str]:
    """Return the triggered deficiency ids, in the order they are reported."""
    contact = detect_contact_signals(resume_text, rules)
    sections = detect_sections(resume_text, rules)

    issue_ids: list[str] = []
    if not contact.has_email:
        issue_ids.append("missing_email")
    if not contact.has_phone:
        issue_ids.append("missing_phone")
    if not sections.has_education:
        issue_ids.append("missing_education")
    if not sections.has_experience:
        issue_ids.append("missing_experience")
    if not sections.has_skills:
        issue_ids.append("missing_skills")
    if not sections.has_summary:
        issue_ids.append("missing_summary")

    word_count = count_words(resume_text)
    if word_count < rules.min_words:
        issue_ids.append("too_short")
    elif word_count > rules.max_words:
        issue_ids.append("too_long")

    if not has_action_verbs(resume_text, rules):
        issue_ids.append("no_action_verbs")
    if not has_quantifiable_achievements(resume_text, rules):
        issue_ids.append("no_quantifiable_achievements")
    return issue_ids


def analyze_formatting(resume_text: str, rules: AnalysisRules = DEFAULT_RULES) -> FormattingAnalysis:
    contact = detect_contact_signals(resume_text, rules)
    sections = detect_sections(resume_text, rules)
    issue_ids = detect_issue_ids(resume_text, rules)

    score = 100 - sum(rules.penalty(issue_id) for issue_id in issue_ids)
    return FormattingAnalysis(
        has_proper_sections=sections.has_proper_sections,
        has_contact_info=contact.has_contact_info,
        has_education=sections.has_education,
        has_experience=sections.has_experience,
        has_skills=sections.has_skills,
        issues=[rules.issue_message(issue_id) for issue_id in issue_ids],
        score=max(0, min(100, score)),
    )

from __future__ import annotations

import dataclasses
import re
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

from app.core.config import settings
from app.schemas.analysis import MAX_IMPROVEMENT_TIPS, MAX_LISTED_KEYWORDS

PATTERN_FLAGS = re.IGNORECASE | re.ASCII


class RulesConfigError(RuntimeError):
    pass


@dataclass(frozen=True)
class KeywordPatternGroup:
    category: str
    alternation: str

    @property
    def pattern(self) -> str:
        return rf"\b({self.alternation})\b"


_STOP_WORDS = frozenset(
    {
        "a", "an", "and", "are", "as", "at", "be", "by", "for", "from",
        "has", "he", "in", "is", "it", "its", "of", "on", "that", "the",
        "to", "was", "were", "will", "with", "this", "but", "they",
        "have", "had", "what", "when", "where", "who", "which", "why", "how",
        "all", "each", "every", "both", "few", "more", "most", "other", "some",
        "such", "no", "nor", "not", "only", "own", "same", "so", "than", "too",
        "very", "can", "just", "should", "now", "or", "if", "our", "we", "you",
        "your", "their", "them", "i", "me", "my", "myself", "us", "am",
    }
)

_KEYWORD_PATTERNS = (
    KeywordPatternGroup(
        "languages",
        r"javascript|python|java|c\+\+|c#|ruby|php|swift|kotlin|go|rust|typescript|scala|r",
    ),
    KeywordPatternGroup(
        "frameworks",
        r"react|angular|vue|node\.?js|express|django|flask|spring|rails|laravel|\.net|tensorflow|pytorch",
    ),
    KeywordPatternGroup(
        "databases",
        r"sql|mysql|postgresql|mongodb|redis|elasticsearch|oracle|dynamodb|cassandra",
    ),
    KeywordPatternGroup(
        "cloud_devops",
        r"aws|azure|gcp|docker|kubernetes|jenkins|ci/cd|terraform|ansible|linux",
    ),
    KeywordPatternGroup(
        "tools_concepts",
        r"git|agile|scrum|jira|rest|api|microservices|machine learning|data science|ai",
    ),
    KeywordPatternGroup(
        "soft_skills",
        r"leadership|communication|teamwork|problem.solving|analytical|management",
    ),
)

_SECTION_PATTERNS = MappingProxyType(
    {
        "education": r"(education|academic|degree|university|college|bachelor|master|phd)",
        "experience": r"(experience|employment|work history|professional background)",
        "skills": r"(skills|technologies|technical skills|competencies|proficiencies)",
        "summary": r"(summary|objective|profile|about)",
    }
)

_PENALTIES = MappingProxyType(
    {
        "missing_email": 15,
        "missing_phone": 10,
        "missing_education": 15,
        "missing_experience": 20,
        "missing_skills": 15,
        "missing_summary": 5,
        "too_short": 10,
        "too_long": 5,
        "no_action_verbs": 5,
        "no_quantifiable_achievements": 10,
    }
)

_ISSUE_MESSAGES = MappingProxyType(
    {
        "missing_email": "Missing email address",
        "missing_phone": "Missing phone number",
        "missing_education": "Missing Education section",
        "missing_experience": "Missing Experience section",
        "missing_skills": "Missing Skills section",
        "missing_summary": "Consider adding a Professional Summary section",
        "too_short": "Resume appears too short. Consider adding more detail.",
        "too_long": "Resume may be too long. Consider condensing to 1-2 pages.",
        "no_action_verbs": "Use more action verbs to describe your accomplishments",
        "no_quantifiable_achievements": "Add quantifiable achievements (numbers, percentages, metrics)",
    }
)


@dataclass(frozen=True)
class AnalysisRules:
    """Read-only tables that drive keyword extraction, formatting checks and scoring."""

    stop_words: frozenset[str] = _STOP_WORDS
    min_token_length: int = 3
    keyword_patterns: tuple[KeywordPatternGroup, ...] = _KEYWORD_PATTERNS
    general_keyword_limit: int = 30
    email_pattern: str = r"[a-z0-9._%+-]+@[a-z0-9.-]+\.[a-z]{2,}"
    # re.ASCII narrows \s, so the no-break space PDF text often carries is listed explicitly.
    phone_pattern: str = r"(\+?1?[-.\s\u00a0]?)?\(?\d{3}\)?[-.\s\u00a0]?\d{3}[-.\s\u00a0]?\d{4}"
    linkedin_pattern: str = r"linkedin"
    achievement_pattern: str = r"\d+%|\$\d+|\d+[\s\u00a0]*(years?|months?|projects?|team|people|clients?)"
    section_patterns: Mapping[str, str] = field(default_factory=lambda: _SECTION_PATTERNS)
    action_verbs: tuple[str, ...] = (
        "managed",
        "developed",
        "created",
        "implemented",
        "designed",
        "led",
        "improved",
        "achieved",
        "delivered",
        "coordinated",
    )
    penalties: Mapping[str, int] = field(default_factory=lambda: _PENALTIES)
    issue_messages: Mapping[str, str] = field(default_factory=lambda: _ISSUE_MESSAGES)
    min_words: int = 150
    max_words: int = 1500
    keyword_weight: float = 0.6
    formatting_weight: float = 0.4
    keyword_list_cap: int = MAX_LISTED_KEYWORDS
    tip_cap: int = MAX_IMPROVEMENT_TIPS
    missing_tip_count: int = 5
    min_matched_keywords: int = 5
    min_tips_before_best_practices: int = 5

    def penalty(self, issue_id: str) -> int:
        return int(self.penalties.get(issue_id, 0))

    def issue_message(self, issue_id: str) -> str:
        return self.issue_messages.get(issue_id, issue_id)


DEFAULT_RULES = AnalysisRules()

_MAPPING_FIELDS = {"section_patterns", "penalties", "issue_messages"}
_SET_FIELDS = {"stop_words"}
_TUPLE_FIELDS = {"action_verbs"}
_INT_FIELDS = {
    "min_token_length",
    "general_keyword_limit",
    "min_words",
    "max_words",
    "keyword_list_cap",
    "tip_cap",
    "missing_tip_count",
    "min_matched_keywords",
    "min_tips_before_best_practices",
}
_FLOAT_FIELDS = {"keyword_weight", "formatting_weight"}
_PATTERN_FIELDS = ("email_pattern", "phone_pattern", "linkedin_pattern", "achievement_pattern")
# Response models reject longer lists, so the caps cannot exceed them.
_INT_UPPER_BOUNDS = {
    "keyword_list_cap": MAX_LISTED_KEYWORDS,
    "tip_cap": MAX_IMPROVEMENT_TIPS,
}


@lru_cache(maxsize=256)
def compile_pattern(pattern: str, flags: int = PATTERN_FLAGS) -> re.Pattern[str]:
    return re.compile(pattern, flags)


def _coerce_pattern_groups(raw: Any) -> tuple[KeywordPatternGroup, ...]:
    if not isinstance(raw, list):
        raise RulesConfigError("keyword_patterns must be a list of {category, alternation} entries.")
    groups: list[KeywordPatternGroup] = []
    for entry in raw:
        if not isinstance(entry, dict) or not entry.get("category") or not entry.get("alternation"):
            raise RulesConfigError("Each keyword_patterns entry needs 'category' and 'alternation'.")
        groups.append(KeywordPatternGroup(str(entry["category"]), str(entry["alternation"])))
    return tuple(groups)


def _coerce_int(key: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise RulesConfigError(f"'{key}' must be an integer, got {value!r}.")
    if value < 0:
        raise RulesConfigError(f"'{key}' must not be negative, got {value}.")
    upper = _INT_UPPER_BOUNDS.get(key)
    if upper is not None and value > upper:
        raise RulesConfigError(f"'{key}' must be at most {upper}, got {value}.")
    return value


def _coerce_float(key: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise RulesConfigError(f"'{key}' must be a number, got {value!r}.")
    if value < 0:
        raise RulesConfigError(f"'{key}' must not be negative, got {value}.")
    return float(value)


def _coerce_words(key: str, value: Any) -> list[str]:
    if not isinstance(value, (list, tuple)) or not all(isinstance(item, str) for item in value):
        raise RulesConfigError(f"'{key}' must be a list of strings.")
    return [item.lower() for item in value]


def _coerce_mapping(key: str, value: Any, base: AnalysisRules) -> Mapping[str, Any]:
    if not isinstance(value, dict):
        raise RulesConfigError(f"'{key}' must be a mapping.")
    for name, item in value.items():
        if key == "penalties":
            _coerce_int(f"{key}.{name}", item)
        elif not isinstance(item, str):
            raise RulesConfigError(f"'{key}.{name}' must be a string, got {item!r}.")
    merged = dict(getattr(base, key))
    merged.update(value)
    return MappingProxyType(merged)


def rules_from_mapping(overrides: Mapping[str, Any], base: AnalysisRules = DEFAULT_RULES) -> AnalysisRules:
    """Return ``base`` with the given fields replaced.

    Mapping fields (section patterns, penalties, issue messages) are merged
    key by key; every other field is replaced wholesale. Values are checked
    against the field types and bounds; a bad value raises ``RulesConfigError``.
    """
    known = {item.name for item in dataclasses.fields(AnalysisRules)}
    unknown = sorted(set(overrides) - known)
    if unknown:
        raise RulesConfigError(f"Unknown rules keys: {', '.join(unknown)}")

    changes: dict[str, Any] = {}
    for key, value in overrides.items():
        if key == "keyword_patterns":
            changes[key] = _coerce_pattern_groups(value)
        elif key in _MAPPING_FIELDS:
            changes[key] = _coerce_mapping(key, value, base)
        elif key in _SET_FIELDS:
            changes[key] = frozenset(_coerce_words(key, value))
        elif key in _TUPLE_FIELDS:
            changes[key] = tuple(_coerce_words(key, value))
        elif key in _INT_FIELDS:
            changes[key] = _coerce_int(key, value)
        elif key in _FLOAT_FIELDS:
            changes[key] = _coerce_float(key, value)
        elif key in _PATTERN_FIELDS:
            if not isinstance(value, str) or not value:
                raise RulesConfigError(f"'{key}' must be a non-empty string.")
            changes[key] = value

    for name, pattern in _iter_patterns(changes):
        try:
            compile_pattern(pattern)
        except re.error as exc:
            raise RulesConfigError(f"Invalid regular expression for '{name}': {exc}") from exc

    rules = dataclasses.replace(base, **changes)
    if rules.min_words > rules.max_words:
        raise RulesConfigError(f"min_words ({rules.min_words}) must not exceed max_words ({rules.max_words}).")
    return rules


def _iter_patterns(changes: Mapping[str, Any]):
    for group in changes.get("keyword_patterns", ()):
        yield f"keyword_patterns.{group.category}", group.pattern
    for name, pattern in changes.get("section_patterns", {}).items():
        yield f"section_patterns.{name}", pattern
    for key in _PATTERN_FIELDS:
        if key in changes:
            yield key, changes[key]


def load_rules(path: str | Path) -> AnalysisRules:
    """Load rule overrides from a YAML file on top of the defaults."""
    rules_path = Path(path)
    if not rules_path.exists():
        raise RulesConfigError(f"Rules config not found at '{rules_path}'.")

    try:
        import yaml  # type: ignore[import-not-found]
    except Exception as exc:
        raise RulesConfigError(
            "Unable to parse rules config because PyYAML is unavailable. "
            "Install dependency: PyYAML."
        ) from exc

    try:
        raw = rules_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise RulesConfigError(f"Failed to read rules config '{rules_path}': {exc}") from exc

    try:
        parsed = yaml.safe_load(raw)
    except yaml.YAMLError as exc:  # type: ignore[attr-defined]
        raise RulesConfigError(f"Invalid YAML in rules config '{rules_path}': {exc}") from exc

    if parsed is None:
        return DEFAULT_RULES
    if not isinstance(parsed, dict):
        raise RulesConfigError(f"Invalid rules config '{rules_path}': expected a top-level mapping.")
    return rules_from_mapping(parsed)


@lru_cache(maxsize=1)
def get_rules() -> AnalysisRules:
    if settings.ats_rules_path:
        return load_rules(settings.ats_rules_path)
    return DEFAULT_RULES


__all__ = [
    "AnalysisRules",
    "DEFAULT_RULES",
    "KeywordPatternGroup",
    "RulesConfigError",
    "compile_pattern",
    "get_rules",
    "load_rules",
    "rules_from_mapping",
]

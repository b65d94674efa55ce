from __future__ import annotations

import re
from collections import Counter

from .rules import DEFAULT_RULES, AnalysisRules, compile_pattern

_NON_KEYWORD_CHARS = re.compile(r"[^a-z0-9\s+#.]")
_WHITESPACE = re.compile(r"\s+")


def tokenize(text: str) -> list[str]:
    lowered = (text or "").lower()
    cleaned = _NON_KEYWORD_CHARS.sub(" ", lowered)
    # Inner and leading dots survive ("node.js", ".net"); sentence-final ones do not.
    tokens = (token.rstrip(".") for token in _WHITESPACE.split(cleaned))
    return [token for token in tokens if token]


def extract_keywords(text: str, rules: AnalysisRules = DEFAULT_RULES) -> list[str]:
    """Return unique keywords of ``text`` ranked by frequency.

    Tokens shorter than ``rules.min_token_length`` and stop words are dropped.
    Ties keep first-occurrence order: ``Counter`` preserves insertion order and
    ``sorted`` is stable.
    """
    counts = Counter(
        token
        for token in tokenize(text)
        if len(token) >= rules.min_token_length and token not in rules.stop_words
    )
    return sorted(counts, key=lambda token: counts[token], reverse=True)


def extract_pattern_keywords(text: str, rules: AnalysisRules = DEFAULT_RULES) -> dict[str, list[str]]:
    """Return curated domain terms found in ``text``, grouped by pattern category."""
    lowered = (text or "").lower()
    found: dict[str, list[str]] = {}
    for group in rules.keyword_patterns:
        pattern = compile_pattern(group.pattern)
        hits: list[str] = []
        for match in pattern.finditer(lowered):
            term = match.group(0).lower()
            if term not in hits:
                hits.append(term)
        if hits:
            found.setdefault(group.category, []).extend(hits)
    return found


def extract_job_keywords(job_description: str, rules: AnalysisRules = DEFAULT_RULES) -> list[str]:
    """Return the deduplicated keyword set of a job description.

    Pattern terms come first, in pattern-group order and match position,
    followed by the highest-ranked general keywords.
    """
    keywords: dict[str, None] = {}
    for terms in extract_pattern_keywords(job_description, rules).values():
        for term in terms:
            keywords.setdefault(term, None)

    for keyword in extract_keywords(job_description, rules)[: rules.general_keyword_limit]:
        keywords.setdefault(keyword, None)

    return list(keywords)

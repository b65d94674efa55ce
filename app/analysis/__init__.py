from .engine import AtsEngine, get_default_engine
from .formatting import analyze_formatting
from .keywords import extract_job_keywords, extract_keywords
from .rules import DEFAULT_RULES, AnalysisRules, RulesConfigError, load_rules
from .scorer import analyze_ats
from .tips import generate_improvement_tips

__all__ = [
    "AnalysisRules",
    "AtsEngine",
    "DEFAULT_RULES",
    "RulesConfigError",
    "analyze_ats",
    "analyze_formatting",
    "extract_job_keywords",
    "extract_keywords",
    "generate_improvement_tips",
    "get_default_engine",
    "load_rules",
]

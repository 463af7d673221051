"""
Heuristic code-quality analyzer
"""

from .engine import CodeAnalyzer, FunctionTracker, analyze
from .exceptions import InvalidInputError
from .models import Finding, Language, Report, Severity
from .rules import CATALOG, RULES_BY_SCOPE, Rule, RuleKind, applicable_rules, find_line_number

__all__ = [
    "CATALOG",
    "RULES_BY_SCOPE",
    "CodeAnalyzer",
    "Finding",
    "FunctionTracker",
    "InvalidInputError",
    "Language",
    "Report",
    "Rule",
    "RuleKind",
    "Severity",
    "analyze",
    "applicable_rules",
    "find_line_number",
]

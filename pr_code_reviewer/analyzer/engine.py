"""Heuristic code analyzer.

The analyzer makes two passes over the submitted text. The first applies the
whole-text rules of the catalog once each. The second walks the text line by
line, applying the per-line rules and tracking how long the current function
has been running. Findings are folded into a quality score, an overall
severity and a list of recommendations.
"""

from dataclasses import dataclass

from ..utils import get_logger
from .exceptions import InvalidInputError
from .models import Finding, Language, Report, Severity
from .rules import CATALOG, FUNCTION_MARKERS, MAX_FUNCTION_LINES, LineContext, Rule, RuleKind, applicable_rules

logger = get_logger(__name__)

BASE_SCORE = 85
CLEAN_SCORE = 95

CLEAN_RECOMMENDATION = "Code looks good! No major issues detected."
REVIEW_RECOMMENDATION = "Review and fix the identified issues to improve code quality"
LANGUAGE_RECOMMENDATIONS = {
    Language.JAVASCRIPT: (
        "Consider using ESLint for automated code quality checking",
        "Consider migrating to TypeScript for better type safety",
    ),
    Language.TYPESCRIPT: ("Consider using ESLint for automated code quality checking",),
    Language.PYTHON: (
        "Use pylint or flake8 for code quality analysis",
        "Consider adding type hints for better code documentation",
    ),
}
CLOSING_RECOMMENDATIONS = (
    "Add unit tests to ensure code reliability",
    "Use proper error handling and logging",
)


@dataclass(frozen=True)
class FunctionTracker:
    """Line-scan state for the function-length heuristic."""

    line_count: int = 0
    reported: bool = False

    def advance(self, line: str) -> tuple["FunctionTracker", bool]:
        """Consume one trimmed line.

        Returns the next state and whether the long-function finding fires on
        this line. The finding fires at most once per scan.
        """
        line_count = self.line_count
        fire = False

        if any(marker in line for marker in FUNCTION_MARKERS):
            line_count = 1
        elif line_count > 0:
            line_count += 1
            fire = line_count > MAX_FUNCTION_LINES and not self.reported

        if line in ("}", "") or "return" in line:
            line_count = 0

        return FunctionTracker(line_count, self.reported or fire), fire


@dataclass(frozen=True)
class _Hit:
    rule: Rule
    finding: Finding


class CodeAnalyzer:
    """Applies the rule catalog to source text and builds a report."""

    def __init__(self, rules: tuple[Rule, ...] = CATALOG) -> None:
        """Initialize analyzer.

        Args:
        ----
            rules: Rule catalog to evaluate, in reporting order

        """
        self.rules = rules

    def analyze(self, text: str, language: Language | str | None, context_label: str = "") -> Report:
        """Analyze source text.

        Args:
        ----
            text: Source text, typically the flattened diff of a pull request
            language: Declared language; unknown values only get universal rules
            context_label: Free-form label copied into the report

        Returns:
        -------
            Report with score, severity, findings and recommendations

        Raises:
        ------
            InvalidInputError: If text is not a string

        """
        if not isinstance(text, str):
            msg = f"Expected source text as str, got {type(text).__name__}"
            raise InvalidInputError(msg)

        resolved = Language.parse(language)
        rules = applicable_rules(resolved, self.rules)
        logger.debug("Analyzing %d characters of %s code", len(text), resolved.value)

        lines = text.split("\n")
        hits = self._scan_text(text, lines, rules)
        hits.extend(self._scan_lines(text, lines, rules))

        report = self._build_report(hits, resolved, context_label)
        logger.info(
            "Analysis complete: %d issues found, quality score: %d",
            report.issues_count,
            report.quality_score,
        )
        return report

    def _scan_text(self, text: str, lines: list[str], rules: list[Rule]) -> list[_Hit]:
        hits = []
        for rule in rules:
            if rule.kind is not RuleKind.TEXT:
                continue
            line = rule.check(text, lines)
            if line is not None:
                hits.append(_Hit(rule, rule.finding(line)))
        return hits

    def _scan_lines(self, text: str, lines: list[str], rules: list[Rule]) -> list[_Hit]:
        line_rules = [rule for rule in rules if rule.kind is RuleKind.LINE]
        length_rules = [rule for rule in rules if rule.kind is RuleKind.FUNCTION_LENGTH]
        has_error_handling = "catch" in text or "try" in text

        hits = []
        tracker = FunctionTracker()
        for index, raw_line in enumerate(lines):
            line = raw_line.strip()
            number = index + 1

            tracker, too_long = tracker.advance(line)
            if too_long:
                hits.extend(_Hit(rule, rule.finding(number)) for rule in length_rules)

            ctx = LineContext(
                number=number,
                line=line,
                next_line=lines[index + 1].strip() if index + 1 < len(lines) else None,
                has_error_handling=has_error_handling,
            )
            for rule in line_rules:
                reported_line = rule.check(ctx)
                if reported_line is not None:
                    hits.append(_Hit(rule, rule.finding(reported_line)))
        return hits

    def _build_report(self, hits: list[_Hit], language: Language, context_label: str) -> Report:
        findings = tuple(hit.finding for hit in hits)
        recommendations = [REVIEW_RECOMMENDATION] if findings else [CLEAN_RECOMMENDATION]
        recommendations.extend(LANGUAGE_RECOMMENDATIONS.get(language, ()))
        recommendations.extend(CLOSING_RECOMMENDATIONS)

        if not findings:
            return Report(
                quality_score=CLEAN_SCORE,
                severity=Severity.LOW,
                findings=findings,
                recommendations=tuple(recommendations),
                context_label=context_label,
            )

        penalty = sum(hit.rule.penalty for hit in hits)
        return Report(
            quality_score=max(0, BASE_SCORE - penalty),
            severity=Severity.highest([finding.severity for finding in findings]),
            findings=findings,
            recommendations=tuple(recommendations),
            context_label=context_label,
        )


_default_analyzer = CodeAnalyzer()


def analyze(text: str, language: Language | str | None, context_label: str = "") -> Report:
    """Analyze ``text`` with the built-in rule catalog."""
    return _default_analyzer.analyze(text, language, context_label)

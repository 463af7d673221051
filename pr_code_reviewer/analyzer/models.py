"""Value objects produced by the code analyzer."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Severity(str, Enum):
    """Finding severity, ordered from least to most severe."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        """Position of the severity in the low < medium < high < critical ordering."""
        return _SEVERITY_RANKS[self]

    @classmethod
    def highest(cls, severities: list["Severity"]) -> "Severity":
        """Return the most severe entry, or LOW when there is none."""
        return max(severities, key=lambda severity: severity.rank, default=cls.LOW)


_SEVERITY_RANKS = {
    Severity.LOW: 0,
    Severity.MEDIUM: 1,
    Severity.HIGH: 2,
    Severity.CRITICAL: 3,
}


class Language(str, Enum):
    """Source languages the rule catalog knows about."""

    JAVASCRIPT = "javascript"
    TYPESCRIPT = "typescript"
    PYTHON = "python"
    JAVA = "java"
    OTHER = "other"

    @classmethod
    def parse(cls, value: "Language | str | None") -> "Language":
        """Map a declared language to a member, falling back to OTHER."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return cls.OTHER
        try:
            return cls(value.strip().lower())
        except ValueError:
            return cls.OTHER


@dataclass(frozen=True)
class Finding:
    """A single issue detected in the analyzed text."""

    title: str
    description: str
    severity: Severity
    line: int = 1

    def to_dict(self) -> dict[str, Any]:
        """Convert finding to dictionary."""
        return {
            "title": self.title,
            "description": self.description,
            "severity": self.severity.value,
            "line": self.line,
        }


@dataclass(frozen=True)
class Report:
    """Outcome of one analyzer run."""

    quality_score: int
    severity: Severity
    findings: tuple[Finding, ...] = field(default_factory=tuple)
    recommendations: tuple[str, ...] = field(default_factory=tuple)
    context_label: str = ""

    @property
    def issues_count(self) -> int:
        return len(self.findings)

    @property
    def summary(self) -> str:
        plural = "" if self.issues_count == 1 else "s"
        return (
            f"Code analysis completed. Found {self.issues_count} issue{plural} "
            f"with overall {self.severity.value} severity."
        )

    def feedback_dict(self) -> dict[str, Any]:
        """Feedback document stored alongside a persisted review."""
        return {
            "summary": self.summary,
            "issues": [finding.to_dict() for finding in self.findings],
            "recommendations": list(self.recommendations),
            "issues_count": self.issues_count,
        }

    def to_dict(self) -> dict[str, Any]:
        """Convert report to dictionary."""
        return {
            "quality_score": self.quality_score,
            "severity": self.severity.value,
            "summary": self.summary,
            "context_label": self.context_label,
            "findings": [finding.to_dict() for finding in self.findings],
            "recommendations": list(self.recommendations),
            "issues_count": self.issues_count,
        }

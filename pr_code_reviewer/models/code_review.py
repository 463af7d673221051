"""Code review data model."""

from datetime import UTC, datetime

from sqlalchemy import JSON, Column, DateTime, Index, Integer, String, Text

from pr_code_reviewer.analyzer import Report
from pr_code_reviewer.utils.database import Base


def _utcnow() -> datetime:
    return datetime.now(UTC)


class CodeReview(Base):
    """Code review model representing one stored analyzer run."""

    __tablename__ = "code_reviews"

    id = Column(Integer, primary_key=True, autoincrement=True)
    repository_name = Column(String(255), index=True)
    pr_number = Column(Integer, index=True)
    pr_title = Column(Text)
    code_content = Column(Text, nullable=False, default="")
    language = Column(String(50), nullable=False)
    review_status = Column(String(50), nullable=False, default="completed", index=True)
    severity = Column(String(20), nullable=False, index=True)
    quality_score = Column(Integer, nullable=False)
    issues_count = Column(Integer, nullable=False, default=0)
    ai_feedback = Column(JSON, nullable=False, default=dict)

    # Timestamps
    created_at = Column(DateTime, default=_utcnow, nullable=False)
    completed_at = Column(DateTime)

    __table_args__ = (
        Index("idx_code_reviews_repository_pr", "repository_name", "pr_number"),
    )

    def __repr__(self) -> str:
        return f"<CodeReview(id={self.id}, repository='{self.repository_name}', pr={self.pr_number})>"

    def to_dict(self):
        """Convert model to dictionary."""
        return {
            "id": self.id,
            "repository_name": self.repository_name,
            "pr_number": self.pr_number,
            "pr_title": self.pr_title,
            "language": self.language,
            "review_status": self.review_status,
            "severity": self.severity,
            "quality_score": self.quality_score,
            "issues_count": self.issues_count,
            "ai_feedback": self.ai_feedback,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
        }

    @classmethod
    def from_report(
        cls,
        report: Report,
        code: str,
        language: str,
        repository_name: str | None = None,
        pr_number: int | None = None,
        max_code_length: int = 10000,
    ):
        """Create instance from an analyzer report.

        Stored code is truncated to ``max_code_length`` characters.
        """
        now = _utcnow()
        return cls(
            repository_name=repository_name,
            pr_number=pr_number,
            pr_title=report.context_label or (f"PR #{pr_number} Review" if pr_number else None),
            code_content=code[:max_code_length],
            language=language,
            review_status="completed",
            severity=report.severity.value,
            quality_score=report.quality_score,
            issues_count=report.issues_count,
            ai_feedback=report.feedback_dict(),
            created_at=now,
            completed_at=now,
        )

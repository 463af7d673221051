"""Review service tying pull request fetching, analysis and persistence together."""

from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from pr_code_reviewer.analyzer import Language, Report, analyze
from pr_code_reviewer.config import get_settings
from pr_code_reviewer.github.client import GitHubAPIClient
from pr_code_reviewer.models import CodeReview
from pr_code_reviewer.services.diff_flattener import combine_pull_request_files
from pr_code_reviewer.utils import LoggerMixin


def split_repository(repository: str) -> tuple[str, str]:
    """Split an ``owner/name`` repository slug.

    Raises:
    ------
        ValueError: If the slug does not have exactly two non-empty parts

    """
    parts = repository.strip().split("/") if repository else []
    if len(parts) != 2 or not all(parts):
        msg = f"Repository must be given as owner/name, got {repository!r}"
        raise ValueError(msg)
    return parts[0], parts[1]


class ReviewService(LoggerMixin):
    """Service for reviewing pull requests and raw code."""

    def __init__(self, session: Session | None = None, github_token: str | None = None) -> None:
        """Initialize review service.

        Args:
        ----
            session: Database session used to store reviews, or None to skip storage
            github_token: GitHub token used to fetch pull request changes

        """
        self.session = session
        self.github_token = github_token
        self.settings = get_settings()

    def review_pull_request(self, repository: str, pr_number: int) -> dict[str, Any]:
        """Fetch, analyze and store the changes of a pull request.

        Args:
        ----
            repository: Repository slug (``owner/name``)
            pr_number: Pull request number

        Returns:
        -------
            Report dictionary extended with review context

        Raises:
        ------
            ValueError: If the repository slug is malformed
            NoAnalyzableCodeError: If the pull request has nothing to analyze
            requests.RequestException: If GitHub requests fail

        """
        owner, name = split_repository(repository)
        client = GitHubAPIClient(self.github_token)

        self.logger.info("Fetching changes of %s#%s", repository, pr_number)
        pr_data = client.get_pull_request(owner, name, pr_number)
        files = client.get_pull_request_files(owner, name, pr_number)
        self.logger.info("Found %d changed files in PR #%s", len(files), pr_number)

        head_sha = (pr_data.get("head") or {}).get("sha")
        diff = combine_pull_request_files(
            files,
            pr_number,
            fetch_content=lambda path: client.get_file_content(owner, name, path, head_sha),
        )

        report = analyze(diff.text, diff.language, diff.context_label)
        review = self._store(report, diff.text, diff.language, repository, pr_number)

        result = report.to_dict()
        result.update({
            "analysis_context": diff.context_label,
            "repository": repository,
            "pr_number": pr_number,
            "pr_title": pr_data.get("title"),
            "language": diff.language.value,
            "review_id": review.id if review else None,
        })
        return result

    def analyze_code(self, code: str, language: Language | str | None, context_label: str = "") -> dict[str, Any]:
        """Analyze and store a raw block of code.

        Raises:
        ------
            InvalidInputError: If code is not a string

        """
        report = analyze(code, language, context_label)
        review = self._store(report, code, Language.parse(language))

        result = report.to_dict()
        result["language"] = Language.parse(language).value
        result["review_id"] = review.id if review else None
        return result

    def _store(
        self,
        report: Report,
        code: str,
        language: Language,
        repository: str | None = None,
        pr_number: int | None = None,
    ) -> CodeReview | None:
        """Persist a review, returning None when storage is unavailable or fails."""
        if self.session is None:
            self.logger.info("Database session not available, skipping save")
            return None

        review = CodeReview.from_report(
            report,
            code,
            language.value,
            repository_name=repository,
            pr_number=pr_number,
            max_code_length=self.settings.max_stored_code_length,
        )
        try:
            self.session.add(review)
            self.session.commit()
            self.session.refresh(review)
        except SQLAlchemyError:
            self.logger.exception("Failed to save review")
            self.session.rollback()
            return None

        self.logger.info("Review saved to database: %s", review.id)
        return review

"""Unit tests for API routes."""

from collections.abc import Generator
from unittest.mock import Mock, patch

import pytest
import requests
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from pr_code_reviewer.api.routes import get_db
from pr_code_reviewer.main import app
from pr_code_reviewer.models import CodeReview


@pytest.fixture
def client(session_factory) -> Generator[TestClient, None, None]:
    """Create a test client backed by the in-memory database."""

    def override_get_db() -> Generator[Session, None, None]:
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def mock_github_client(files: list[dict]) -> Mock:
    github = Mock()
    github.get_pull_request.return_value = {"number": 3, "title": "Tweak", "head": {"sha": "abc"}}
    github.get_pull_request_files.return_value = files
    return github


class TestAPIRoutes:
    """Test API routes."""

    def test_api_root_endpoint(self, client) -> None:
        """Test API root endpoint."""
        response = client.get("/api/v1/")
        assert response.status_code == 200
        data = response.json()
        assert "message" in data
        assert "version" in data
        assert "endpoints" in data

    def test_analyze(self, client) -> None:
        """Test analyzing raw code."""
        response = client.post(
            "/api/v1/analyze",
            json={"code": "var x = 1; if (x == 1) { console.log(x); }", "language": "javascript"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["quality_score"] == 62
        assert data["severity"] == "medium"
        assert data["issues_count"] == 3
        assert data["review_id"] is not None

    def test_analyze_defaults_to_universal_rules(self, client) -> None:
        """Test analyzing without a declared language."""
        response = client.post("/api/v1/analyze", json={"code": "eval(x)"})

        assert response.status_code == 200
        assert response.json()["issues_count"] == 0
        assert response.json()["language"] == "other"

    def test_analyze_missing_code(self, client) -> None:
        """Test missing code field."""
        response = client.post("/api/v1/analyze", json={"language": "python"})

        assert response.status_code == 400
        assert "code" in response.json()["detail"]

    def test_analyze_rejects_non_text(self, client) -> None:
        """Test invalid input from the analyzer."""
        response = client.post("/api/v1/analyze", json={"code": None, "language": "python"})
        assert response.status_code == 400

    def test_analyze_rejects_oversized_code(self, client) -> None:
        """Test the input size limit."""
        response = client.post("/api/v1/analyze", json={"code": "x" * 50001})
        assert response.status_code == 413

    def test_review_requires_repository(self, client) -> None:
        """Test missing repository."""
        response = client.post("/api/v1/review", json={"pr_number": 3}, headers={"Authorization": "Bearer tok"})

        assert response.status_code == 400
        assert response.json()["detail"] == "Repository selection is required"

    def test_review_requires_pr_number(self, client) -> None:
        """Test missing pull request number."""
        response = client.post("/api/v1/review", json={"repository": "octo/app"}, headers={"Authorization": "Bearer tok"})

        assert response.status_code == 400
        assert response.json()["detail"] == "Pull Request number is required"

    def test_review_requires_token(self, client) -> None:
        """Test missing GitHub token."""
        response = client.post("/api/v1/review", json={"repository": "octo/app", "pr_number": 3})
        assert response.status_code == 401

    def test_review_bad_repository(self, client) -> None:
        """Test malformed repository slug."""
        response = client.post(
            "/api/v1/review",
            json={"repository": "octo", "pr_number": 3},
            headers={"Authorization": "Bearer tok"},
        )
        assert response.status_code == 400

    def test_review_success(self, client) -> None:
        """Test reviewing a pull request."""
        files = [{"filename": "app.py", "status": "modified", "patch": "+from os import *"}]

        with patch("pr_code_reviewer.services.review_service.GitHubAPIClient") as mock_client_class:
            mock_client_class.return_value = mock_github_client(files)

            response = client.post(
                "/api/v1/review",
                json={"repository": "octo/app", "pr_number": "3"},
                headers={"Authorization": "token tok"},
            )

        mock_client_class.assert_called_once_with("tok")
        assert response.status_code == 200
        data = response.json()
        assert data["repository"] == "octo/app"
        assert data["pr_number"] == 3
        assert data["language"] == "python"
        assert data["analysis_context"] == "PR #3 changes (1 files modified)"
        assert [f["title"] for f in data["findings"]] == ["Wildcard import detected"]
        assert data["quality_score"] == 75

    def test_review_no_analyzable_code(self, client) -> None:
        """Test pull request with nothing to analyze."""
        files = [{"filename": "app.py", "status": "removed"}]

        with patch("pr_code_reviewer.services.review_service.GitHubAPIClient") as mock_client_class:
            mock_client_class.return_value = mock_github_client(files)

            response = client.post(
                "/api/v1/review",
                json={"repository": "octo/app", "pr_number": 3},
                headers={"Authorization": "Bearer tok"},
            )

        assert response.status_code == 400

    def test_review_github_failure(self, client) -> None:
        """Test GitHub request failure."""
        with patch("pr_code_reviewer.services.review_service.GitHubAPIClient") as mock_client_class:
            github = Mock()
            github.get_pull_request.side_effect = requests.ConnectionError("unreachable")
            mock_client_class.return_value = github

            response = client.post(
                "/api/v1/review",
                json={"repository": "octo/app", "pr_number": 3},
                headers={"Authorization": "Bearer tok"},
            )

        assert response.status_code == 502
        assert response.json()["detail"] == "Failed to fetch PR changes from GitHub"

    def test_list_and_get_reviews(self, client, session_factory) -> None:
        """Test reading stored reviews."""
        db = session_factory()
        db.add_all([
            CodeReview(repository_name="octo/app", pr_number=1, language="python", severity="low", quality_score=95),
            CodeReview(repository_name="octo/web", pr_number=2, language="java", severity="high", quality_score=70),
        ])
        db.commit()
        review_id = db.query(CodeReview).filter(CodeReview.pr_number == 2).one().id
        db.close()

        response = client.get("/api/v1/reviews")
        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 2
        assert len(data["reviews"]) == 2

        response = client.get("/api/v1/reviews", params={"repository": "octo/web"})
        assert response.json()["total"] == 1
        assert response.json()["reviews"][0]["pr_number"] == 2

        response = client.get(f"/api/v1/reviews/{review_id}")
        assert response.status_code == 200
        assert response.json()["severity"] == "high"

    def test_get_review_not_found(self, client) -> None:
        """Test missing review."""
        response = client.get("/api/v1/reviews/999")

        assert response.status_code == 404
        assert response.json()["detail"] == "Review not found"

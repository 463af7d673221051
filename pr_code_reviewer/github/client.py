"""GitHub API client for fetching pull request changes."""

import base64
import time
from typing import Any
from urllib.parse import urljoin

import requests

from pr_code_reviewer.config import get_github_headers, get_settings
from pr_code_reviewer.utils import get_logger

logger = get_logger(__name__)
settings = get_settings()


class GitHubAPIClient:
    """GitHub API client with rate limiting and error handling."""

    def __init__(self, access_token: str | None = None, base_url: str | None = None) -> None:
        """Initialize GitHub API client.

        Args:
        ----
            access_token: GitHub personal access token for authentication
            base_url: API root, defaults to the configured GitHub API URL

        """
        self.access_token = access_token or settings.github_token
        self.base_url = (base_url or settings.github_api_base_url).rstrip("/") + "/"
        self.session = requests.Session()
        self.session.headers.update(get_github_headers(self.access_token))

        if not self.access_token:
            logger.warning("No GitHub token provided, using unauthenticated requests")

        # Rate limiting
        self.rate_limit_remaining = None
        self.rate_limit_reset = None
        self.last_request_time = 0.0
        self.request_delay = settings.github_request_delay

    def _check_rate_limit(self) -> None:
        """Check rate limit status and wait if necessary."""
        if self.rate_limit_remaining is not None and self.rate_limit_remaining <= 0:
            wait_time = self.rate_limit_reset - time.time() if self.rate_limit_reset else 60
            if wait_time > 0:
                logger.info("Rate limit exceeded, waiting %.1f seconds", wait_time)
                time.sleep(wait_time + 1)

        # Enforce minimum delay between requests
        time_since_last_request = time.time() - self.last_request_time
        if time_since_last_request < self.request_delay:
            time.sleep(self.request_delay - time_since_last_request)

        self.last_request_time = time.time()

    def _make_request(self, method: str, url: str, **kwargs: Any) -> requests.Response:  # noqa: ANN401
        """Make HTTP request with rate limiting and error handling.

        Args:
        ----
            method: HTTP method (GET, POST, etc.)
            url: Request URL, absolute or relative to the API root
            **kwargs: Additional request parameters

        Returns:
        -------
            requests.Response: Response object

        Raises:
        ------
            requests.RequestException: If request fails

        """
        self._check_rate_limit()

        if not url.startswith(("http://", "https://")):
            url = urljoin(self.base_url, url.lstrip("/"))

        logger.debug("Making %s request to %s", method, url)

        try:
            response = self.session.request(method, url, **kwargs)

            if "X-RateLimit-Remaining" in response.headers:
                self.rate_limit_remaining = int(response.headers["X-RateLimit-Remaining"])
            if "X-RateLimit-Reset" in response.headers:
                self.rate_limit_reset = int(response.headers["X-RateLimit-Reset"])

            response.raise_for_status()

            return response

        except requests.RequestException:
            logger.exception("Request to %s failed", url)
            raise

    def _get_paginated_results(self, url: str, params: dict | None = None) -> list[dict]:
        """Get all results from paginated endpoint.

        Args:
        ----
            url: API endpoint URL
            params: Query parameters

        Returns:
        -------
            List of all results

        """
        all_results = []
        page = 1
        per_page = 100  # Maximum allowed by GitHub

        while True:
            request_params = params.copy() if params else {}
            request_params.update({
                "page": page,
                "per_page": per_page,
            })

            results = self._make_request("GET", url, params=request_params).json()
            if not results:
                break

            all_results.extend(results)

            if len(results) < per_page:
                break

            page += 1

        return all_results

    def get_pull_request(self, owner: str, repo: str, pr_number: int) -> dict:
        """Get pull request details.

        Args:
        ----
            owner: Repository owner
            repo: Repository name
            pr_number: Pull request number

        Returns:
        -------
            Pull request dictionary

        """
        url = f"/repos/{owner}/{repo}/pulls/{pr_number}"

        return self._make_request("GET", url).json()

    def get_pull_request_files(self, owner: str, repo: str, pr_number: int) -> list[dict]:
        """Get files changed in a pull request.

        Args:
        ----
            owner: Repository owner
            repo: Repository name
            pr_number: Pull request number

        Returns:
        -------
            List of file dictionaries with ``filename``, ``status`` and ``patch``

        """
        url = f"/repos/{owner}/{repo}/pulls/{pr_number}/files"

        return self._get_paginated_results(url)

    def get_file_content(self, owner: str, repo: str, path: str, ref: str | None = None) -> str:
        """Get decoded file content at a given ref.

        Args:
        ----
            owner: Repository owner
            repo: Repository name
            path: File path inside the repository
            ref: Commit SHA or branch, defaults to the repository default branch

        Returns:
        -------
            File content as text

        """
        url = f"/repos/{owner}/{repo}/contents/{path}"
        params = {"ref": ref} if ref else None

        data = self._make_request("GET", url, params=params).json()
        return base64.b64decode(data.get("content", "")).decode("utf-8", errors="replace")

    def test_connection(self) -> bool:
        """Test connection to GitHub API.

        Returns
        -------
            True if connection is successful, False otherwise

        """
        try:
            response = self._make_request("GET", "/user")
            return response.status_code == 200
        except requests.RequestException:
            logger.exception("Connection test failed")
            return False

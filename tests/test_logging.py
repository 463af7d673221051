"""Tests for logging helpers."""

import logging

from pr_code_reviewer.services.review_service import ReviewService
from pr_code_reviewer.utils.logging import ROOT_LOGGER_NAME, get_logger, setup_logging


class TestLogging:
    """Test logger naming and configuration."""

    def test_setup_logging_configures_package_logger(self) -> None:
        """Test a single stdout handler on the package logger."""
        root = setup_logging(level="warning")
        setup_logging(level="warning")

        assert root.name == ROOT_LOGGER_NAME
        assert root.level == logging.WARNING
        assert len(root.handlers) == 1
        assert root.propagate is False

    def test_get_logger_nests_under_package(self) -> None:
        """Test that foreign names are placed under the package logger."""
        assert get_logger("pr_code_reviewer.analyzer.engine").name == "pr_code_reviewer.analyzer.engine"
        assert get_logger("__main__").name == "pr_code_reviewer.__main__"

    def test_logger_mixin_name(self) -> None:
        """Test class-scoped logger names."""
        service = ReviewService(session=None)
        assert service.logger.name == "pr_code_reviewer.services.review_service.ReviewService"

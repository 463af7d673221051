"""Turn pull request file listings into text the analyzer can scan."""

import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

from pr_code_reviewer.analyzer import Language
from pr_code_reviewer.utils import get_logger

logger = get_logger(__name__)

CODE_FILE_PATTERN = re.compile(r"\.(js|jsx|ts|tsx|py|java|cpp|c|h|cs|php|go|rs|rb|swift)$", re.IGNORECASE)

# First matching group wins
EXTENSION_LANGUAGES = (
    (("js", "jsx"), Language.JAVASCRIPT),
    (("ts", "tsx"), Language.TYPESCRIPT),
    (("py",), Language.PYTHON),
    (("java",), Language.JAVA),
)
DEFAULT_LANGUAGE = Language.JAVASCRIPT

DIFF_HEADER_PREFIXES = ("@@", "+++", "---")
DIFF_LINE_PREFIXES = ("+", "-", " ")


class NoAnalyzableCodeError(Exception):
    """Raised when a pull request has no changes worth analyzing."""


@dataclass(frozen=True)
class FlattenedDiff:
    """Combined text of a pull request plus what is known about it."""

    text: str
    language: Language
    context_label: str
    file_count: int


def is_code_file(filename: str) -> bool:
    """Check whether a file name has a source code extension."""
    return bool(CODE_FILE_PATTERN.search(filename))


def flatten_patch(patch: str) -> str:
    """Strip unified-diff headers and line prefixes from a patch."""
    lines = []
    for line in patch.split("\n"):
        if line.startswith(DIFF_HEADER_PREFIXES):
            continue
        if line.startswith(DIFF_LINE_PREFIXES):
            line = line[1:]
        lines.append(line)
    return "\n".join(lines)


def detect_language(filenames: Iterable[str]) -> Language:
    """Guess the dominant language of a change set from file extensions."""
    extensions = {name.rsplit(".", 1)[-1].lower() for name in filenames if "." in name}
    for candidates, language in EXTENSION_LANGUAGES:
        if extensions.intersection(candidates):
            return language
    return DEFAULT_LANGUAGE


def combine_pull_request_files(
    files: list[dict[str, Any]],
    pr_number: int,
    fetch_content: Callable[[str], str] | None = None,
) -> FlattenedDiff:
    """Combine the changed files of a pull request into one text.

    Args:
    ----
        files: File entries as returned by the GitHub pull request files API
        pr_number: Pull request number, used for the context label
        fetch_content: Optional callback returning full file content for
            files whose patch is not available

    Returns:
    -------
        FlattenedDiff for the analyzer

    Raises:
    ------
        NoAnalyzableCodeError: If no file contributes any text

    """
    active_files = [file for file in files if file.get("status") != "removed"]
    language = detect_language(file["filename"] for file in files)

    combined = ""
    file_count = 0
    for file in active_files:
        filename = file["filename"]
        if not is_code_file(filename):
            continue

        file_count += 1
        combined += f"\n// === File: {filename} ===\n"

        patch = file.get("patch")
        if patch:
            combined += flatten_patch(patch) + "\n\n"
        elif fetch_content is not None:
            try:
                combined += fetch_content(filename) + "\n\n"
            except Exception:
                logger.warning("Could not fetch content for %s", filename, exc_info=True)

    if combined.strip():
        logger.info("Combined %d code files (%d characters) as %s", file_count, len(combined), language.value)
        return FlattenedDiff(
            text=combined,
            language=language,
            context_label=f"PR #{pr_number} changes ({file_count} files modified)",
            file_count=file_count,
        )

    logger.info("No analyzable code found in PR #%s, falling back to all changes", pr_number)
    fallback = ""
    for file in active_files:
        fallback += f"\n// === File: {file['filename']} ===\n"
        if file.get("patch"):
            fallback += file["patch"] + "\n"

    if not fallback.strip():
        msg = f"Found {len(files)} changed files but no code content to analyze"
        raise NoAnalyzableCodeError(msg)

    return FlattenedDiff(
        text=fallback,
        language=language,
        context_label=f"PR #{pr_number} all changes ({len(files)} files)",
        file_count=len(active_files),
    )

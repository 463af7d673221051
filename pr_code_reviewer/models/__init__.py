"""
Database models for the PR Code Reviewer
"""

from .code_review import CodeReview

__all__ = [
    "CodeReview",
]

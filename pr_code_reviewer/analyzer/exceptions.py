"""Errors raised by the code analyzer."""


class InvalidInputError(ValueError):
    """Raised when the analyzer is called with something that is not source text."""

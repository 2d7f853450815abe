"""
Custom error types for Markdown to Google Docs conversion.

Provides a small exception hierarchy so callers can tell bad input apart
from a token stream the converter could not compile.
"""

# =============================================================================
# Base Exception Hierarchy
# =============================================================================


class DocsMarkdownError(Exception):
    """Base exception for all Markdown to Google Docs errors."""

    pass


# =============================================================================
# Validation Errors
# =============================================================================


class ValidationError(DocsMarkdownError):
    """Raised when input validation fails."""

    pass


# =============================================================================
# Conversion Errors
# =============================================================================


class MarkdownConversionError(DocsMarkdownError):
    """Raised when a Markdown token stream cannot be compiled into requests."""

    def __init__(self, message: str, token_type: str | None = None):
        super().__init__(message)
        self.token_type = token_type


def format_error(operation: str, error: Exception) -> str:
    """Format an error for display to the user."""
    return f"{operation} failed: {error}"

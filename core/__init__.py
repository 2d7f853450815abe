"""Core utilities for Markdown to Google Docs conversion."""

from core.config import ConversionConfig, get_conversion_config, reload_conversion_config
from core.errors import (
    DocsMarkdownError,
    MarkdownConversionError,
    ValidationError,
    format_error,
)
from core.utils import parse_bool_env, validate_positive_int, validate_tab_id

__all__ = [
    "ConversionConfig",
    "DocsMarkdownError",
    "format_error",
    "get_conversion_config",
    "MarkdownConversionError",
    "parse_bool_env",
    "reload_conversion_config",
    "validate_positive_int",
    "validate_tab_id",
    "ValidationError",
]

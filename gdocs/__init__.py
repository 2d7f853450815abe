"""
Google Docs Markdown Package

This package compiles Markdown into Google Docs API batchUpdate requests.
"""

from gdocs.markdown_parser import (
    MarkdownToDocsConverter,
    convert_markdown_to_requests,
    create_markdown_parser,
)

__all__ = [
    "MarkdownToDocsConverter",
    "convert_markdown_to_requests",
    "create_markdown_parser",
]

#!/usr/bin/env python3
"""
Diagnostic Script: Dump Markdown Conversion Requests

Converts a Markdown file (or stdin) and prints the Google Docs batchUpdate
requests as JSON, followed by a count per request type. Nothing is sent to
the API.

Run with: uv run python scripts/dump_markdown_requests.py notes.md
"""

import json
import sys
from collections import Counter
from typing import Any

from core.errors import DocsMarkdownError, format_error
from gdocs.markdown_parser import MarkdownToDocsConverter


def summarize_requests(requests: list[dict[str, Any]]) -> dict[str, int]:
    """Count requests by type (insertText, updateTextStyle, ...), in first-seen order."""
    return dict(Counter(next(iter(request)) for request in requests))


def main(argv: list[str] | None = None) -> int:
    args = sys.argv[1:] if argv is None else argv

    if args and args[0] != "-":
        with open(args[0], encoding="utf-8") as f:
            markdown = f.read()
    else:
        markdown = sys.stdin.read()

    try:
        requests = MarkdownToDocsConverter().convert(markdown)
    except DocsMarkdownError as e:
        print(format_error("Markdown conversion", e), file=sys.stderr)
        return 1

    print(json.dumps(requests, indent=2, ensure_ascii=False))

    print("\n" + "-" * 40)
    print(f"SUMMARY: {len(requests)} requests")
    for request_type, count in summarize_requests(requests).items():
        print(f"  {request_type}: {count}")

    return 0


if __name__ == "__main__":
    sys.exit(main())

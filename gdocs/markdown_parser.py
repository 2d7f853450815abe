"""
Markdown to Google Docs Converter

This module provides the `MarkdownToDocsConverter` class that translates Markdown
into Google Docs API `batchUpdate` requests. It supports headings (optionally a
TITLE), paragraphs, bold/italic/strikethrough, inline code, links, bullet,
numbered and task lists with nesting, fenced and indented code blocks, and
horizontal rules. Tables and blockquotes are skipped.

The converter follows the "Index Tracker" pattern: a cursor tracks where the next
insertion lands, every piece of text becomes one insertText at the cursor, and
style requests are derived from ranges recorded along the way. Insertions are
returned first, in emission order, followed by every style/structure request.
Insertions are computed against the document as it grows, while style requests
address the final (post-insertion) indices.

Example:
    >>> converter = MarkdownToDocsConverter()
    >>> requests = converter.convert("# Hello World\n\nThis is **bold** text.")
    >>> # requests contains insertText requests, then updateParagraphStyle + updateTextStyle

See Also:
    - `gdocs/range_finalizer.py` for how recorded ranges become style requests
    - `gdocs/docs_helpers.py` for the request builders and 1x1 table layout constants
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from markdown_it import MarkdownIt
from mdit_py_plugins.front_matter import front_matter_plugin

from core.config import ConversionConfig, get_conversion_config
from core.errors import MarkdownConversionError
from core.utils import validate_positive_int, validate_tab_id
from gdocs.conversion_context import (
    CodeBlockRange,
    ConversionContext,
    FormattingState,
    ListState,
    ParagraphRange,
    PendingListItem,
    SpanRange,
    TextRange,
)
from gdocs.docs_helpers import (
    BULLET_PRESET_CHECKBOX,
    BULLET_PRESET_ORDERED,
    BULLET_PRESET_UNORDERED,
    CELL_CONTENT_OFFSET,
    EMPTY_1x1_TABLE_SIZE,
    create_insert_table_request,
    create_insert_text_request,
    utf16_len,
)
from gdocs.range_finalizer import finalize_formatting

if TYPE_CHECKING:
    from markdown_it.token import Token

logger = logging.getLogger(__name__)

# Named style mappings for headings (h1 -> HEADING_1, etc.)
HEADING_STYLE_MAP: dict[str, str] = {
    "h1": "HEADING_1",
    "h2": "HEADING_2",
    "h3": "HEADING_3",
    "h4": "HEADING_4",
    "h5": "HEADING_5",
    "h6": "HEADING_6",
}
TITLE_STYLE = "TITLE"

# The Docs API reads list nesting from leading TABs when bullets are created
LIST_INDENT = "\t"

# "[ ] " / "[x] " at the start of a list item's first text
TASK_PREFIX_PATTERN = re.compile(r"^\[( |x|X)\]\s+")

# Tokens with no Google Docs mapping; consumed without output or state change
SKIPPED_TOKEN_TYPES = frozenset(
    {
        "table_open",
        "table_close",
        "thead_open",
        "thead_close",
        "tbody_open",
        "tbody_close",
        "tr_open",
        "tr_close",
        "th_open",
        "th_close",
        "td_open",
        "td_close",
        "blockquote_open",
        "blockquote_close",
        "front_matter",
        "html_block",
        "html_inline",
        "image",
    }
)


def create_markdown_parser(linkify: bool = True, front_matter: bool = False) -> MarkdownIt:
    """
    Build the markdown-it parser that feeds the converter.

    CommonMark base with GFM-style extensions:
    - table: GFM tables (tokenized so they can be skipped cleanly)
    - strikethrough: ~~text~~ syntax
    - linkify: bare URLs become links (needs linkify-it-py)
    - front matter (opt-in): a leading YAML block becomes one skippable token.
      Off by default: a document that opens with a `---` rule and has
      another one further down would be read as front matter.
    """
    md = MarkdownIt(
        "commonmark",
        {"html": False, "linkify": linkify, "typographer": False, "breaks": False},
    )
    md.enable(["table", "strikethrough"])
    if linkify:
        md.enable("linkify")
    if front_matter:
        md.use(front_matter_plugin)
    return md


class MarkdownToDocsConverter:
    """
    Converts Markdown text into Google Docs API batchUpdate requests.

    The converter itself only holds the parser and configuration. Every call to
    `convert()` or `convert_tokens()` builds a fresh `ConversionContext`, so one
    instance can be reused, including from several threads at once.

    Attributes:
        md: The markdown-it parser instance.
        config: Styling and default options.

    Example:
        >>> converter = MarkdownToDocsConverter()
        >>> requests = converter.convert("# Title\n\n**Bold** text")
        >>> len([r for r in requests if "insertText" in r])  # "Title", "\n", "Bold", " text", "\n"
        5
    """

    def __init__(self, config: ConversionConfig | None = None) -> None:
        self.config = config or get_conversion_config()
        self.md = create_markdown_parser(linkify=self.config.linkify, front_matter=self.config.front_matter)

    def convert(
        self,
        markdown_text: str,
        start_index: int = 1,
        tab_id: str | None = None,
        first_heading_as_title: bool | None = None,
    ) -> list[dict[str, Any]]:
        """
        Convert Markdown text to Google Docs API requests.

        Args:
            markdown_text: The Markdown string to convert.
            start_index: The index in the document where content is inserted (1-based).
            tab_id: Optional tab ID; copied onto every request location and range.
            first_heading_as_title: Style the first H1 as TITLE instead of HEADING_1.
                                    None uses the configured default.

        Returns:
            insertText/insertTable requests in emission order, followed by all
            style and structure requests. Empty for empty or whitespace-only input.

        Raises:
            ValidationError: If start_index or tab_id are invalid.
            MarkdownConversionError: If the token stream cannot be compiled.
        """
        start_index = validate_positive_int(start_index, "start_index")
        tab_id = validate_tab_id(tab_id)

        if not markdown_text or not markdown_text.strip():
            return []

        tokens: list[Token] = self.md.parse(markdown_text)
        return self.convert_tokens(tokens, start_index, tab_id, first_heading_as_title)

    def convert_tokens(
        self,
        tokens: Iterable[Token],
        start_index: int = 1,
        tab_id: str | None = None,
        first_heading_as_title: bool | None = None,
    ) -> list[dict[str, Any]]:
        """
        Compile an already tokenized markdown-it token stream into requests.

        Accepts the block-level token list produced by `MarkdownIt.parse()`;
        inline tokens are walked through their children.
        """
        start_index = validate_positive_int(start_index, "start_index")
        tab_id = validate_tab_id(tab_id)
        if first_heading_as_title is None:
            first_heading_as_title = self.config.first_heading_as_title

        context = ConversionContext(
            current_index=start_index,
            tab_id=tab_id,
            first_heading_as_title=first_heading_as_title,
        )

        for token in tokens:
            self._handle_token(token, context)

        try:
            finalize_formatting(context, self.config)
        except Exception as e:
            raise MarkdownConversionError(f"Failed to convert markdown: {e}") from e

        logger.info(
            f"Converted markdown: {len(context.insert_requests)} insert requests, "
            f"{len(context.format_requests)} formatting requests, cursor={context.current_index}"
        )
        return context.insert_requests + context.format_requests

    def _handle_token(self, token: Token, context: ConversionContext) -> None:
        """Dispatch one token, wrapping unexpected failures in MarkdownConversionError."""
        try:
            self._dispatch_token(token, context)
        except MarkdownConversionError:
            raise
        except Exception as e:
            raise MarkdownConversionError(f"Failed to convert markdown: {e}", token_type=token.type) from e

    def _dispatch_token(self, token: Token, context: ConversionContext) -> None:
        logger.debug(f"Token: type={token.type}, tag={token.tag}, nesting={token.nesting}")

        if token.type == "inline":
            for child in token.children or []:
                self._handle_token(child, context)
        elif token.type == "text":
            self._handle_text(token.content, context)
        elif token.type == "code_inline":
            context.push_formatting(FormattingState(code=True))
            self._handle_text(token.content, context)
            context.pop_formatting("code")
        elif token.type == "strong_open":
            context.push_formatting(FormattingState(bold=True))
        elif token.type == "strong_close":
            context.pop_formatting("bold")
        elif token.type == "em_open":
            context.push_formatting(FormattingState(italic=True))
        elif token.type == "em_close":
            context.pop_formatting("italic")
        elif token.type == "s_open":
            context.push_formatting(FormattingState(strikethrough=True))
        elif token.type == "s_close":
            context.pop_formatting("strikethrough")
        elif token.type == "link_open":
            href = token.attrGet("href")
            if href:
                context.push_formatting(FormattingState(link=str(href)))
        elif token.type == "link_close":
            context.pop_formatting("link")
        elif token.type == "softbreak":
            # Soft line breaks become spaces in Google Docs
            context.insert_text(" ")
        elif token.type == "hardbreak":
            context.insert_text("\n")
        elif token.type == "heading_open":
            self._handle_heading_open(token, context)
        elif token.type == "heading_close":
            self._handle_heading_close(context)
        elif token.type == "paragraph_open":
            self._handle_paragraph_open(context)
        elif token.type == "paragraph_close":
            self._handle_paragraph_close(context)
        elif token.type == "bullet_list_open":
            self._handle_list_open("bullet", context)
        elif token.type == "ordered_list_open":
            self._handle_list_open("ordered", context)
        elif token.type in ("bullet_list_close", "ordered_list_close"):
            self._handle_list_close(context)
        elif token.type == "list_item_open":
            self._handle_list_item_open(context)
        elif token.type == "list_item_close":
            self._handle_list_item_close(context)
        elif token.type in ("fence", "code_block"):
            self._handle_code_block(token, context)
        elif token.type == "hr":
            self._handle_horizontal_rule(context)
        elif token.type in SKIPPED_TOKEN_TYPES:
            logger.debug(f"Skipping unsupported token: {token.type}")
        else:
            logger.debug(f"Ignoring unknown token: {token.type}")

    def _handle_text(self, text: str, context: ConversionContext) -> None:
        """
        Insert a text leaf and record a TextRange if any formatting is active.

        The first text inside a list item is checked for a task marker
        (`[ ]` / `[x]`). The marker is stripped and the item's bullet preset
        becomes BULLET_CHECKBOX.
        """
        if not text:
            return

        list_item = context.current_open_list_item()
        if list_item is not None and not list_item.task_prefix_processed:
            list_item.task_prefix_processed = True
            match = TASK_PREFIX_PATTERN.match(text)
            if match:
                list_item.bullet_preset = BULLET_PRESET_CHECKBOX
                text = text[match.end() :]
                logger.debug(f"Task list item at {list_item.start_index}: checked={match.group(1) != ' '}")
                if not text:
                    return

        start_index = context.current_index
        context.insert_text(text)

        formatting = context.merged_formatting()
        if formatting.has_formatting():
            context.text_ranges.append(TextRange(start_index, context.current_index, formatting))
            logger.debug(f"Text range [{start_index}, {context.current_index}): {formatting}")

    def _handle_heading_open(self, token: Token, context: ConversionContext) -> None:
        """Record the heading tag and the cursor so the heading can be styled when it closes."""
        if token.tag not in HEADING_STYLE_MAP:
            logger.warning(f"Unknown heading tag: {token.tag}")
            return
        context.current_heading_level = int(token.tag[1:])
        context.current_paragraph_start = context.current_index
        logger.debug(f"Heading open: tag={token.tag}, start_index={context.current_index}")

    def _handle_heading_close(self, context: ConversionContext) -> None:
        """
        Record the heading's paragraph range, then end the heading paragraph.

        With first_heading_as_title, the first H1 gets TITLE; every later
        heading keeps its HEADING_n style.
        """
        if context.current_heading_level is None or context.current_paragraph_start is None:
            logger.warning("heading_close without matching heading_open")
            return

        level = context.current_heading_level
        use_title = context.first_heading_as_title and not context.title_consumed and level == 1
        if use_title:
            context.title_consumed = True

        named_style = TITLE_STYLE if use_title else HEADING_STYLE_MAP[f"h{level}"]
        context.paragraph_ranges.append(
            ParagraphRange(context.current_paragraph_start, context.current_index, named_style)
        )
        logger.debug(f"Heading {named_style}: range [{context.current_paragraph_start}, {context.current_index})")

        context.insert_text("\n")
        context.current_heading_level = None
        context.current_paragraph_start = None

    def _handle_paragraph_open(self, context: ConversionContext) -> None:
        # Paragraphs inside list items are not independent blocks
        if not context.list_stack:
            context.current_paragraph_start = context.current_index

    def _handle_paragraph_close(self, context: ConversionContext) -> None:
        """
        End the paragraph with a newline and update whatever it belongs to.

        Inside a list item the item's end moves to just before that newline;
        outside lists the paragraph span is recorded for spacing.
        """
        paragraph_start = context.current_paragraph_start

        context.ensure_trailing_newline()

        list_item = context.current_open_list_item()
        if list_item is not None:
            paragraph_end = context.content_end_index()
            if paragraph_end > list_item.start_index:
                list_item.end_index = paragraph_end

        if paragraph_start is not None and not context.list_stack:
            context.normal_paragraph_ranges.append(SpanRange(paragraph_start, context.current_index))

        context.current_paragraph_start = None

    def _handle_list_open(self, list_type: str, context: ConversionContext) -> None:
        """Push a list level; its nesting level is the depth of the stack before the push."""
        context.list_stack.append(ListState(list_type, len(context.list_stack)))
        logger.debug(f"List open: type={list_type}, nesting_level={len(context.list_stack) - 1}")

    def _handle_list_close(self, context: ConversionContext) -> None:
        """
        Pop a list level. When the outermost list closes, remember the last
        item's span so a gap can be added between the list and what follows.
        """
        if not context.list_stack:
            logger.warning("list_close without matching list_open")
            return

        popped = context.list_stack.pop()
        logger.debug(f"List close: type={popped.list_type}, nesting_level={popped.level}")

        if context.list_stack:
            return

        for item in reversed(context.pending_list_items):
            if item.is_valid():
                context.list_spacing_ranges.append(SpanRange(item.start_index, item.end_index))
                break

    def _handle_list_item_open(self, context: ConversionContext) -> None:
        """
        Start a pending list item, inserting one TAB per nesting level.

        Raises:
            MarkdownConversionError: If no list is open.
        """
        if not context.list_stack:
            raise MarkdownConversionError("List item found outside of list context", token_type="list_item_open")

        current_list = context.list_stack[-1]
        item_start = context.current_index

        if current_list.level > 0:
            context.insert_text(LIST_INDENT * current_list.level)

        bullet_preset = BULLET_PRESET_ORDERED if current_list.list_type == "ordered" else BULLET_PRESET_UNORDERED
        context.pending_list_items.append(PendingListItem(item_start, current_list.level, bullet_preset))
        context.open_list_item_stack.append(len(context.pending_list_items) - 1)
        logger.debug(f"List item open: start_index={item_start}, nesting_level={current_list.level}")

    def _handle_list_item_close(self, context: ConversionContext) -> None:
        if not context.open_list_item_stack:
            logger.warning("list_item_close without matching list_item_open")
            return

        list_item = context.pending_list_items[context.open_list_item_stack.pop()]
        if list_item.end_index is None:
            computed_end = context.content_end_index()
            if computed_end > list_item.start_index:
                list_item.end_index = computed_end

        context.ensure_trailing_newline()
        logger.debug(f"List item close: range [{list_item.start_index}, {list_item.end_index})")

    def _handle_horizontal_rule(self, context: ConversionContext) -> None:
        """
        Insert an empty paragraph to be styled with a bottom border.

        Google Docs has no native horizontal rule element, so the rule is an
        empty paragraph whose bottom border draws the line.
        """
        context.ensure_trailing_newline()

        start_index = context.current_index
        context.insert_text("\n")
        context.hr_ranges.append(SpanRange(start_index, context.current_index))
        logger.debug(f"Inserted horizontal rule at index {start_index}")

    def _handle_code_block(self, token: Token, context: ConversionContext) -> None:
        """
        Encode a fenced or indented code block as a 1x1 table.

        Google Docs has no code block primitive; its own "Code Block" building
        block is a styled single-cell table. The table is inserted at the
        cursor T, the code text at T + CELL_CONTENT_OFFSET, and the cursor then
        jumps past the whole table (EMPTY_1x1_TABLE_SIZE + text length).
        """
        content = token.content[:-1] if token.content.endswith("\n") else token.content
        language = token.info.strip() or None

        if context.insert_requests and not context.last_insert_ends_with_newline():
            context.insert_text("\n")

        table_start_index = context.current_index
        context.insert_requests.append(create_insert_table_request(table_start_index, 1, 1, context.tab_id))

        cell_content_index = table_start_index + CELL_CONTENT_OFFSET
        text_length = utf16_len(content)
        if text_length > 0:
            context.insert_requests.append(create_insert_text_request(cell_content_index, content, context.tab_id))

        context.code_block_ranges.append(
            CodeBlockRange(table_start_index, cell_content_index, cell_content_index + text_length, language)
        )

        context.current_index = table_start_index + EMPTY_1x1_TABLE_SIZE + text_length
        logger.debug(
            f"Inserted code block: table at {table_start_index}, {text_length} chars, "
            f"language={language!r}, cursor={context.current_index}"
        )

        context.insert_text("\n")


def convert_markdown_to_requests(
    markdown_text: str,
    start_index: int = 1,
    tab_id: str | None = None,
    first_heading_as_title: bool = False,
) -> list[dict[str, Any]]:
    """Convert Markdown to Google Docs batchUpdate requests with a default converter."""
    return MarkdownToDocsConverter().convert(markdown_text, start_index, tab_id, first_heading_as_title)

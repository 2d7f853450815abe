"""
Conversion state for a single Markdown to Google Docs compilation.

A `ConversionContext` is created per conversion call and thrown away when
the call returns. It owns the insertion cursor, the inline formatting and
list stacks, and the range records that the finalizer turns into style
requests once the whole token stream has been consumed.

Cursor discipline: `current_index` is the next free index in the document
as it will look after every insertText emitted so far has executed. Only
`insert_text()` (and the code block handler, which jumps over the table
structure) moves it, and it never moves backwards.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, fields
from typing import Any, Literal

from gdocs.docs_helpers import TABLE_ELEMENT_OFFSET, create_insert_text_request, utf16_len

logger = logging.getLogger(__name__)

FormattingKind = Literal["bold", "italic", "strikethrough", "code", "link"]


@dataclass
class FormattingState:
    """One frame of inline formatting. Unset attributes are None."""

    bold: bool | None = None
    italic: bool | None = None
    strikethrough: bool | None = None
    code: bool | None = None
    link: str | None = None

    def has_formatting(self) -> bool:
        """True when at least one boolean attribute is on or a link is present."""
        return bool(self.bold or self.italic or self.strikethrough or self.code or self.link is not None)


def merge_formatting(stack: list[FormattingState]) -> FormattingState:
    """Flatten a formatting stack, oldest to newest, so the last write per attribute wins."""
    merged = FormattingState()
    for state in stack:
        for f in fields(FormattingState):
            value = getattr(state, f.name)
            if value is not None:
                setattr(merged, f.name, value)
    return merged


@dataclass
class TextRange:
    """An inserted span carrying at least one inline attribute."""

    start_index: int
    end_index: int
    formatting: FormattingState


@dataclass
class ParagraphRange:
    """A heading paragraph to restyle with a named style."""

    start_index: int
    end_index: int
    named_style_type: str | None = None


@dataclass
class SpanRange:
    """A plain [start, end) span: spaced paragraphs, list tails and horizontal rules."""

    start_index: int
    end_index: int


@dataclass
class ListState:
    list_type: Literal["bullet", "ordered"]
    level: int


@dataclass
class PendingListItem:
    """A list item whose end is only known once a later token closes it."""

    start_index: int
    nesting_level: int
    bullet_preset: str
    end_index: int | None = None
    task_prefix_processed: bool = False

    def is_valid(self) -> bool:
        return self.end_index is not None and self.end_index > self.start_index


@dataclass
class CodeBlockRange:
    """A code block encoded as a 1x1 table inserted at `table_start_index`."""

    table_start_index: int
    text_start_index: int
    text_end_index: int
    language: str | None = None

    @property
    def table_element_index(self) -> int:
        """Index of the table element itself, past the newline the API inserts before it."""
        return self.table_start_index + TABLE_ELEMENT_OFFSET


@dataclass
class ConversionContext:
    """Mutable state owned by exactly one conversion call."""

    current_index: int = 1
    tab_id: str | None = None
    first_heading_as_title: bool = False
    insert_requests: list[dict[str, Any]] = field(default_factory=list)
    format_requests: list[dict[str, Any]] = field(default_factory=list)
    text_ranges: list[TextRange] = field(default_factory=list)
    formatting_stack: list[FormattingState] = field(default_factory=list)
    list_stack: list[ListState] = field(default_factory=list)
    paragraph_ranges: list[ParagraphRange] = field(default_factory=list)
    normal_paragraph_ranges: list[SpanRange] = field(default_factory=list)
    list_spacing_ranges: list[SpanRange] = field(default_factory=list)
    pending_list_items: list[PendingListItem] = field(default_factory=list)
    open_list_item_stack: list[int] = field(default_factory=list)
    hr_ranges: list[SpanRange] = field(default_factory=list)
    code_block_ranges: list[CodeBlockRange] = field(default_factory=list)
    current_paragraph_start: int | None = None
    current_heading_level: int | None = None
    title_consumed: bool = False

    def insert_text(self, text: str) -> None:
        """Emit an insertText at the cursor and advance the cursor by the text's UTF-16 length."""
        self.insert_requests.append(create_insert_text_request(self.current_index, text, self.tab_id))
        self.current_index += utf16_len(text)
        logger.debug(f"Inserted text: {text!r}, cursor={self.current_index}")

    def last_insert_ends_with_newline(self) -> bool:
        """True when the most recent request is an insertText ending in a newline."""
        if not self.insert_requests:
            return False
        last_insert = self.insert_requests[-1].get("insertText")
        return bool(last_insert and last_insert["text"].endswith("\n"))

    def content_end_index(self) -> int:
        """The cursor, minus one when the last insert ended in a newline."""
        return self.current_index - 1 if self.last_insert_ends_with_newline() else self.current_index

    def ensure_trailing_newline(self) -> None:
        if not self.last_insert_ends_with_newline():
            self.insert_text("\n")

    def current_open_list_item(self) -> PendingListItem | None:
        if not self.open_list_item_stack:
            return None
        return self.pending_list_items[self.open_list_item_stack[-1]]

    def push_formatting(self, state: FormattingState) -> None:
        self.formatting_stack.append(state)

    def pop_formatting(self, kind: FormattingKind) -> None:
        """
        Remove the most recent frame that sets `kind`.

        The frame need not be on top: overlapping spans (a link closing while
        bold is still open) close out of push order.
        """
        for i in range(len(self.formatting_stack) - 1, -1, -1):
            if getattr(self.formatting_stack[i], kind) is not None:
                del self.formatting_stack[i]
                return
        logger.debug(f"No {kind} formatting on stack to pop")

    def merged_formatting(self) -> FormattingState:
        return merge_formatting(self.formatting_stack)

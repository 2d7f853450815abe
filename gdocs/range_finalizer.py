"""
Range Finalizer

Turns the range records collected during the token pass into Google Docs
style and structure requests. This runs once, after every token has been
processed, because a list item's or paragraph's true end is only known
when a later token closes it.

All requests address indices fixed during the token pass, so the phases
below are independent of each other.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from gdocs.docs_helpers import (
    BULLET_PRESET_CHECKBOX,
    create_border_bottom_request,
    create_bullet_list_request,
    create_link_request,
    create_named_style_request,
    create_space_below_request,
    create_table_cell_style_request,
    create_text_style_request,
)

if TYPE_CHECKING:
    from core.config import ConversionConfig
    from gdocs.conversion_context import ConversionContext, PendingListItem

logger = logging.getLogger(__name__)

# Inline code styling (matches the Google Docs "code" text look)
CODE_TEXT_HEX = "#188038"
CODE_BACKGROUND_HEX = "#F1F3F4"

# Code block container styling, modeled on the Docs "Code Block" building block
CODE_BLOCK_BG_RGB = {"red": 0.937, "green": 0.945, "blue": 0.953}  # #EFF1F3
CODE_BLOCK_BORDER_RGB = {"red": 0.855, "green": 0.863, "blue": 0.878}  # #DADCE0
CODE_BLOCK_BORDER_WIDTH_PT = 0.5
CODE_BLOCK_PADDING_VERTICAL_PT = 8
CODE_BLOCK_PADDING_HORIZONTAL_PT = 12

# Horizontal rule styling constants
# Since Google Docs doesn't have a native HR, we use a paragraph with bottom border
HR_BORDER_COLOR = {"red": 0.75, "green": 0.75, "blue": 0.75}
HR_BORDER_WIDTH_PT = 1.0
HR_PADDING_BELOW_PT = 6


def finalize_formatting(context: ConversionContext, config: ConversionConfig) -> None:
    """Append every deferred style/structure request to `context.format_requests`."""
    _emit_text_styles(context, config)
    _emit_paragraph_styles(context)
    _emit_spacing(context, config)
    _emit_code_blocks(context, config)
    _emit_horizontal_rules(context)
    _emit_list_bullets(context)

    logger.debug(f"Finalized {len(context.format_requests)} formatting requests")


def _emit_text_styles(context: ConversionContext, config: ConversionConfig) -> None:
    """Character formatting per text range, plus a separate link request where a link is set."""
    for text_range in context.text_ranges:
        formatting = text_range.formatting

        if formatting.bold or formatting.italic or formatting.strikethrough or formatting.code:
            style_request = create_text_style_request(
                text_range.start_index,
                text_range.end_index,
                bold=formatting.bold,
                italic=formatting.italic,
                strikethrough=formatting.strikethrough,
                font_family=config.code_font_family if formatting.code else None,
                foreground_color=CODE_TEXT_HEX if formatting.code else None,
                background_color=CODE_BACKGROUND_HEX if formatting.code else None,
                tab_id=context.tab_id,
            )
            if style_request:
                context.format_requests.append(style_request)

        if formatting.link:
            context.format_requests.append(
                create_link_request(text_range.start_index, text_range.end_index, formatting.link, context.tab_id)
            )


def _emit_paragraph_styles(context: ConversionContext) -> None:
    for paragraph_range in context.paragraph_ranges:
        if paragraph_range.named_style_type:
            context.format_requests.append(
                create_named_style_request(
                    paragraph_range.start_index,
                    paragraph_range.end_index,
                    paragraph_range.named_style_type,
                    context.tab_id,
                )
            )


def _emit_spacing(context: ConversionContext, config: ConversionConfig) -> None:
    """
    Apply spaceBelow to plain paragraphs and to the last item of each top-level list.

    NORMAL_TEXT has 0pt spacing by default, so without this paragraphs and
    lists would sit flush against whatever follows them.
    """
    for span in [*context.normal_paragraph_ranges, *context.list_spacing_ranges]:
        context.format_requests.append(
            create_space_below_request(span.start_index, span.end_index, config.paragraph_spacing_pt, context.tab_id)
        )


def _emit_code_blocks(context: ConversionContext, config: ConversionConfig) -> None:
    for code_block in context.code_block_ranges:
        if code_block.text_end_index > code_block.text_start_index:
            code_text_style = create_text_style_request(
                code_block.text_start_index,
                code_block.text_end_index,
                font_family=config.code_font_family,
                tab_id=context.tab_id,
            )
            if code_text_style:
                context.format_requests.append(code_text_style)

        context.format_requests.append(
            create_table_cell_style_request(
                code_block.table_element_index,
                background_color=CODE_BLOCK_BG_RGB,
                border_color=CODE_BLOCK_BORDER_RGB,
                border_width_pt=CODE_BLOCK_BORDER_WIDTH_PT,
                padding_vertical_pt=CODE_BLOCK_PADDING_VERTICAL_PT,
                padding_horizontal_pt=CODE_BLOCK_PADDING_HORIZONTAL_PT,
                tab_id=context.tab_id,
            )
        )
        logger.debug(
            f"Styled code block: table at {code_block.table_element_index}, "
            f"text [{code_block.text_start_index}, {code_block.text_end_index}), language={code_block.language!r}"
        )


def _emit_horizontal_rules(context: ConversionContext) -> None:
    for hr_range in context.hr_ranges:
        context.format_requests.append(
            create_border_bottom_request(
                hr_range.start_index,
                hr_range.end_index,
                HR_BORDER_COLOR,
                HR_BORDER_WIDTH_PT,
                HR_PADDING_BELOW_PT,
                context.tab_id,
            )
        )


def merge_list_items(items: list[PendingListItem]) -> list[dict[str, Any]]:
    """
    Merge adjacent list items of the same bullet preset into single ranges.

    Items merge only when the next item starts at most one index after the
    previous range ends (the newline between them). Anything else in
    between, such as a paragraph or heading, starts a new range so it is
    never turned into a bullet. Checkbox items are never merged: each task
    item gets its own bullet request.

    Returns:
        Ranges as dicts with startIndex, endIndex and bulletPreset, in
        ascending start order.
    """
    valid_items = sorted((item for item in items if item.is_valid()), key=lambda item: item.start_index)

    merged: list[dict[str, Any]] = []
    for item in valid_items:
        last = merged[-1] if merged else None
        if (
            last
            and item.bullet_preset != BULLET_PRESET_CHECKBOX
            and last["bulletPreset"] == item.bullet_preset
            and item.start_index <= last["endIndex"] + 1
        ):
            last["endIndex"] = max(last["endIndex"], item.end_index)
        else:
            merged.append(
                {"startIndex": item.start_index, "endIndex": item.end_index, "bulletPreset": item.bullet_preset}
            )
    return merged


def _emit_list_bullets(context: ConversionContext) -> None:
    merged_ranges = merge_list_items(context.pending_list_items)

    # Bottom-to-top so no bullet request can disturb a range applied after it
    for merged in sorted(merged_ranges, key=lambda r: r["startIndex"], reverse=True):
        context.format_requests.append(
            create_bullet_list_request(merged["startIndex"], merged["endIndex"], merged["bulletPreset"], context.tab_id)
        )
        logger.debug(
            f"Applied bullets: preset={merged['bulletPreset']}, range=[{merged['startIndex']}, {merged['endIndex']})"
        )

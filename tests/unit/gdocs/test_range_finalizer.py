"""Unit tests for turning recorded ranges into style requests."""

import pytest

from core.config import ConversionConfig
from gdocs.conversion_context import (
    CodeBlockRange,
    ConversionContext,
    FormattingState,
    ParagraphRange,
    PendingListItem,
    SpanRange,
    TextRange,
)
from gdocs.docs_helpers import BULLET_PRESET_CHECKBOX, BULLET_PRESET_ORDERED, BULLET_PRESET_UNORDERED
from gdocs.range_finalizer import finalize_formatting, merge_list_items


class TestMergeListItems:
    def test_adjacent_items_merge(self):
        items = [
            PendingListItem(1, 0, BULLET_PRESET_UNORDERED, end_index=2),
            PendingListItem(3, 0, BULLET_PRESET_UNORDERED, end_index=4),
        ]
        assert merge_list_items(items) == [{"startIndex": 1, "endIndex": 4, "bulletPreset": BULLET_PRESET_UNORDERED}]

    def test_gap_prevents_merge(self):
        items = [
            PendingListItem(1, 0, BULLET_PRESET_UNORDERED, end_index=2),
            PendingListItem(8, 0, BULLET_PRESET_UNORDERED, end_index=9),
        ]
        assert len(merge_list_items(items)) == 2

    def test_different_presets_stay_separate(self):
        items = [
            PendingListItem(1, 0, BULLET_PRESET_UNORDERED, end_index=7),
            PendingListItem(8, 1, BULLET_PRESET_ORDERED, end_index=14),
        ]
        merged = merge_list_items(items)
        assert [(m["startIndex"], m["endIndex"], m["bulletPreset"]) for m in merged] == [
            (1, 7, BULLET_PRESET_UNORDERED),
            (8, 14, BULLET_PRESET_ORDERED),
        ]

    def test_checkbox_items_never_merge(self):
        items = [
            PendingListItem(1, 0, BULLET_PRESET_CHECKBOX, end_index=5),
            PendingListItem(6, 0, BULLET_PRESET_CHECKBOX, end_index=10),
        ]
        assert len(merge_list_items(items)) == 2

    def test_invalid_items_are_dropped(self):
        items = [
            PendingListItem(1, 0, BULLET_PRESET_UNORDERED),
            PendingListItem(3, 0, BULLET_PRESET_UNORDERED, end_index=3),
        ]
        assert merge_list_items(items) == []

    def test_items_are_sorted_before_merging(self):
        items = [
            PendingListItem(3, 0, BULLET_PRESET_UNORDERED, end_index=4),
            PendingListItem(1, 0, BULLET_PRESET_UNORDERED, end_index=2),
        ]
        assert merge_list_items(items) == [{"startIndex": 1, "endIndex": 4, "bulletPreset": BULLET_PRESET_UNORDERED}]


class TestFinalizeFormatting:
    @pytest.fixture
    def context(self):
        context = ConversionContext(current_index=40)
        context.text_ranges.append(TextRange(1, 5, FormattingState(bold=True, link="https://example.com")))
        context.paragraph_ranges.append(ParagraphRange(1, 6, "HEADING_1"))
        context.normal_paragraph_ranges.append(SpanRange(7, 12))
        context.list_spacing_ranges.append(SpanRange(30, 35))
        context.code_block_ranges.append(CodeBlockRange(12, 16, 20))
        context.hr_ranges.append(SpanRange(25, 26))
        context.pending_list_items.extend(
            [
                PendingListItem(26, 0, BULLET_PRESET_UNORDERED, end_index=28),
                PendingListItem(30, 0, BULLET_PRESET_ORDERED, end_index=35),
            ]
        )
        return context

    def test_phase_order(self, context, default_config):
        finalize_formatting(context, default_config)

        summary = []
        for request in context.format_requests:
            kind, body = next(iter(request.items()))
            summary.append((kind, body.get("fields")))

        assert summary == [
            ("updateTextStyle", "bold"),
            ("updateTextStyle", "link"),
            ("updateParagraphStyle", "namedStyleType"),
            ("updateParagraphStyle", "spaceBelow"),
            ("updateParagraphStyle", "spaceBelow"),
            ("updateTextStyle", "weightedFontFamily"),
            ("updateTableCellStyle", context.format_requests[6]["updateTableCellStyle"]["fields"]),
            ("updateParagraphStyle", "borderBottom"),
            ("createParagraphBullets", None),
            ("createParagraphBullets", None),
        ]

    def test_bullets_descend(self, context, default_config):
        finalize_formatting(context, default_config)

        starts = [
            r["createParagraphBullets"]["range"]["startIndex"]
            for r in context.format_requests
            if "createParagraphBullets" in r
        ]
        assert starts == [30, 26]

    def test_code_cell_targets_table_element(self, context, default_config):
        finalize_formatting(context, default_config)

        cell = next(r for r in context.format_requests if "updateTableCellStyle" in r)
        location = cell["updateTableCellStyle"]["tableRange"]["tableCellLocation"]["tableStartLocation"]
        assert location == {"index": 13}

    def test_spacing_uses_configured_size(self, context, clean_env, env_override):
        env_override(GDOCS_MD_PARAGRAPH_SPACING_PT="14")
        finalize_formatting(context, ConversionConfig())

        spacing = [
            r["updateParagraphStyle"]["paragraphStyle"]["spaceBelow"]
            for r in context.format_requests
            if "spaceBelow" in r.get("updateParagraphStyle", {}).get("paragraphStyle", {})
        ]
        assert spacing == [{"magnitude": 14.0, "unit": "PT"}] * 2

    def test_empty_code_block_has_no_font_request(self, default_config):
        context = ConversionContext()
        context.code_block_ranges.append(CodeBlockRange(1, 5, 5))

        finalize_formatting(context, default_config)

        assert [next(iter(r)) for r in context.format_requests] == ["updateTableCellStyle"]

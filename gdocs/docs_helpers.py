"""
Google Docs Request Builders

Pure helper functions that build Google Docs API `batchUpdate` request
dictionaries. Every builder accepts an optional `tab_id`; when supplied it
is copied onto each location or range so the request targets that tab of a
multi-tab document.
"""

from typing import Any

# Layout of an empty 1x1 table created by insertTable at index T.
# The Docs API always inserts a paragraph break BEFORE the table, so:
#
#   T       -> "\n" auto-inserted by the API
#   T + 1   -> table.startIndex
#   T + 2   -> tableRow.startIndex
#   T + 3   -> tableCell.startIndex
#   T + 4   -> cell paragraph.startIndex (text insertion point)
#   T + 6   -> table.endIndex
#
# Verified empirically via documents.get on a real document with a 1x1 table.
# These are properties of the Docs element layout, not derived values.
TABLE_ELEMENT_OFFSET = 1
CELL_CONTENT_OFFSET = 4
EMPTY_1x1_TABLE_SIZE = 6

# Bullet list presets for the Google Docs API
BULLET_PRESET_UNORDERED = "BULLET_DISC_CIRCLE_SQUARE"
BULLET_PRESET_ORDERED = "NUMBERED_DECIMAL_ALPHA_ROMAN"
BULLET_PRESET_CHECKBOX = "BULLET_CHECKBOX"


def utf16_len(text: str) -> int:
    """Return the length of `text` in UTF-16 code units (the Docs API index unit)."""
    return len(text.encode("utf-16-le")) // 2


def hex_to_rgb(hex_color: str) -> dict[str, float]:
    """
    Convert a `#RRGGBB` hex color into a Docs API rgbColor dict.

    Raises:
        ValueError: If the string is not a 6-digit hex color.
    """
    value = hex_color.lstrip("#")
    if len(value) != 6:
        raise ValueError(f"Invalid hex color: {hex_color!r}")
    try:
        red, green, blue = (int(value[i : i + 2], 16) for i in (0, 2, 4))
    except ValueError as e:
        raise ValueError(f"Invalid hex color: {hex_color!r}") from e
    return {"red": red / 255, "green": green / 255, "blue": blue / 255}


def _location(index: int, tab_id: str | None) -> dict[str, Any]:
    location: dict[str, Any] = {"index": index}
    if tab_id:
        location["tabId"] = tab_id
    return location


def _range(start_index: int, end_index: int, tab_id: str | None) -> dict[str, Any]:
    range_info: dict[str, Any] = {"startIndex": start_index, "endIndex": end_index}
    if tab_id:
        range_info["tabId"] = tab_id
    return range_info


def _pt(magnitude: float) -> dict[str, Any]:
    return {"magnitude": magnitude, "unit": "PT"}


def create_insert_text_request(index: int, text: str, tab_id: str | None = None) -> dict[str, Any]:
    """Create an insertText request."""
    return {"insertText": {"location": _location(index, tab_id), "text": text}}


def create_insert_table_request(index: int, rows: int, columns: int, tab_id: str | None = None) -> dict[str, Any]:
    """Create an insertTable request."""
    return {"insertTable": {"location": _location(index, tab_id), "rows": rows, "columns": columns}}


def create_text_style_request(
    start_index: int,
    end_index: int,
    bold: bool | None = None,
    italic: bool | None = None,
    strikethrough: bool | None = None,
    font_family: str | None = None,
    foreground_color: str | None = None,
    background_color: str | None = None,
    tab_id: str | None = None,
) -> dict[str, Any] | None:
    """
    Create an updateTextStyle request for the attributes that are set.

    Colors are `#RRGGBB` hex strings. The fields mask lists exactly the
    attributes present in the style.

    Returns:
        The request dict, or None when no attribute was given.
    """
    text_style: dict[str, Any] = {}
    fields: list[str] = []

    if bold is not None:
        text_style["bold"] = bold
        fields.append("bold")
    if italic is not None:
        text_style["italic"] = italic
        fields.append("italic")
    if strikethrough is not None:
        text_style["strikethrough"] = strikethrough
        fields.append("strikethrough")
    if font_family is not None:
        text_style["weightedFontFamily"] = {"fontFamily": font_family}
        fields.append("weightedFontFamily")
    if foreground_color is not None:
        text_style["foregroundColor"] = {"color": {"rgbColor": hex_to_rgb(foreground_color)}}
        fields.append("foregroundColor")
    if background_color is not None:
        text_style["backgroundColor"] = {"color": {"rgbColor": hex_to_rgb(background_color)}}
        fields.append("backgroundColor")

    if not text_style:
        return None

    return {
        "updateTextStyle": {
            "range": _range(start_index, end_index, tab_id),
            "textStyle": text_style,
            "fields": ",".join(fields),
        }
    }


def create_link_request(start_index: int, end_index: int, url: str, tab_id: str | None = None) -> dict[str, Any]:
    """Create an updateTextStyle request that turns a range into a hyperlink."""
    return {
        "updateTextStyle": {
            "range": _range(start_index, end_index, tab_id),
            "textStyle": {"link": {"url": url}},
            "fields": "link",
        }
    }


def create_named_style_request(
    start_index: int, end_index: int, named_style_type: str, tab_id: str | None = None
) -> dict[str, Any]:
    """Create an updateParagraphStyle request applying a named style (HEADING_1, TITLE, ...)."""
    return {
        "updateParagraphStyle": {
            "range": _range(start_index, end_index, tab_id),
            "paragraphStyle": {"namedStyleType": named_style_type},
            "fields": "namedStyleType",
        }
    }


def create_space_below_request(
    start_index: int, end_index: int, space_below_pt: float, tab_id: str | None = None
) -> dict[str, Any]:
    """Create an updateParagraphStyle request setting spaceBelow."""
    return {
        "updateParagraphStyle": {
            "range": _range(start_index, end_index, tab_id),
            "paragraphStyle": {"spaceBelow": _pt(space_below_pt)},
            "fields": "spaceBelow",
        }
    }


def create_border_bottom_request(
    start_index: int,
    end_index: int,
    color: dict[str, float],
    width_pt: float,
    padding_pt: float,
    tab_id: str | None = None,
) -> dict[str, Any]:
    """Create an updateParagraphStyle request drawing a solid bottom border."""
    return {
        "updateParagraphStyle": {
            "range": _range(start_index, end_index, tab_id),
            "paragraphStyle": {
                "borderBottom": {
                    "color": {"color": {"rgbColor": color}},
                    "width": _pt(width_pt),
                    "padding": _pt(padding_pt),
                    "dashStyle": "SOLID",
                },
            },
            "fields": "borderBottom",
        }
    }


def create_bullet_list_request(
    start_index: int, end_index: int, bullet_preset: str, tab_id: str | None = None
) -> dict[str, Any]:
    """Create a createParagraphBullets request."""
    return {
        "createParagraphBullets": {
            "range": _range(start_index, end_index, tab_id),
            "bulletPreset": bullet_preset,
        }
    }


def create_table_cell_style_request(
    table_start_index: int,
    background_color: dict[str, float],
    border_color: dict[str, float],
    border_width_pt: float,
    padding_vertical_pt: float,
    padding_horizontal_pt: float,
    row_index: int = 0,
    column_index: int = 0,
    tab_id: str | None = None,
) -> dict[str, Any]:
    """
    Create an updateTableCellStyle request for a single cell.

    `table_start_index` must be the index of the table element itself, not
    the index the insertTable request was sent to.
    """
    border = {
        "color": {"color": {"rgbColor": border_color}},
        "width": _pt(border_width_pt),
        "dashStyle": "SOLID",
    }
    return {
        "updateTableCellStyle": {
            "tableRange": {
                "tableCellLocation": {
                    "tableStartLocation": _location(table_start_index, tab_id),
                    "rowIndex": row_index,
                    "columnIndex": column_index,
                },
                "rowSpan": 1,
                "columnSpan": 1,
            },
            "tableCellStyle": {
                "backgroundColor": {"color": {"rgbColor": background_color}},
                "paddingTop": _pt(padding_vertical_pt),
                "paddingBottom": _pt(padding_vertical_pt),
                "paddingLeft": _pt(padding_horizontal_pt),
                "paddingRight": _pt(padding_horizontal_pt),
                "borderTop": dict(border),
                "borderBottom": dict(border),
                "borderLeft": dict(border),
                "borderRight": dict(border),
            },
            "fields": (
                "backgroundColor,paddingTop,paddingBottom,paddingLeft,paddingRight,"
                "borderTop,borderBottom,borderLeft,borderRight"
            ),
        }
    }

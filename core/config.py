"""
Conversion Configuration Management for Markdown to Google Docs.

Reads converter defaults from environment variables so deployments can
tune the output without code changes. Values that are not set fall back
to the defaults that match Google Docs' own "Code Block" building block
and markdown-rendered paragraph spacing.
"""

import os

from core.utils import parse_bool_env

DEFAULT_CODE_FONT_FAMILY = "Roboto Mono"
DEFAULT_PARAGRAPH_SPACING_PT = 8.0


class ConversionConfig:
    """
    Centralized conversion configuration.

    Environment variables:
        GDOCS_MD_FIRST_HEADING_AS_TITLE: Promote the first H1 to TITLE by default.
        GDOCS_MD_CODE_FONT_FAMILY: Monospace font for inline code and code blocks.
        GDOCS_MD_PARAGRAPH_SPACING_PT: spaceBelow applied after paragraphs and lists.
        GDOCS_MD_LINKIFY: Turn bare URLs into links.
        GDOCS_MD_FRONT_MATTER: Skip a leading YAML front matter block.
    """

    def __init__(self):
        self.first_heading_as_title = parse_bool_env(os.getenv("GDOCS_MD_FIRST_HEADING_AS_TITLE"), default=False)
        self.code_font_family = os.getenv("GDOCS_MD_CODE_FONT_FAMILY", "").strip() or DEFAULT_CODE_FONT_FAMILY
        self.linkify = parse_bool_env(os.getenv("GDOCS_MD_LINKIFY"), default=True)
        self.front_matter = parse_bool_env(os.getenv("GDOCS_MD_FRONT_MATTER"), default=False)

        raw_spacing = os.getenv("GDOCS_MD_PARAGRAPH_SPACING_PT")
        if raw_spacing is None or not raw_spacing.strip():
            self.paragraph_spacing_pt = DEFAULT_PARAGRAPH_SPACING_PT
        else:
            try:
                self.paragraph_spacing_pt = float(raw_spacing)
            except ValueError as e:
                raise ValueError(f"GDOCS_MD_PARAGRAPH_SPACING_PT must be a number, got {raw_spacing!r}") from e
            if self.paragraph_spacing_pt <= 0:
                raise ValueError("GDOCS_MD_PARAGRAPH_SPACING_PT must be greater than zero")

    def get_environment_summary(self) -> dict:
        """
        Get a summary of the current conversion configuration.

        Returns:
            Dictionary with the effective configuration values
        """
        return {
            "first_heading_as_title": self.first_heading_as_title,
            "code_font_family": self.code_font_family,
            "paragraph_spacing_pt": self.paragraph_spacing_pt,
            "linkify": self.linkify,
            "front_matter": self.front_matter,
        }


# Global configuration instance
_conversion_config: ConversionConfig | None = None


def get_conversion_config() -> ConversionConfig:
    """
    Get the global conversion configuration instance.

    Returns:
        The singleton conversion configuration instance
    """
    global _conversion_config
    if _conversion_config is None:
        _conversion_config = ConversionConfig()
    return _conversion_config


def reload_conversion_config() -> ConversionConfig:
    """
    Reload the conversion configuration from environment variables.

    This is useful for testing or when environment variables change.

    Returns:
        The reloaded conversion configuration instance
    """
    global _conversion_config
    _conversion_config = ConversionConfig()
    return _conversion_config

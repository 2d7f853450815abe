"""Tests for environment-backed conversion configuration."""

import pytest

import core.config as config_module
from core.config import (
    DEFAULT_CODE_FONT_FAMILY,
    DEFAULT_PARAGRAPH_SPACING_PT,
    ConversionConfig,
    get_conversion_config,
    reload_conversion_config,
)


@pytest.fixture
def reset_global_config(monkeypatch):
    monkeypatch.setattr(config_module, "_conversion_config", None)


class TestConversionConfigDefaults:
    def test_defaults_from_empty_environment(self, default_config):
        assert default_config.first_heading_as_title is False
        assert default_config.code_font_family == DEFAULT_CODE_FONT_FAMILY
        assert default_config.paragraph_spacing_pt == DEFAULT_PARAGRAPH_SPACING_PT
        assert default_config.linkify is True
        assert default_config.front_matter is False

    def test_environment_summary(self, default_config):
        assert default_config.get_environment_summary() == {
            "first_heading_as_title": False,
            "code_font_family": "Roboto Mono",
            "paragraph_spacing_pt": 8.0,
            "linkify": True,
            "front_matter": False,
        }


class TestConversionConfigOverrides:
    def test_overrides_are_read(self, clean_env, env_override):
        env_override(
            GDOCS_MD_FIRST_HEADING_AS_TITLE="yes",
            GDOCS_MD_CODE_FONT_FAMILY="Source Code Pro",
            GDOCS_MD_PARAGRAPH_SPACING_PT="12",
            GDOCS_MD_LINKIFY="off",
            GDOCS_MD_FRONT_MATTER="1",
        )
        config = ConversionConfig()

        assert config.first_heading_as_title is True
        assert config.code_font_family == "Source Code Pro"
        assert config.paragraph_spacing_pt == 12.0
        assert config.linkify is False
        assert config.front_matter is True

    def test_blank_font_falls_back_to_default(self, clean_env, env_override):
        env_override(GDOCS_MD_CODE_FONT_FAMILY="   ")
        assert ConversionConfig().code_font_family == DEFAULT_CODE_FONT_FAMILY

    def test_non_numeric_spacing_raises(self, clean_env, env_override):
        env_override(GDOCS_MD_PARAGRAPH_SPACING_PT="wide")
        with pytest.raises(ValueError, match="must be a number"):
            ConversionConfig()

    def test_non_positive_spacing_raises(self, clean_env, env_override):
        env_override(GDOCS_MD_PARAGRAPH_SPACING_PT="0")
        with pytest.raises(ValueError, match="greater than zero"):
            ConversionConfig()


class TestGlobalConfig:
    def test_get_returns_singleton(self, clean_env, reset_global_config):
        assert get_conversion_config() is get_conversion_config()

    def test_reload_picks_up_environment_changes(self, clean_env, env_override, reset_global_config):
        first = get_conversion_config()
        env_override(GDOCS_MD_CODE_FONT_FAMILY="Courier New")

        reloaded = reload_conversion_config()

        assert reloaded is not first
        assert reloaded.code_font_family == "Courier New"
        assert get_conversion_config() is reloaded

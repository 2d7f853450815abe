"""Shared pytest fixtures for gdocs-markdown tests."""

import pytest

from core.config import ConversionConfig

CONFIG_ENV_VARS = (
    "GDOCS_MD_FIRST_HEADING_AS_TITLE",
    "GDOCS_MD_CODE_FONT_FAMILY",
    "GDOCS_MD_PARAGRAPH_SPACING_PT",
    "GDOCS_MD_LINKIFY",
    "GDOCS_MD_FRONT_MATTER",
)


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every converter environment variable for the duration of a test."""
    for key in CONFIG_ENV_VARS:
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def env_override(monkeypatch):
    """Helper to override environment variables."""

    def _override(**kwargs):
        for key, value in kwargs.items():
            if value is None:
                monkeypatch.delenv(key, raising=False)
            else:
                monkeypatch.setenv(key, value)

    return _override


@pytest.fixture
def default_config(clean_env):
    """A ConversionConfig built from an empty environment."""
    return ConversionConfig()


def replay_inserts(requests, start_index=1):
    """
    Apply insertText requests in order to an empty document body.

    Returns the resulting text and the index just past it. Only valid for
    batches without insertTable (code blocks) and with BMP-only text.
    """
    text = ""
    for request in requests:
        if "insertText" not in request:
            continue
        insert = request["insertText"]
        pos = insert["location"]["index"] - start_index
        assert 0 <= pos <= len(text), f"insert at {insert['location']['index']} is outside the document"
        text = text[:pos] + insert["text"] + text[pos:]
    return text, start_index + len(text)


@pytest.fixture
def replay():
    return replay_inserts

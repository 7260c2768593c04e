"""Tests for settings loading."""

import pytest

from aa_split.config import Settings, load_settings
from aa_split.exceptions import ConfigurationError


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Run without a stray .env file or AA_SPLIT_* variables."""
    monkeypatch.chdir(tmp_path)
    for var in (
        "AA_SPLIT_DEFAULT_PARTICIPANTS",
        "AA_SPLIT_DEFAULT_ITEM_NAME",
        "AA_SPLIT_CURRENCY_SYMBOL",
    ):
        monkeypatch.delenv(var, raising=False)


def test_defaults():
    settings = load_settings()

    assert settings.default_participants == ["Me", "Friend A", "Friend B", "Friend C"]
    assert settings.default_item_name == "New item"
    assert settings.currency_symbol == "¥"


def test_env_override(monkeypatch):
    monkeypatch.setenv("AA_SPLIT_CURRENCY_SYMBOL", "$")
    monkeypatch.setenv("AA_SPLIT_DEFAULT_PARTICIPANTS", '["Ann", "Ben"]')

    settings = load_settings()

    assert settings.currency_symbol == "$"
    assert settings.default_participants == ["Ann", "Ben"]


def test_env_file(tmp_path):
    (tmp_path / ".env").write_text("AA_SPLIT_DEFAULT_ITEM_NAME=Dish\n")
    assert Settings().default_item_name == "Dish"


def test_invalid_env_raises_configuration_error(monkeypatch):
    monkeypatch.setenv("AA_SPLIT_DEFAULT_PARTICIPANTS", "not json")

    with pytest.raises(ConfigurationError, match="Failed to load settings"):
        load_settings()

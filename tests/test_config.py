"""Tests for settings resolution."""

import sys
import os

import pytest
from pydantic import ValidationError

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from config import ConfigurationError, TelegramSettings, load_settings
from sdk.client import DEFAULT_API_BASE_URL


class TestLoadSettings:
    """Validate environment parsing."""

    def test_defaults(self) -> None:
        settings = load_settings({})
        assert settings.enabled is True
        assert settings.bot_token == ""
        assert settings.chat_id == ""
        assert settings.api_base_url == DEFAULT_API_BASE_URL
        assert settings.continue_reply_enabled is True

    def test_values_are_stripped(self) -> None:
        settings = load_settings({"TELEGRAM_BOT_TOKEN": " 123:abc ", "TELEGRAM_CHAT_ID": " 1000\n"})
        assert settings.bot_token == "123:abc"
        assert settings.chat_id == "1000"

    @pytest.mark.parametrize("raw,expected", [
        ("0", False), ("false", False), ("No", False), ("off", False),
        ("1", True), ("TRUE", True), ("yes", True), ("garbage", True),
    ])
    def test_bool_parsing(self, raw, expected) -> None:
        assert load_settings({"TELEGRAM_ENABLED": raw}).enabled is expected

    def test_continue_reply_flag(self) -> None:
        assert load_settings({"CONTINUE_REPLY_ENABLED": "false"}).continue_reply_enabled is False


class TestTelegramSettings:
    """Validate derived values and completeness checks."""

    def test_custom_api_url(self) -> None:
        assert TelegramSettings().custom_api_url is None
        assert TelegramSettings(api_base_url=DEFAULT_API_BASE_URL + "/").custom_api_url is None
        assert TelegramSettings(api_base_url="https://proxy.example/").custom_api_url == "https://proxy.example"

    def test_require_complete_lists_missing(self) -> None:
        with pytest.raises(ConfigurationError, match="bot_token, chat_id"):
            TelegramSettings().require_complete()

    def test_require_complete_rejects_blank(self) -> None:
        with pytest.raises(ConfigurationError, match="chat_id"):
            TelegramSettings(bot_token="123:abc", chat_id="   ").require_complete()

    def test_complete(self) -> None:
        TelegramSettings(bot_token="123:abc", chat_id="@relaychan").require_complete()

    def test_frozen(self) -> None:
        settings = TelegramSettings(bot_token="123:abc")
        with pytest.raises(ValidationError):
            settings.chat_id = "1000"

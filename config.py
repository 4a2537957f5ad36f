"""Application configuration — environment variables resolved into settings.

``python-dotenv`` loads a ``.env`` file at import time.  Unlike module-level
constants, the values are read by :func:`load_settings` into an immutable
:class:`TelegramSettings` that each session captures by value, so a later
edit never affects a session already running.
"""

# ── stdlib ───────────────────────────────────────────────────────────────────
import os
from typing import Mapping

# ── third-party ──────────────────────────────────────────────────────────────
from dotenv import load_dotenv
from pydantic import BaseModel

# ── project ──────────────────────────────────────────────────────────────────
from core.logger import RelayLogger
from sdk.client import DEFAULT_API_BASE_URL

# ── Environment bootstrap ────────────────────────────────────────────────────
load_dotenv()

logger = RelayLogger.get_logger()


class ConfigurationError(Exception):
    """Settings are missing or invalid; a session cannot start."""


# ── Helper functions (private) ───────────────────────────────────────────────


def _parse_bool(raw: str | None, default: bool) -> bool:
    """Interpret ``1/true/yes/on`` and ``0/false/no/off``; anything else is *default*."""
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in ("1", "true", "yes", "on"):
        return True
    if value in ("0", "false", "no", "off"):
        return False
    return default


# ── Settings model ───────────────────────────────────────────────────────────


class TelegramSettings(BaseModel):
    """Everything a feedback session needs to talk to the Bot API."""

    enabled: bool = True
    bot_token: str = ""
    chat_id: str = ""
    api_base_url: str = DEFAULT_API_BASE_URL
    continue_reply_enabled: bool = True

    model_config = {"frozen": True}

    @property
    def custom_api_url(self) -> str | None:
        """The configured base URL, or ``None`` when it is the public endpoint."""
        url = self.api_base_url.strip().rstrip("/")
        if not url or url == DEFAULT_API_BASE_URL:
            return None
        return url

    def require_complete(self) -> None:
        """Raise :class:`ConfigurationError` unless token and chat id are set."""
        missing = [
            name for name, value in (("bot_token", self.bot_token), ("chat_id", self.chat_id))
            if not value.strip()
        ]
        if missing:
            raise ConfigurationError(f"Telegram configuration incomplete: missing {', '.join(missing)}")


def load_settings(environ: Mapping[str, str] | None = None) -> TelegramSettings:
    """Build :class:`TelegramSettings` from *environ* (defaults to ``os.environ``)."""
    env = os.environ if environ is None else environ
    settings = TelegramSettings(
        enabled=_parse_bool(env.get("TELEGRAM_ENABLED"), True),
        bot_token=env.get("TELEGRAM_BOT_TOKEN", "").strip(),
        chat_id=env.get("TELEGRAM_CHAT_ID", "").strip(),
        api_base_url=env.get("TELEGRAM_API_BASE_URL", "").strip() or DEFAULT_API_BASE_URL,
        continue_reply_enabled=_parse_bool(env.get("CONTINUE_REPLY_ENABLED"), True),
    )

    if settings.bot_token:
        logger.info("Config loaded — bot token is set")
    else:
        logger.warning("Config loaded — TELEGRAM_BOT_TOKEN is NOT set")
    if settings.custom_api_url:
        logger.info("Using custom Bot API endpoint", extra={"api_base_url": settings.custom_api_url})

    return settings

"""BotClient -- service layer over the Telegram Bot API endpoints the relay uses.

Requests are plain ``requests.post`` calls with JSON payloads.  The public
methods are coroutines: the blocking call runs inside :func:`asyncio.to_thread`
so the polling task never blocks the event loop.  Responses are validated with
the Pydantic models in :mod:`sdk.models`.

Every failure is raised as a :class:`~sdk.exceptions.BotClientError` subclass.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, List, Optional, Type, TypeVar, Union

import requests
from pydantic import BaseModel, ValidationError

from sdk.exceptions import APIException, MalformedResponseError, TransportError
from sdk.models import Message, Update, User

DEFAULT_API_BASE_URL: str = "https://api.telegram.org"

_sdk_logger = logging.getLogger("feedback_relay.sdk")

_ModelT = TypeVar("_ModelT", bound=BaseModel)


class BotClient:
    """Client-side service layer for the Telegram Bot API.

    Args:
        bot_token: Token issued by BotFather.
        api_base_url: Custom Bot API server.  ``None`` selects the public
            endpoint at :data:`DEFAULT_API_BASE_URL`.
        timeout: Default request timeout in seconds.  Long-poll calls add the
            poll timeout on top of it.
    """

    _DEFAULT_TIMEOUT: int = 10

    def __init__(
        self,
        bot_token: str,
        api_base_url: str | None = None,
        timeout: int = _DEFAULT_TIMEOUT,
    ) -> None:
        root = (api_base_url or DEFAULT_API_BASE_URL).rstrip("/")
        self._base_url = f"{root}/bot{bot_token}"
        self._timeout = timeout

    # ------------------------------------------------------------------
    #  Internal helpers
    # ------------------------------------------------------------------

    def _post(self, endpoint: str, payload: Optional[Dict[str, Any]] = None, timeout: float | None = None) -> Any:
        """Send a POST request and return the ``result`` field of the body.

        Raises:
            TransportError: On network failures or a body that is not JSON.
            APIException: If the status is not 2xx or the body says ``ok: false``.
            MalformedResponseError: If the JSON body is not an object.
        """
        url = f"{self._base_url}/{endpoint.lstrip('/')}"
        try:
            response = requests.post(url, json=payload, timeout=timeout or self._timeout)
        except requests.RequestException as exc:
            raise TransportError(endpoint, exc) from exc
        try:
            body = response.json()
        except ValueError as exc:
            raise TransportError(endpoint, exc) from exc
        if not isinstance(body, dict):
            raise MalformedResponseError(endpoint, f"expected a JSON object, got {type(body).__name__}")
        if not response.ok or not body.get("ok"):
            raise APIException(response.status_code, body)
        return body.get("result")

    async def _call(self, endpoint: str, payload: Optional[Dict[str, Any]] = None, timeout: float | None = None) -> Any:
        return await asyncio.to_thread(self._post, endpoint, payload, timeout)

    @staticmethod
    def _validate(model: Type[_ModelT], endpoint: str, result: Any) -> _ModelT:
        """Parse *result* as *model*, reporting a schema mismatch as a client error."""
        try:
            return model.model_validate(result)
        except ValidationError as exc:
            raise MalformedResponseError(endpoint, str(exc)) from exc

    @staticmethod
    def _parse_update(raw: Dict[str, Any]) -> Update:
        """Validate one raw update, reducing it to its id when it is malformed.

        The id alone is enough for the caller to move its offset past the
        update, so one odd payload cannot stall a polling loop.
        """
        if not isinstance(raw, dict) or not isinstance(raw.get("update_id"), int):
            raise MalformedResponseError("getUpdates", f"update without an id: {raw!r}")
        try:
            return Update.model_validate(raw)
        except ValidationError as exc:
            _sdk_logger.warning(
                "Malformed update reduced to its id",
                extra={"api_endpoint": "getUpdates", "update_id": raw.get("update_id"), "error": str(exc)},
            )
            return Update(update_id=raw["update_id"])

    # ------------------------------------------------------------------
    #  Endpoints
    # ------------------------------------------------------------------

    async def get_updates(
        self,
        offset: Optional[int] = None,
        limit: Optional[int] = None,
        timeout: int = 0,
        allowed_updates: Optional[List[str]] = None,
    ) -> List[Update]:
        """Receive incoming updates using long polling.

        *timeout* is the server-side long-poll duration; the HTTP timeout is
        extended by the same amount so the request is not cut short.
        """
        payload: Dict[str, Any] = {"timeout": timeout}
        if offset is not None:
            payload["offset"] = offset
        if limit is not None:
            payload["limit"] = limit
        if allowed_updates is not None:
            payload["allowed_updates"] = allowed_updates
        result = await self._call("getUpdates", payload, timeout=self._timeout + timeout)
        if result is None:
            return []
        if not isinstance(result, list):
            raise MalformedResponseError("getUpdates", f"expected a list, got {type(result).__name__}")
        return [self._parse_update(raw) for raw in result]

    async def get_me(self) -> User:
        """Return basic information about the bot.  Useful to validate the token."""
        result = await self._call("getMe")
        return self._validate(User, "getMe", result)

    async def send_message(
        self,
        chat_id: Union[int, str],
        text: str,
        parse_mode: Optional[str] = None,
        reply_markup: Optional[Dict[str, Any]] = None,
    ) -> Message:
        """Send a text message, optionally with Markdown and an inline keyboard."""
        _sdk_logger.debug("Sending message", extra={"chat_id": chat_id, "api_endpoint": "sendMessage", "text_preview": text[:80]})
        payload: Dict[str, Any] = {"chat_id": chat_id, "text": text}
        if parse_mode is not None:
            payload["parse_mode"] = parse_mode
        if reply_markup is not None:
            payload["reply_markup"] = reply_markup
        result = await self._call("sendMessage", payload)
        return self._validate(Message, "sendMessage", result)

    async def edit_message_reply_markup(
        self,
        chat_id: Union[int, str],
        message_id: int,
        reply_markup: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Replace the inline keyboard of an existing message."""
        payload: Dict[str, Any] = {"chat_id": chat_id, "message_id": message_id}
        if reply_markup is not None:
            payload["reply_markup"] = reply_markup
        await self._call("editMessageReplyMarkup", payload)

    async def answer_callback_query(self, callback_query_id: str, text: Optional[str] = None) -> None:
        """Acknowledge a callback query so the spinner disappears for the user."""
        payload: Dict[str, Any] = {"callback_query_id": callback_query_id}
        if text is not None:
            payload["text"] = text
        await self._call("answerCallbackQuery", payload)

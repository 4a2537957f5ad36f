"""Exception hierarchy for the Telegram Bot API client.

Every failure a :class:`~sdk.client.BotClient` call can produce derives from
:class:`BotClientError`, so callers that only care about "did it work" catch a
single type.
"""

from typing import Any, Dict, Optional


class BotClientError(Exception):
    """Base class for all Bot API client failures."""


class APIException(BotClientError):
    """The Bot API answered with a non-2xx status or ``"ok": false``.

    Attributes:
        status_code: HTTP status code returned by the API.
        response_body: Raw response body as a dict, when available.
    """

    def __init__(self, status_code: int, response_body: Optional[Dict[str, Any]] = None) -> None:
        """Initialise with the HTTP status code and optional body."""
        self.status_code = status_code
        self.response_body = response_body or {}
        description = self.response_body.get("description", "Unknown error")
        super().__init__(f"API error {status_code}: {description}")


class TransportError(BotClientError):
    """The request never produced a usable response (network, timeout, bad JSON)."""

    def __init__(self, endpoint: str, cause: Exception) -> None:
        self.endpoint = endpoint
        self.cause = cause
        super().__init__(f"{endpoint} transport error: {cause}")


class MalformedResponseError(BotClientError):
    """The API answered ``ok`` but the body or its ``result`` does not fit the schema."""

    def __init__(self, endpoint: str, detail: str) -> None:
        self.endpoint = endpoint
        self.detail = detail
        super().__init__(f"{endpoint} malformed response: {detail}")

from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

import httpx

from ..chat.errors import ChatAdapterPermanentError, ChatAdapterTransientError

TELEGRAM_API_BASE_URL = "https://api.telegram.org"


class TelegramAPIError(ChatAdapterTransientError):
    """Retryable Bot API failure (network error, 5xx, rate limit)."""


class TelegramPermanentError(ChatAdapterPermanentError):
    """Bot API failure that will not succeed on retry (bad token, bad request)."""


class TelegramBotClient:
    def __init__(
        self,
        bot_token: str,
        *,
        timeout_seconds: float = 10.0,
        base_url: str = TELEGRAM_API_BASE_URL,
        logger: Optional[logging.Logger] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=f"{base_url}/bot{bot_token}",
            timeout=timeout_seconds,
            transport=transport,
        )
        self._logger = logger or logging.getLogger(__name__)

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "TelegramBotClient":
        return self

    async def __aexit__(self, *_exc_info: object) -> None:
        await self.close()

    async def _request(
        self,
        method: str,
        payload: Optional[dict[str, Any]] = None,
        *,
        timeout: Optional[float] = None,
    ) -> Any:
        request_timeout = (
            httpx.USE_CLIENT_DEFAULT if timeout is None else timeout
        )
        try:
            response = await self._client.post(
                f"/{method}", json=payload or {}, timeout=request_timeout
            )
        except httpx.HTTPError as exc:
            # The token is part of the URL; never include the request in the message.
            raise TelegramAPIError(
                f"Telegram API network error for {method}: {type(exc).__name__}"
            ) from None
        try:
            data = response.json()
        except ValueError:
            data = None
        description = data.get("description") if isinstance(data, dict) else None
        status = response.status_code
        if status == 429 or status >= 500:
            raise TelegramAPIError(
                f"Telegram API error for {method}: status={status} {description or ''}".rstrip()
            )
        if not isinstance(data, dict) or not data.get("ok"):
            raise TelegramPermanentError(
                f"Telegram API request failed for {method}: status={status} "
                f"{description or 'invalid response'}"
            )
        return data.get("result")

    async def get_me(self) -> dict[str, Any]:
        result = await self._request("getMe")
        return result if isinstance(result, dict) else {}

    async def get_updates(
        self,
        *,
        offset: Optional[int] = None,
        timeout: int = 30,
        allowed_updates: Sequence[str] = (),
    ) -> list[dict[str, Any]]:
        payload: dict[str, Any] = {"timeout": timeout}
        if offset is not None:
            payload["offset"] = offset
        if allowed_updates:
            payload["allowed_updates"] = list(allowed_updates)
        # Long polling holds the request open for ``timeout`` seconds.
        result = await self._request("getUpdates", payload, timeout=timeout + 10.0)
        if not isinstance(result, list):
            return []
        return [item for item in result if isinstance(item, dict)]

    async def send_message(
        self,
        chat_id: int,
        text: str,
        *,
        parse_mode: Optional[str] = None,
        reply_markup: Optional[dict[str, Any]] = None,
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {"chat_id": chat_id, "text": text}
        if parse_mode:
            payload["parse_mode"] = parse_mode
        if reply_markup is not None:
            payload["reply_markup"] = reply_markup
        result = await self._request("sendMessage", payload)
        return result if isinstance(result, dict) else {}

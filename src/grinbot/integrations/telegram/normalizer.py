"""Maps Bot API update objects onto ``CanonicalUpdate``.

Private chats are identified by the chat's username, not the sender's. Every
other chat kind, and inline queries, are routed to ``/unsupported``.
"""

from __future__ import annotations

from typing import Any, Optional

from ...controller.commands import UNSUPPORTED_COMMAND
from ...controller.models import UNKNOWN_UPDATE, CanonicalUpdate
from ...core.coercion import coerce_id, coerce_text
from ..chat.errors import MalformedNotification

PRIVATE_CHAT = "private"


def _mapping(value: Any) -> Optional[dict[str, Any]]:
    return value if isinstance(value, dict) else None


def _require_id(container: Optional[dict[str, Any]], what: str) -> int:
    if container is None:
        raise MalformedNotification(f"telegram update is missing {what}")
    value = coerce_id(container.get("id"))
    if value is None:
        raise MalformedNotification(f"telegram update is missing {what}.id")
    return value


def _username(container: Optional[dict[str, Any]]) -> Optional[str]:
    if container is None:
        return None
    return coerce_text(container.get("username"))


class TelegramUpdateNormalizer:
    platform = "telegram"

    def normalize(self, payload: Any) -> CanonicalUpdate:
        update = _mapping(payload)
        if update is None:
            return UNKNOWN_UPDATE
        message = _mapping(update.get("message"))
        if message is not None:
            return self._normalize_message(message)
        callback = _mapping(update.get("callback_query"))
        if callback is not None:
            return self._normalize_callback(callback)
        inline_query = _mapping(update.get("inline_query"))
        if inline_query is not None:
            sender = _mapping(inline_query.get("from"))
            return CanonicalUpdate(
                conversation_id=_require_id(sender, "inline_query.from"),
                sender_identity=_username(sender),
                raw_text=UNSUPPORTED_COMMAND,
            )
        return UNKNOWN_UPDATE

    def _normalize_message(self, message: dict[str, Any]) -> CanonicalUpdate:
        chat = _mapping(message.get("chat"))
        chat_id = _require_id(chat, "message.chat")
        text = message.get("text")
        if not isinstance(text, str):
            return CanonicalUpdate(chat_id, None, None)
        if chat is not None and chat.get("type") == PRIVATE_CHAT:
            return CanonicalUpdate(chat_id, _username(chat), text)
        return CanonicalUpdate(
            chat_id, _username(_mapping(message.get("from"))), UNSUPPORTED_COMMAND
        )

    def _normalize_callback(self, callback: dict[str, Any]) -> CanonicalUpdate:
        message = _mapping(callback.get("message"))
        if message is None:
            raise MalformedNotification("telegram callback_query is missing message")
        chat = _mapping(message.get("chat"))
        chat_id = _require_id(chat, "callback_query.message.chat")
        data = callback.get("data")
        if chat is None or chat.get("type") != PRIVATE_CHAT or not isinstance(data, str):
            return CanonicalUpdate(chat_id, None, None)
        return CanonicalUpdate(chat_id, _username(chat), data)

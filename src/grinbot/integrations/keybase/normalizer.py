"""Maps ``keybase chat api-listen`` notifications onto ``CanonicalUpdate``.

The message id is used as the conversation id; replies are routed back by
the sender's username instead.
"""

from __future__ import annotations

from typing import Any, Optional

from ...controller.commands import UNSUPPORTED_COMMAND
from ...controller.models import UNKNOWN_UPDATE, CanonicalUpdate
from ...core.coercion import coerce_id, coerce_text
from ..chat.errors import MalformedNotification

CHAT_NOTIFICATION = "chat"
DIRECT_MEMBERS_TYPE = "impteamnative"


def _mapping(value: Any) -> Optional[dict[str, Any]]:
    return value if isinstance(value, dict) else None


def is_direct_conversation(channel: Optional[dict[str, Any]]) -> bool:
    if channel is None or channel.get("members_type") != DIRECT_MEMBERS_TYPE:
        return False
    name = coerce_text(channel.get("name")) or ""
    participants = [part for part in name.split(",") if part]
    return 0 < len(participants) <= 2


class KeybaseNotificationNormalizer:
    platform = "keybase"

    def normalize(self, payload: Any) -> CanonicalUpdate:
        notification = _mapping(payload)
        if notification is None or notification.get("type") != CHAT_NOTIFICATION:
            return UNKNOWN_UPDATE
        msg = _mapping(notification.get("msg"))
        if msg is None:
            raise MalformedNotification("keybase notification is missing msg")
        message_id = coerce_id(msg.get("id"))
        if message_id is None:
            raise MalformedNotification("keybase notification is missing msg.id")
        sender = _mapping(msg.get("sender"))
        if sender is None:
            raise MalformedNotification("keybase notification is missing msg.sender")
        content = _mapping(msg.get("content"))
        if content is None:
            raise MalformedNotification("keybase notification is missing msg.content")

        username = coerce_text(sender.get("username"))
        if not is_direct_conversation(_mapping(msg.get("channel"))):
            return CanonicalUpdate(message_id, username, UNSUPPORTED_COMMAND)
        text = _mapping(content.get("text"))
        body = coerce_text(text.get("body")) if text is not None else None
        return CanonicalUpdate(message_id, username, body)

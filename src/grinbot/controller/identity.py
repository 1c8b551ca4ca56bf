from __future__ import annotations

from typing import Optional, Union

from .models import NoIdentityAction, WrongIdentityAction


def check_identity(
    conversation_id: int,
    sender_identity: Optional[str],
    configured_identity: str,
) -> Optional[Union[NoIdentityAction, WrongIdentityAction]]:
    """Return a rejection action for disallowed senders, ``None`` otherwise."""
    if sender_identity is None:
        return NoIdentityAction(conversation_id)
    if sender_identity != configured_identity:
        return WrongIdentityAction(conversation_id)
    return None

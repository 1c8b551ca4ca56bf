"""Maps the reduced ``State`` to a transport-neutral outgoing message."""

from __future__ import annotations

from dataclasses import dataclass

from .models import State

QUICK_COMMANDS: tuple[str, ...] = ("/balance", "/help")


@dataclass(frozen=True)
class OutgoingMessage:
    conversation_id: int
    text: str
    quick_commands: tuple[str, ...] = QUICK_COMMANDS


def render_reply(state: State) -> OutgoingMessage:
    if state.conversation_id is None:
        raise ValueError("cannot render a reply before any update was processed")
    return OutgoingMessage(
        conversation_id=state.conversation_id,
        text=state.message if state.message is not None else "",
    )

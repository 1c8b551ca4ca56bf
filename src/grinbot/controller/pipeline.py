"""Sequential update pipeline: guard, parse, reduce, observe, render.

There is exactly one ``State`` per pipeline. Each call to ``dispatch``
replaces it and then calls every observer synchronously with the new value.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable, Optional

from ..core.logging_utils import log_event
from .commands import get_action, parse_command, tokenize_command
from .models import Action, CanonicalUpdate, State
from .reducer import reduce
from .renderer import OutgoingMessage, render_reply

StateObserver = Callable[[State], None]

ONE_SHOT_CONVERSATION_ID = 0


def logging_observer(logger: logging.Logger) -> StateObserver:
    """Build an observer that logs states carrying a severity."""

    def _observe(state: State) -> None:
        if state.error_level is None:
            return
        log_event(
            logger,
            int(state.error_level),
            f"grinbot.state.{state.error_level.name.lower()}",
            **state.loggable(),
        )

    return _observe


class CommandPipeline:
    def __init__(
        self,
        *,
        configured_identity: str,
        initial_state: Optional[State] = None,
        observers: Iterable[StateObserver] = (),
    ) -> None:
        self._configured_identity = configured_identity
        self._state = initial_state if initial_state is not None else State()
        self._observers = tuple(observers)

    @property
    def state(self) -> State:
        return self._state

    def dispatch(self, action: Action) -> State:
        new_state = reduce(self._state, action)
        self._state = new_state
        for observer in self._observers:
            observer(new_state)
        return new_state

    def resolve_action(self, update: CanonicalUpdate) -> Action:
        return get_action(
            update.conversation_id,
            update.sender_identity,
            update.raw_text,
            self._configured_identity,
        )

    def handle_update(self, update: CanonicalUpdate) -> OutgoingMessage:
        self.dispatch(self.resolve_action(update))
        return render_reply(self._state)

    def run_command(
        self, raw_command: str, *, conversation_id: int = ONE_SHOT_CONVERSATION_ID
    ) -> State:
        """Run one local command without the identity check (one-shot mode)."""
        command_name, args = tokenize_command(raw_command)
        return self.dispatch(parse_command(command_name, args, conversation_id))

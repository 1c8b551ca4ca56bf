"""Screen reducer: computes the next ``State`` from the current one and an action.

Only the create/send/balance actions touch the wallet backend. Backend
failures become a reply with a severity; they are never retried and never
raised out of ``reduce``.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Callable, Optional

from .messages import (
    HELP_TEXT,
    MODE_NOT_SUPPORTED_MESSAGE,
    NO_IDENTITY_MESSAGE,
    WRONG_IDENTITY_MESSAGE,
    format_error,
)
from .models import (
    Action,
    BackAction,
    BalanceAction,
    CommandErrorAction,
    CreateAction,
    HelpAction,
    HomeAction,
    ModeNotSupportedAction,
    NoIdentityAction,
    Screen,
    SendAction,
    Severity,
    State,
    UnknownAction,
    WrongIdentityAction,
)
from .wallet import WalletBackend, WalletOperationError

_NOTICES = {
    NoIdentityAction: NO_IDENTITY_MESSAGE,
    WrongIdentityAction: WRONG_IDENTITY_MESSAGE,
    ModeNotSupportedAction: MODE_NOT_SUPPORTED_MESSAGE,
}


def _navigate(state: State, action: Action, screen: Screen, **changes: object) -> State:
    # prev_screen is only ever changed by Home and Back.
    return replace(
        state, screen=screen, conversation_id=action.conversation_id, **changes
    )


def _call_wallet(
    state: State,
    operation: Callable[[WalletBackend], str],
    failure_level: Severity,
) -> tuple[str, Optional[Severity]]:
    wallet = state.context.wallet
    try:
        if wallet is None:
            raise WalletOperationError("No wallet backend configured")
        return operation(wallet), None
    except WalletOperationError as exc:
        return format_error(exc), failure_level


def reduce(state: State, action: Action) -> State:
    if isinstance(action, HomeAction):
        return replace(
            state,
            screen=Screen.HOME,
            prev_screen=Screen.HOME,
            conversation_id=action.conversation_id,
            message=None,
            error_level=None,
        )
    if isinstance(action, CreateAction):
        message, level = _call_wallet(
            state, lambda wallet: wallet.create_wallet(), Severity.ERROR
        )
        return _navigate(state, action, Screen.CREATE, message=message, error_level=level)
    if isinstance(action, SendAction):
        message, level = _call_wallet(
            state,
            lambda wallet: wallet.send(action.amount, action.destination),
            Severity.INFO,
        )
        return _navigate(state, action, Screen.SEND, message=message, error_level=level)
    if isinstance(action, BalanceAction):
        message, level = _call_wallet(
            state, lambda wallet: wallet.balance(), Severity.INFO
        )
        return _navigate(
            state, action, Screen.BALANCE, message=message, error_level=level
        )
    if isinstance(action, HelpAction):
        return _navigate(state, action, Screen.HELP, message=HELP_TEXT, error_level=None)
    if isinstance(action, (NoIdentityAction, WrongIdentityAction, ModeNotSupportedAction)):
        return replace(
            state,
            conversation_id=action.conversation_id,
            message=_NOTICES[type(action)],
            error_level=Severity.WARN,
        )
    if isinstance(action, BackAction):
        return replace(
            state,
            screen=state.prev_screen,
            prev_screen=Screen.HOME,
            conversation_id=action.conversation_id,
            message=None,
            error_level=None,
        )
    if isinstance(action, CommandErrorAction):
        return replace(
            state,
            conversation_id=action.conversation_id,
            message=format_error(action.error),
            error_level=Severity.ERROR,
        )
    if isinstance(action, UnknownAction):
        return replace(
            state,
            conversation_id=action.conversation_id,
            message=None,
            error_level=Severity.ERROR,
        )
    raise TypeError(f"Unsupported action: {action!r}")

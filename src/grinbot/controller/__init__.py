"""Transport-agnostic command interpretation and state transitions."""

from .commands import get_action, parse_command, parse_send_command, tokenize_command
from .identity import check_identity
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
    ReducerContext,
    Screen,
    SendAction,
    Severity,
    State,
    UnknownAction,
    WrongIdentityAction,
)
from .pipeline import CommandPipeline, logging_observer
from .reducer import reduce
from .renderer import OutgoingMessage, render_reply
from .wallet import WalletBackend, WalletOperationError

__all__ = [
    "Action",
    "BackAction",
    "BalanceAction",
    "CommandErrorAction",
    "CommandPipeline",
    "CreateAction",
    "HelpAction",
    "HomeAction",
    "ModeNotSupportedAction",
    "NoIdentityAction",
    "OutgoingMessage",
    "ReducerContext",
    "Screen",
    "SendAction",
    "Severity",
    "State",
    "UnknownAction",
    "WalletBackend",
    "WalletOperationError",
    "WrongIdentityAction",
    "check_identity",
    "get_action",
    "logging_observer",
    "parse_command",
    "parse_send_command",
    "reduce",
    "render_reply",
    "tokenize_command",
]

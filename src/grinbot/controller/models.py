"""State, action and parse-error models for the command engine.

Everything here is immutable; the reducer derives new values with
``dataclasses.replace`` instead of mutating.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum, IntEnum
from typing import Optional, Union

from .wallet import WalletBackend


class Screen(str, Enum):
    """Logical UI view presently shown to the user."""

    HOME = "home"
    CREATE = "create"
    SEND = "send"
    BALANCE = "balance"
    HELP = "help"


class Severity(IntEnum):
    """Observability level attached to a state; ordered Info < Warn < Error."""

    INFO = logging.INFO
    WARN = logging.WARNING
    ERROR = logging.ERROR


class CommandParseError(Exception):
    """Closed set of argument errors produced by command parsing."""

    message = "Invalid command."

    def __str__(self) -> str:
        return self.message

    def __eq__(self, other: object) -> bool:
        return type(self) is type(other) and self.args == getattr(other, "args", None)

    def __hash__(self) -> int:
        return hash((type(self), self.args))


class WrongArgumentCount(CommandParseError):
    def __init__(self, usage: str) -> None:
        super().__init__(usage)
        self.usage = usage

    def __str__(self) -> str:
        return self.usage


class DestinationNotAUrl(CommandParseError):
    message = "The destination is not a valid URL."


class AmountNotANumber(CommandParseError):
    message = "The amount is not a number."


@dataclass(frozen=True)
class ParsedSendCommand:
    amount: Decimal
    destination: str


@dataclass(frozen=True)
class ReducerContext:
    """Collaborators threaded through every state unchanged."""

    wallet: Optional[WalletBackend] = field(default=None, repr=False)


@dataclass(frozen=True)
class State:
    screen: Screen = Screen.HOME
    prev_screen: Screen = Screen.HOME
    conversation_id: Optional[int] = None
    message: Optional[str] = None
    error_level: Optional[Severity] = None
    context: ReducerContext = field(default_factory=ReducerContext, repr=False)

    def loggable(self) -> dict[str, object]:
        """Fields safe to write to logs; the context is never included."""
        return {
            "screen": self.screen.value,
            "prev_screen": self.prev_screen.value,
            "conversation_id": self.conversation_id,
            "message": self.message,
        }


@dataclass(frozen=True)
class HomeAction:
    conversation_id: int


@dataclass(frozen=True)
class CreateAction:
    conversation_id: int


@dataclass(frozen=True)
class SendAction:
    conversation_id: int
    amount: Decimal
    destination: str


@dataclass(frozen=True)
class BalanceAction:
    conversation_id: int


@dataclass(frozen=True)
class HelpAction:
    conversation_id: int


@dataclass(frozen=True)
class NoIdentityAction:
    conversation_id: int


@dataclass(frozen=True)
class WrongIdentityAction:
    conversation_id: int


@dataclass(frozen=True)
class ModeNotSupportedAction:
    conversation_id: int


@dataclass(frozen=True)
class BackAction:
    conversation_id: int


@dataclass(frozen=True)
class CommandErrorAction:
    conversation_id: int
    error: CommandParseError


@dataclass(frozen=True)
class UnknownAction:
    conversation_id: int


Action = Union[
    HomeAction,
    CreateAction,
    SendAction,
    BalanceAction,
    HelpAction,
    NoIdentityAction,
    WrongIdentityAction,
    ModeNotSupportedAction,
    BackAction,
    CommandErrorAction,
    UnknownAction,
]


@dataclass(frozen=True)
class CanonicalUpdate:
    """Transport-neutral view of one inbound notification."""

    conversation_id: int
    sender_identity: Optional[str]
    raw_text: Optional[str]


UNKNOWN_UPDATE = CanonicalUpdate(conversation_id=-1, sender_identity=None, raw_text=None)

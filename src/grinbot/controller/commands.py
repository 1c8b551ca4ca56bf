"""Command tokenizing and parsing.

Parsing never raises: argument problems surface as ``CommandErrorAction``
so the reducer can turn them into a reply.
"""

from __future__ import annotations

import re
from decimal import Decimal
from typing import Callable, Optional, Sequence
from urllib.parse import urlsplit

from .identity import check_identity
from .messages import SEND_USAGE
from .models import (
    Action,
    AmountNotANumber,
    BackAction,
    BalanceAction,
    CommandErrorAction,
    CommandParseError,
    CreateAction,
    DestinationNotAUrl,
    HelpAction,
    HomeAction,
    ModeNotSupportedAction,
    ParsedSendCommand,
    SendAction,
    UnknownAction,
    WrongArgumentCount,
)

UNSUPPORTED_COMMAND = "/unsupported"

_URL_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*$")
_HOST_SCHEMES = frozenset({"http", "https"})
# ASCII decimal or scientific notation; no separators, padding or nan/inf.
_AMOUNT_RE = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")

_SIMPLE_COMMANDS: dict[str, Callable[[int], Action]] = {
    "/home": HomeAction,
    "/create": CreateAction,
    "/balance": BalanceAction,
    "/help": HelpAction,
    "/start": HelpAction,
    "/back": BackAction,
    UNSUPPORTED_COMMAND: ModeNotSupportedAction,
}


def tokenize_command(raw_text: str) -> tuple[str, list[str]]:
    """Split ``raw_text`` on single spaces into ``(command, args)``.

    No quoting or escaping; consecutive spaces yield empty tokens.
    """
    tokens = raw_text.split(" ")
    return tokens[0], tokens[1:]


def _parse_destination(token: str) -> str:
    try:
        parts = urlsplit(token)
    except ValueError as exc:
        raise DestinationNotAUrl() from exc
    if not parts.scheme or not _URL_SCHEME_RE.match(parts.scheme):
        raise DestinationNotAUrl()
    if parts.scheme.lower() in _HOST_SCHEMES and not parts.hostname:
        raise DestinationNotAUrl()
    if not parts.netloc and not parts.path:
        raise DestinationNotAUrl()
    return token


def _parse_amount(token: str) -> Decimal:
    if _AMOUNT_RE.fullmatch(token) is None:
        raise AmountNotANumber()
    return Decimal(token)


def parse_send_command(args: Sequence[str]) -> ParsedSendCommand:
    """Validate ``/send`` arguments: count, then destination, then amount."""
    if len(args) != 2:
        raise WrongArgumentCount(SEND_USAGE)
    amount_token, destination_token = args
    destination = _parse_destination(destination_token)
    amount = _parse_amount(amount_token)
    return ParsedSendCommand(amount=amount, destination=destination)


def parse_command(
    command_name: str, args: Sequence[str], conversation_id: int
) -> Action:
    if command_name == "/send":
        try:
            parsed = parse_send_command(args)
        except CommandParseError as exc:
            return CommandErrorAction(conversation_id, exc)
        return SendAction(conversation_id, parsed.amount, parsed.destination)
    factory = _SIMPLE_COMMANDS.get(command_name)
    if factory is None:
        return UnknownAction(conversation_id)
    return factory(conversation_id)


def get_action(
    conversation_id: int,
    sender_identity: Optional[str],
    raw_text: Optional[str],
    configured_identity: str,
) -> Action:
    """Resolve the action for one canonical update.

    The identity check runs before the command is looked at, so disallowed
    senders never reach a wallet operation.
    """
    if raw_text is None:
        return UnknownAction(conversation_id)
    guard_action = check_identity(conversation_id, sender_identity, configured_identity)
    if guard_action is not None:
        return guard_action
    command_name, args = tokenize_command(raw_text)
    return parse_command(command_name, args, conversation_id)

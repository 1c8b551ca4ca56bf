"""Reply bodies for wallet results, in the neutral ``<b>/<i>/<pre>`` markup."""

from __future__ import annotations

from decimal import Decimal
from typing import Mapping

from .amounts import format_grin

SUCCESS_PREFIX = "<b>Success:</b>\n"

_INFO_ROWS = (
    ("Total", "total"),
    ("Awaiting confirmation", "amount_awaiting_confirmation"),
    ("Awaiting finalization", "amount_awaiting_finalization"),
    ("Immature", "amount_immature"),
    ("Locked", "amount_locked"),
    ("Currently spendable", "amount_currently_spendable"),
)


def render_seed(seed: str) -> str:
    return (
        "<b>Your wallet was created.</b>\n\n"
        "This is your recovery phrase. Write it down and keep it safe; "
        "it is the only way to restore your wallet.\n\n"
        f"<pre>{seed}</pre>"
    )


def render_send_success(
    *, amount: Decimal, fee: Decimal, height: str, slate_id: str
) -> str:
    return (
        f"{SUCCESS_PREFIX}"
        f"Sent <b>{format_grin(amount)}</b> grin (fee {format_grin(fee)}).\n"
        f"Block height: {height}\n"
        f"Transaction id: <pre>{slate_id}</pre>"
    )


def render_wallet_info(
    *,
    last_confirmed_height: str,
    minimum_confirmations: str,
    amounts: Mapping[str, Decimal],
) -> str:
    lines = [
        SUCCESS_PREFIX.rstrip("\n"),
        f"<i>Wallet summary at height {last_confirmed_height} "
        f"({minimum_confirmations} confirmations)</i>",
    ]
    for label, key in _INFO_ROWS:
        lines.append(f"{label}: <b>{format_grin(amounts[key])}</b>")
    return "\n".join(lines)

"""Contract between the reducer and the wallet backend.

The reducer treats the backend as a black box: each operation returns the
reply text on success or raises ``WalletOperationError`` carrying the
backend's own error text.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Protocol, runtime_checkable

from ..core.exceptions import GrinbotError


class WalletOperationError(GrinbotError):
    """Opaque failure reported by the wallet backend."""


@runtime_checkable
class WalletBackend(Protocol):
    """Blocking wallet operations invoked by the reducer."""

    def create_wallet(self) -> str:
        """Create the bot user's wallet and return the reply text."""

    def send(self, amount: Decimal, destination: str) -> str:
        """Send ``amount`` grin to ``destination`` and return the reply text."""

    def balance(self) -> str:
        """Return the reply text describing the wallet balance."""

"""``WalletBackend`` implementation backed by a local Grin wallet."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path
from typing import Any, Optional

import httpx

from ...controller.wallet import WalletOperationError
from ...core.logging_utils import log_event
from .amounts import AmountTooLarge, grin_to_nanogrin, nanogrin_to_grin
from .cli import CommandRunner, init_wallet, run_command
from .config import WalletConfig
from .owner_api import OwnerApiClient, read_api_secret
from .templates import render_seed, render_send_success, render_wallet_info

logger = logging.getLogger(__name__)

SOURCE_ACCOUNT = "default"
MINIMUM_CONFIRMATIONS = 10
MAX_OUTPUTS = 500
NUM_CHANGE_OUTPUTS = 1


@dataclass
class GrinWalletBackend:
    """Wallet operations for the single configured user.

    The user's wallet lives in ``<wallet.dir>/<username>``. Creation shells out
    to ``grin-wallet``; send and balance go through the Owner API.
    """

    config: WalletConfig
    username: str
    runner: CommandRunner = run_command
    transport: Optional[httpx.BaseTransport] = field(default=None, repr=False)

    @property
    def wallet_dir(self) -> Path:
        return self.config.base_dir / self.username

    def _owner_api(self) -> OwnerApiClient:
        return OwnerApiClient(
            endpoint=self.config.owner_endpoint,
            api_secret=read_api_secret(self.wallet_dir),
            timeout_seconds=self.config.timeout_seconds,
            transport=self.transport,
        )

    def create_wallet(self) -> str:
        if not self.config.password:
            raise WalletOperationError(
                f"Wallet password is not set; export {self.config.password_env}"
            )
        seed = init_wallet(
            wallet_dir=self.wallet_dir,
            binary=self.config.binary,
            password=self.config.password,
            timeout_seconds=self.config.timeout_seconds,
            runner=self.runner,
        )
        log_event(logger, logging.INFO, "grin.wallet.created", username=self.username)
        return render_seed(seed)

    def send(self, amount: Decimal, destination: str) -> str:
        try:
            nanogrin = grin_to_nanogrin(amount)
        except AmountTooLarge as exc:
            raise WalletOperationError("The amount is too large.") from exc
        if nanogrin <= 0:
            raise WalletOperationError("The amount must be greater than zero.")
        params = {
            "args": {
                "src_acct_name": SOURCE_ACCOUNT,
                "amount": nanogrin,
                "minimum_confirmations": MINIMUM_CONFIRMATIONS,
                "max_outputs": MAX_OUTPUTS,
                "num_change_outputs": NUM_CHANGE_OUTPUTS,
                "selection_strategy_is_use_all": False,
                "message": None,
                "target_slate_version": None,
                "estimate_only": None,
                "send_args": {
                    "method": "http",
                    "dest": destination,
                    "finalize": True,
                    "post_tx": True,
                    "fluff": False,
                },
            }
        }
        slate = self._owner_api().call("init_send_tx", params)
        if not isinstance(slate, dict):
            raise WalletOperationError("init_send_tx returned an unexpected result")
        try:
            sent = nanogrin_to_grin(slate["amount"])
            fee = nanogrin_to_grin(slate["fee"])
            height = str(slate["height"])
            slate_id = str(slate["id"])
        except (KeyError, ValueError) as exc:
            raise WalletOperationError(
                f"init_send_tx returned an incomplete slate: {exc}"
            ) from exc
        log_event(
            logger,
            logging.INFO,
            "grin.wallet.sent",
            slate_id=slate_id,
            amount=str(sent),
            destination=destination,
        )
        return render_send_success(amount=sent, fee=fee, height=height, slate_id=slate_id)

    def balance(self) -> str:
        result = self._owner_api().call(
            "retrieve_summary_info", [True, MINIMUM_CONFIRMATIONS]
        )
        info = _summary_info(result)
        try:
            amounts = {
                key: nanogrin_to_grin(info[key])
                for key in (
                    "total",
                    "amount_awaiting_confirmation",
                    "amount_awaiting_finalization",
                    "amount_immature",
                    "amount_locked",
                    "amount_currently_spendable",
                )
            }
            return render_wallet_info(
                last_confirmed_height=str(info["last_confirmed_height"]),
                minimum_confirmations=str(info["minimum_confirmations"]),
                amounts=amounts,
            )
        except (KeyError, ValueError) as exc:
            raise WalletOperationError(
                f"retrieve_summary_info returned incomplete data: {exc}"
            ) from exc


def _summary_info(result: Any) -> dict[str, Any]:
    # The result is a ``[refreshed_from_node, wallet_info]`` pair.
    if isinstance(result, list) and len(result) == 2 and isinstance(result[1], dict):
        return result[1]
    raise WalletOperationError("retrieve_summary_info returned an unexpected result")

"""Wallet creation through the ``grin-wallet`` command line."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Callable, Sequence

from ...controller.wallet import WalletOperationError
from ...core.logging_utils import log_event

logger = logging.getLogger(__name__)

RECOVERY_PHRASE_MARKER = "Your recovery phrase is:"

CommandRunner = Callable[[Sequence[str], Path, float], "subprocess.CompletedProcess[str]"]


def run_command(
    cmd: Sequence[str], cwd: Path, timeout_seconds: float
) -> "subprocess.CompletedProcess[str]":
    try:
        return subprocess.run(
            list(cmd),
            cwd=cwd,
            text=True,
            capture_output=True,
            timeout=timeout_seconds,
            check=False,
        )
    except subprocess.TimeoutExpired as exc:
        raise WalletOperationError(
            f"{cmd[0]} timed out after {timeout_seconds:g}s"
        ) from exc
    except OSError as exc:
        raise WalletOperationError(f"Failed to run {cmd[0]}: {exc}") from exc


def extract_recovery_phrase(stdout: str) -> str:
    lines = stdout.split("\n")
    try:
        index = lines.index(RECOVERY_PHRASE_MARKER)
    except ValueError as exc:
        raise WalletOperationError("Can't create wallet") from exc
    # The phrase is printed after a blank line.
    if index + 2 >= len(lines) or not lines[index + 2].strip():
        raise WalletOperationError("Can't create wallet")
    return lines[index + 2].strip()


def init_wallet(
    *,
    wallet_dir: Path,
    binary: str,
    password: str,
    timeout_seconds: float,
    runner: CommandRunner = run_command,
) -> str:
    """Create ``wallet_dir`` and initialize a wallet in it; return the seed."""
    if wallet_dir.exists():
        raise WalletOperationError("Wallet exists")
    try:
        wallet_dir.mkdir(parents=True)
    except OSError as exc:
        raise WalletOperationError(f"Failed to create {wallet_dir}: {exc}") from exc
    log_event(logger, logging.INFO, "grin.wallet.init", wallet_dir=str(wallet_dir))
    completed = runner([binary, "-p", password, "init", "-h"], wallet_dir, timeout_seconds)
    if completed.returncode != 0:
        log_event(
            logger,
            logging.WARNING,
            "grin.wallet.init_failed",
            returncode=completed.returncode,
            stderr=(completed.stderr or "").strip(),
        )
    return extract_recovery_phrase(completed.stdout or "")

"""Grin wallet backend: owner API client and ``grin-wallet`` CLI wrapper."""

from .backend import GrinWalletBackend
from .config import WalletConfig, WalletConfigError

__all__ = ["GrinWalletBackend", "WalletConfig", "WalletConfigError"]

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Optional

DEFAULT_WALLET_DIR = "~/.grin/main/bot_wallets"
DEFAULT_OWNER_ENDPOINT = "http://127.0.0.1:3420/v2/owner"
DEFAULT_PASSWORD_ENV = "GRINBOT_WALLET_PASSWORD"
DEFAULT_BINARY = "grin-wallet"
DEFAULT_TIMEOUT_SECONDS = 60.0


class WalletConfigError(Exception):
    """Raised when the wallet section of the config is invalid."""


@dataclass(frozen=True)
class WalletConfig:
    base_dir: Path
    owner_endpoint: str
    password_env: str
    password: Optional[str] = field(default=None, repr=False)
    binary: str = DEFAULT_BINARY
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS

    @classmethod
    def from_raw(
        cls,
        *,
        root: Path,
        raw: Any,
        env: Optional[Mapping[str, str]] = None,
    ) -> "WalletConfig":
        cfg: dict[str, Any] = raw if isinstance(raw, dict) else {}
        source = env if env is not None else os.environ

        dir_value = cfg.get("dir", DEFAULT_WALLET_DIR)
        if not isinstance(dir_value, str) or not dir_value.strip():
            raise WalletConfigError("wallet.dir must be a non-empty string path")
        base_dir = Path(dir_value).expanduser()
        if not base_dir.is_absolute():
            base_dir = root / base_dir

        owner_endpoint = str(cfg.get("owner_endpoint", DEFAULT_OWNER_ENDPOINT)).strip()
        if not owner_endpoint.startswith(("http://", "https://")):
            raise WalletConfigError("wallet.owner_endpoint must be an http(s) URL")

        password_env = str(cfg.get("password_env", DEFAULT_PASSWORD_ENV)).strip()
        if not password_env:
            raise WalletConfigError("wallet.password_env must be non-empty")

        binary = str(cfg.get("binary", DEFAULT_BINARY)).strip()
        if not binary:
            raise WalletConfigError("wallet.binary must be non-empty")

        timeout_value = cfg.get("timeout_seconds", DEFAULT_TIMEOUT_SECONDS)
        if isinstance(timeout_value, bool) or not isinstance(timeout_value, (int, float)):
            raise WalletConfigError("wallet.timeout_seconds must be a number")
        if timeout_value <= 0:
            raise WalletConfigError("wallet.timeout_seconds must be > 0")

        return cls(
            base_dir=base_dir,
            owner_endpoint=owner_endpoint,
            password_env=password_env,
            password=source.get(password_env) or None,
            binary=binary,
            timeout_seconds=float(timeout_value),
        )

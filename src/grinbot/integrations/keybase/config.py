from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

DEFAULT_BINARY = "keybase"
DEFAULT_PAPERKEY_ENV = "GRINBOT_KEYBASE_PAPERKEY"


class KeybaseBotConfigError(Exception):
    """Raised when the keybase config section is invalid."""


@dataclass(frozen=True)
class KeybaseBotConfig:
    binary: str = DEFAULT_BINARY
    bot_username: Optional[str] = None
    paperkey_env: str = DEFAULT_PAPERKEY_ENV
    paperkey: Optional[str] = field(default=None, repr=False)

    @classmethod
    def from_raw(
        cls, raw: Any, *, env: Optional[Mapping[str, str]] = None
    ) -> "KeybaseBotConfig":
        cfg: dict[str, Any] = raw if isinstance(raw, dict) else {}
        source = env if env is not None else os.environ
        binary = str(cfg.get("binary", DEFAULT_BINARY)).strip()
        if not binary:
            raise KeybaseBotConfigError("keybase.binary must be non-empty")
        bot_username = cfg.get("bot_username")
        if bot_username is not None:
            if not isinstance(bot_username, str):
                raise KeybaseBotConfigError("keybase.bot_username must be a string")
            bot_username = bot_username.strip() or None
        paperkey_env = str(cfg.get("paperkey_env", DEFAULT_PAPERKEY_ENV)).strip()
        if not paperkey_env:
            raise KeybaseBotConfigError("keybase.paperkey_env must be non-empty")
        paperkey = source.get(paperkey_env) or None
        if paperkey and not bot_username:
            raise KeybaseBotConfigError(
                "keybase.bot_username is required to log in with a paper key"
            )
        return cls(
            binary=binary,
            bot_username=bot_username,
            paperkey_env=paperkey_env,
            paperkey=paperkey,
        )

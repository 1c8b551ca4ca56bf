from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

DEFAULT_BOT_TOKEN_ENV = "GRINBOT_TELEGRAM_BOT_TOKEN"
DEFAULT_POLL_TIMEOUT_SECONDS = 30
DEFAULT_ALLOWED_UPDATES = ("message", "callback_query", "inline_query")


class TelegramBotConfigError(Exception):
    """Raised when the telegram config section is invalid."""


@dataclass(frozen=True)
class TelegramBotConfig:
    bot_token_env: str
    bot_token: Optional[str] = field(default=None, repr=False)
    poll_timeout_seconds: int = DEFAULT_POLL_TIMEOUT_SECONDS
    allowed_updates: tuple[str, ...] = DEFAULT_ALLOWED_UPDATES

    @classmethod
    def from_raw(
        cls, raw: Any, *, env: Optional[Mapping[str, str]] = None
    ) -> "TelegramBotConfig":
        cfg: dict[str, Any] = raw if isinstance(raw, dict) else {}
        source = env if env is not None else os.environ
        bot_token_env = str(cfg.get("bot_token_env", DEFAULT_BOT_TOKEN_ENV)).strip()
        if not bot_token_env:
            raise TelegramBotConfigError("telegram.bot_token_env must be non-empty")
        poll_timeout = cfg.get("poll_timeout_seconds", DEFAULT_POLL_TIMEOUT_SECONDS)
        if isinstance(poll_timeout, bool) or not isinstance(poll_timeout, int):
            raise TelegramBotConfigError("telegram.poll_timeout_seconds must be an integer")
        if poll_timeout < 0:
            raise TelegramBotConfigError("telegram.poll_timeout_seconds must be >= 0")
        return cls(
            bot_token_env=bot_token_env,
            bot_token=source.get(bot_token_env) or None,
            poll_timeout_seconds=poll_timeout,
        )

    def validate(self) -> None:
        if not self.bot_token:
            raise TelegramBotConfigError(
                f"missing telegram bot token; set {self.bot_token_env}"
            )

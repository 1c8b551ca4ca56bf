from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional

from ...controller.pipeline import CommandPipeline
from ...controller.renderer import OutgoingMessage
from ...core.coercion import coerce_id
from ...core.exceptions import GrinbotError
from ...core.logging_utils import log_event
from ...core.retry import TELEGRAM_POLL_RETRY, RetryPolicy, call_with_retry
from ..chat.bootstrap import ChatBootstrapStep, run_chat_bootstrap_steps
from ..chat.errors import ChatAdapterError
from ..chat.normalizer import UpdateNormalizer, normalize_or_unknown
from .client import TelegramBotClient
from .config import TelegramBotConfig
from .normalizer import TelegramUpdateNormalizer
from .rendering import (
    TELEGRAM_PARSE_MODE,
    build_quick_command_keyboard,
    format_telegram_html,
)


class TelegramBotService:
    """Long-polls ``getUpdates`` and answers each update in arrival order.

    An update is fully handled (normalized, reduced and replied to) before
    the next one is read.
    """

    platform = "telegram"

    def __init__(
        self,
        config: TelegramBotConfig,
        pipeline: CommandPipeline,
        *,
        client: Optional[TelegramBotClient] = None,
        normalizer: Optional[UpdateNormalizer] = None,
        logger: Optional[logging.Logger] = None,
        retry_policy: RetryPolicy = TELEGRAM_POLL_RETRY,
    ) -> None:
        self._config = config
        self._retry_policy = retry_policy
        self._pipeline = pipeline
        self._logger = logger or logging.getLogger(__name__)
        self._client = client or TelegramBotClient(
            config.bot_token or "", logger=self._logger
        )
        self._normalizer = normalizer or TelegramUpdateNormalizer()
        self._offset: Optional[int] = None
        self._bot_username: Optional[str] = None

    @property
    def bot_username(self) -> Optional[str]:
        return self._bot_username

    async def run_polling(self) -> None:
        await run_chat_bootstrap_steps(
            platform=self.platform,
            logger=self._logger,
            steps=(ChatBootstrapStep("get_me", self._prime_bot_identity),),
        )
        log_event(
            self._logger,
            logging.INFO,
            "telegram.bot.started",
            bot_username=self._bot_username,
            poll_timeout=self._config.poll_timeout_seconds,
            allowed_updates=list(self._config.allowed_updates),
        )
        try:
            while True:
                try:
                    await self.poll_once()
                except GrinbotError as exc:
                    log_event(
                        self._logger, exc.severity, "telegram.poll.failed", exc=exc
                    )
                    if not exc.recoverable:
                        raise
                    await asyncio.sleep(self._retry_policy.cooldown_seconds)
        finally:
            await self._client.close()

    async def _prime_bot_identity(self) -> None:
        payload = await self._client.get_me()
        username = payload.get("username")
        if isinstance(username, str) and username:
            self._bot_username = username

    async def _fetch_updates(self) -> list[dict[str, Any]]:
        return await call_with_retry(
            lambda: self._client.get_updates(
                offset=self._offset,
                timeout=self._config.poll_timeout_seconds,
                allowed_updates=self._config.allowed_updates,
            ),
            policy=self._retry_policy,
            logger=self._logger,
            event="telegram.poll",
        )

    async def poll_once(self) -> int:
        """Fetch one batch of updates and handle them; return the batch size."""
        updates = await self._fetch_updates()
        for payload in updates:
            update_id = coerce_id(payload.get("update_id"))
            if update_id is not None:
                self._offset = update_id + 1
            await self.handle_payload(payload)
        return len(updates)

    async def handle_payload(self, payload: Any) -> OutgoingMessage:
        update = normalize_or_unknown(self._normalizer, payload, self._logger)
        reply = await asyncio.to_thread(self._pipeline.handle_update, update)
        await self.deliver(reply)
        return reply

    async def deliver(self, reply: OutgoingMessage) -> None:
        if not reply.text:
            log_event(
                self._logger,
                logging.DEBUG,
                "telegram.reply.skipped",
                chat_id=reply.conversation_id,
            )
            return
        try:
            await self._client.send_message(
                reply.conversation_id,
                format_telegram_html(reply.text),
                parse_mode=TELEGRAM_PARSE_MODE,
                reply_markup=build_quick_command_keyboard(reply.quick_commands),
            )
        except ChatAdapterError as exc:
            log_event(
                self._logger,
                exc.severity,
                "telegram.reply.failed",
                chat_id=reply.conversation_id,
                exc=exc,
            )


async def fetch_bot_identity(
    config: TelegramBotConfig, *, timeout_seconds: float = 10.0
) -> dict[str, Any]:
    config.validate()
    async with TelegramBotClient(
        config.bot_token or "", timeout_seconds=timeout_seconds
    ) as client:
        return await client.get_me()

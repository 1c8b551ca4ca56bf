from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional

from ...controller.pipeline import CommandPipeline
from ...controller.renderer import OutgoingMessage
from ...core.logging_utils import log_event
from ..chat.bootstrap import ChatBootstrapStep, run_chat_bootstrap_steps
from ..chat.errors import ChatAdapterError
from ..chat.normalizer import UpdateNormalizer, normalize_or_unknown
from .client import KeybaseChatClient
from .config import KeybaseBotConfig
from .normalizer import KeybaseNotificationNormalizer
from .rendering import format_keybase_message

BOOTSTRAP_STEP_TIMEOUT_SECONDS = 60.0


def reply_channel_name(bot_username: str, sender: str) -> str:
    return f"{bot_username},{sender}"


class KeybaseBotService:
    """Consumes ``api-listen`` notifications one at a time.

    Replies go to the direct conversation between the bot and the sender.
    The service returns when the listener stream ends.
    """

    platform = "keybase"

    def __init__(
        self,
        config: KeybaseBotConfig,
        pipeline: CommandPipeline,
        *,
        client: Optional[KeybaseChatClient] = None,
        normalizer: Optional[UpdateNormalizer] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._config = config
        self._pipeline = pipeline
        self._logger = logger or logging.getLogger(__name__)
        self._client = client or KeybaseChatClient(
            binary=config.binary, logger=self._logger
        )
        self._normalizer = normalizer or KeybaseNotificationNormalizer()
        self._bot_username: Optional[str] = config.bot_username

    @property
    def bot_username(self) -> Optional[str]:
        return self._bot_username

    async def run(self) -> None:
        steps: list[ChatBootstrapStep] = []
        if self._config.paperkey:
            # A failed login is tolerated when the daemon already has a session.
            steps.append(
                ChatBootstrapStep(
                    "oneshot_login",
                    self._login,
                    required=False,
                    timeout_seconds=BOOTSTRAP_STEP_TIMEOUT_SECONDS,
                )
            )
        steps.append(
            ChatBootstrapStep(
                "resolve_username",
                self._resolve_username,
                timeout_seconds=BOOTSTRAP_STEP_TIMEOUT_SECONDS,
            )
        )
        skipped = await run_chat_bootstrap_steps(
            platform=self.platform, logger=self._logger, steps=steps
        )
        log_event(
            self._logger,
            logging.INFO,
            "keybase.bot.started",
            bot_username=self._bot_username,
            skipped_steps=skipped,
        )
        async for payload in self._client.listen():
            await self.handle_payload(payload)
        log_event(self._logger, logging.INFO, "keybase.listen.ended")

    async def _login(self) -> None:
        await self._client.login_oneshot(
            self._config.bot_username or "", self._config.paperkey or ""
        )

    async def _resolve_username(self) -> None:
        current = await self._client.current_username()
        if self._bot_username and current != self._bot_username:
            log_event(
                self._logger,
                logging.WARNING,
                "keybase.username.mismatch",
                configured=self._bot_username,
                logged_in=current,
            )
        self._bot_username = current

    async def handle_payload(self, payload: Any) -> OutgoingMessage:
        update = normalize_or_unknown(self._normalizer, payload, self._logger)
        reply = await asyncio.to_thread(self._pipeline.handle_update, update)
        await self.deliver(reply, update.sender_identity)
        return reply

    async def deliver(self, reply: OutgoingMessage, sender: Optional[str]) -> None:
        if not reply.text or not sender or not self._bot_username:
            log_event(
                self._logger,
                logging.DEBUG,
                "keybase.reply.skipped",
                conversation_id=reply.conversation_id,
            )
            return
        channel = reply_channel_name(self._bot_username, sender)
        try:
            await self._client.send_message(channel, format_keybase_message(reply.text))
        except ChatAdapterError as exc:
            log_event(
                self._logger,
                exc.severity,
                "keybase.reply.failed",
                channel=channel,
                exc=exc,
            )

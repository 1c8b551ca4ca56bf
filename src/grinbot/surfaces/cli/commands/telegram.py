import asyncio
import logging
from pathlib import Path
from typing import Callable, Optional

import typer

from ....core.config import collect_env_overrides
from ....core.logging_utils import log_event, setup_rotating_logger
from ....integrations.chat.errors import ChatAdapterError
from ....integrations.telegram import (
    TelegramBotConfig,
    TelegramBotConfigError,
    TelegramBotService,
)
from ....integrations.telegram.service import fetch_bot_identity
from .utils import LOGGER_NAME, build_pipeline


def _telegram_config(config, raise_exit: Callable) -> TelegramBotConfig:
    try:
        telegram_cfg = TelegramBotConfig.from_raw(config.section("telegram"))
        telegram_cfg.validate()
    except TelegramBotConfigError as exc:
        raise_exit(str(exc), cause=exc)
    return telegram_cfg


def register_telegram_commands(
    telegram_app: typer.Typer,
    *,
    raise_exit: Callable,
    require_bot_config: Callable,
) -> None:
    @telegram_app.command("start")
    def telegram_start(
        path: Optional[Path] = typer.Option(None, "--path", help="Bot root path"),
    ):
        """Run the Telegram long-polling service."""
        config = require_bot_config(path)
        telegram_cfg = _telegram_config(config, raise_exit)
        logger = setup_rotating_logger(LOGGER_NAME, config.log)
        env_overrides = collect_env_overrides()
        if env_overrides:
            logger.info("Environment overrides active: %s", ", ".join(env_overrides))
        log_event(
            logger,
            logging.INFO,
            "telegram.bot.starting",
            root=str(config.root),
            username=config.username,
        )
        pipeline = build_pipeline(config, bot_logger=logger)

        async def _run() -> None:
            service = TelegramBotService(telegram_cfg, pipeline, logger=logger)
            await service.run_polling()

        try:
            asyncio.run(_run())
        except ChatAdapterError as exc:
            raise_exit(f"Telegram service stopped: {exc}", cause=exc)

    @telegram_app.command("health")
    def telegram_health(
        path: Optional[Path] = typer.Option(None, "--path", help="Bot root path"),
        timeout: float = typer.Option(5.0, "--timeout", help="Timeout (seconds)"),
    ):
        """Check the bot token by calling getMe."""
        config = require_bot_config(path)
        telegram_cfg = _telegram_config(config, raise_exit)
        timeout_seconds = max(float(timeout), 0.1)

        async def _run() -> dict:
            return await asyncio.wait_for(
                fetch_bot_identity(telegram_cfg, timeout_seconds=timeout_seconds),
                timeout=timeout_seconds,
            )

        try:
            identity = asyncio.run(_run())
        except (ChatAdapterError, asyncio.TimeoutError) as exc:
            raise_exit(f"Telegram health check failed: {exc}", cause=exc)
        typer.echo(f"ok @{identity.get('username', '?')}")

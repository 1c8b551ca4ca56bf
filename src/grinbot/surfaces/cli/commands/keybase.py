import asyncio
import logging
from pathlib import Path
from typing import Callable, Optional

import typer

from ....core.config import collect_env_overrides
from ....core.logging_utils import log_event, setup_rotating_logger
from ....integrations.chat.errors import ChatAdapterError
from ....integrations.keybase import (
    KeybaseBotConfig,
    KeybaseBotConfigError,
    KeybaseBotService,
)
from .utils import LOGGER_NAME, build_pipeline


def register_keybase_commands(
    keybase_app: typer.Typer,
    *,
    raise_exit: Callable,
    require_bot_config: Callable,
) -> None:
    @keybase_app.command("start")
    def keybase_start(
        path: Optional[Path] = typer.Option(None, "--path", help="Bot root path"),
    ):
        """Listen for Keybase chat messages and answer them."""
        config = require_bot_config(path)
        try:
            keybase_cfg = KeybaseBotConfig.from_raw(config.section("keybase"))
        except KeybaseBotConfigError as exc:
            raise_exit(str(exc), cause=exc)
        logger = setup_rotating_logger(LOGGER_NAME, config.log)
        env_overrides = collect_env_overrides()
        if env_overrides:
            logger.info("Environment overrides active: %s", ", ".join(env_overrides))
        log_event(
            logger,
            logging.INFO,
            "keybase.bot.starting",
            root=str(config.root),
            username=config.username,
        )
        pipeline = build_pipeline(config, bot_logger=logger)

        async def _run() -> None:
            service = KeybaseBotService(keybase_cfg, pipeline, logger=logger)
            await service.run()

        try:
            asyncio.run(_run())
        except ChatAdapterError as exc:
            raise_exit(f"Keybase service stopped: {exc}", cause=exc)

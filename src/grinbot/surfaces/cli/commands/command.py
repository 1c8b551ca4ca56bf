import logging
from pathlib import Path
from typing import Callable, List, Optional

import typer

from ....core.logging_utils import log_event, setup_rotating_logger
from .utils import LOGGER_NAME, build_pipeline


def register_command_commands(
    app: typer.Typer,
    *,
    require_bot_config: Callable,
) -> None:
    @app.command("command")
    def run_command(
        words: List[str] = typer.Argument(
            ..., help="Bot command to run once, e.g. /balance"
        ),
        path: Optional[Path] = typer.Option(None, "--path", help="Bot root path"),
    ):
        """Run a single bot command locally and print the reply."""
        config = require_bot_config(path)
        bot_logger = setup_rotating_logger(LOGGER_NAME, config.log)
        raw_command = " ".join(words)
        log_event(bot_logger, logging.INFO, "grinbot.command.run", command=raw_command)
        state = build_pipeline(config, bot_logger=bot_logger).run_command(raw_command)
        if state.message:
            typer.echo(state.message)

import logging
from pathlib import Path
from typing import NoReturn, Optional

import typer

from ....controller import (
    CommandPipeline,
    ReducerContext,
    State,
    logging_observer,
)
from ....core.config import BotConfig, ConfigError, load_bot_config
from ....integrations.grin import GrinWalletBackend, WalletConfig, WalletConfigError


LOGGER_NAME = "grinbot"


def get_grinbot_version() -> str:
    import importlib.metadata

    try:
        return importlib.metadata.version("grinbot")
    except importlib.metadata.PackageNotFoundError:
        return "unknown"


def raise_exit(message: str, *, cause: Optional[BaseException] = None) -> NoReturn:
    typer.echo(message, err=True)
    if cause is not None:
        raise typer.Exit(code=1) from cause
    raise typer.Exit(code=1)


def require_bot_config(path: Optional[Path]) -> BotConfig:
    try:
        return load_bot_config(path or Path.cwd())
    except ConfigError as exc:
        raise_exit(str(exc), cause=exc)


def build_pipeline(config: BotConfig, *, bot_logger: logging.Logger) -> CommandPipeline:
    """Wire the wallet backend and the logging observer into a fresh pipeline."""
    try:
        wallet_config = WalletConfig.from_raw(
            root=config.root, raw=config.section("wallet")
        )
    except WalletConfigError as exc:
        raise_exit(str(exc), cause=exc)
    backend = GrinWalletBackend(config=wallet_config, username=config.username)
    return CommandPipeline(
        configured_identity=config.username,
        initial_state=State(context=ReducerContext(wallet=backend)),
        observers=(logging_observer(bot_logger),),
    )

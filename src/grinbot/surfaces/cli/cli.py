import logging

import typer

from .commands.command import register_command_commands
from .commands.keybase import register_keybase_commands
from .commands.telegram import register_telegram_commands
from .commands.utils import get_grinbot_version, raise_exit, require_bot_config

logger = logging.getLogger("grinbot.cli")

app = typer.Typer(add_completion=False)
telegram_app = typer.Typer(add_completion=False)
keybase_app = typer.Typer(add_completion=False)


def _version_callback(value: bool) -> None:
    if not value:
        return
    typer.echo(f"grinbot {get_grinbot_version()}")
    raise typer.Exit(code=0)


@app.callback()
def _root(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit.",
    ),
) -> None:
    # `--version` is handled eagerly via `_version_callback`.
    return


def main() -> None:
    """Entrypoint for CLI execution."""
    app()


register_command_commands(app, require_bot_config=require_bot_config)
app.add_typer(telegram_app, name="telegram")
register_telegram_commands(
    telegram_app,
    raise_exit=raise_exit,
    require_bot_config=require_bot_config,
)
app.add_typer(keybase_app, name="keybase")
register_keybase_commands(
    keybase_app,
    raise_exit=raise_exit,
    require_bot_config=require_bot_config,
)

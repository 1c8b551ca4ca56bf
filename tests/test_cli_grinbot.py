from pathlib import Path

import pytest
from typer.testing import CliRunner

from grinbot.cli import app

runner = CliRunner()


def test_version_flag() -> None:
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert result.output.startswith("grinbot ")


def test_command_prints_help_reply(bot_root: Path) -> None:
    result = runner.invoke(app, ["command", "/help", "--path", str(bot_root)])
    assert result.exit_code == 0, result.output
    assert "<b>Grin Bot</b>" in result.output
    assert (bot_root / "logs" / "grinbot.log").exists()


def test_command_joins_words_and_reports_parse_errors(bot_root: Path) -> None:
    result = runner.invoke(app, ["command", "/send", "1", "--path", str(bot_root)])
    assert result.exit_code == 0, result.output
    assert "Error: Wrong number of arguments." in result.output


def test_command_reports_wallet_errors(bot_root: Path) -> None:
    result = runner.invoke(app, ["command", "/balance", "--path", str(bot_root)])
    assert result.exit_code == 0, result.output
    assert "Error: .api_secret file does not exist in wallet directory" in result.output


def test_command_with_unknown_input_prints_nothing(bot_root: Path) -> None:
    result = runner.invoke(app, ["command", "hello", "--path", str(bot_root)])
    assert result.exit_code == 0
    assert result.output == ""


def test_missing_config_exits_with_error(tmp_path: Path) -> None:
    result = runner.invoke(app, ["command", "/help", "--path", str(tmp_path)])
    assert result.exit_code == 1
    assert "Missing config file" in result.output


def test_telegram_start_requires_token(
    bot_root: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.delenv("GRINBOT_TELEGRAM_BOT_TOKEN", raising=False)
    result = runner.invoke(app, ["telegram", "start", "--path", str(bot_root)])
    assert result.exit_code == 1
    assert "missing telegram bot token" in result.output


def test_keybase_start_rejects_paperkey_without_username(
    bot_root: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("GRINBOT_KEYBASE_PAPERKEY", "paper key")
    result = runner.invoke(app, ["keybase", "start", "--path", str(bot_root)])
    assert result.exit_code == 1
    assert "bot_username" in result.output

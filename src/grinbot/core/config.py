import dataclasses
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, cast

import yaml
from dotenv import load_dotenv

logger = logging.getLogger("grinbot.core.config")

CONFIG_FILENAME = "grinbot.yml"
OVERRIDE_FILENAME = "grinbot.override.yml"
STATE_DIRNAME = ".grinbot"

DEFAULT_CONFIG: Dict[str, Any] = {
    "username": None,
    "wallet": {
        "dir": "~/.grin/main/bot_wallets",
        "owner_endpoint": "http://127.0.0.1:3420/v2/owner",
        "password_env": "GRINBOT_WALLET_PASSWORD",
        "binary": "grin-wallet",
        "timeout_seconds": 60,
    },
    "telegram": {
        "bot_token_env": "GRINBOT_TELEGRAM_BOT_TOKEN",
        "poll_timeout_seconds": 30,
    },
    "keybase": {
        "binary": "keybase",
        "bot_username": None,
        "paperkey_env": "GRINBOT_KEYBASE_PAPERKEY",
    },
    "log": {
        "path": ".grinbot/grinbot.log",
        "max_bytes": 10_000_000,
        "backup_count": 3,
        "level": "INFO",
    },
}

ENV_OVERRIDES = (
    "GRINBOT_WALLET_PASSWORD",
    "GRINBOT_TELEGRAM_BOT_TOKEN",
    "GRINBOT_KEYBASE_PAPERKEY",
)


class ConfigError(Exception):
    """Raised when the bot configuration is missing or invalid."""


@dataclasses.dataclass(frozen=True)
class LogConfig:
    path: Path
    max_bytes: int
    backup_count: int
    level: int = logging.INFO


@dataclasses.dataclass(frozen=True)
class BotConfig:
    root: Path
    username: str
    log: LogConfig
    raw: Dict[str, Any]

    def section(self, name: str) -> Dict[str, Any]:
        value = self.raw.get(name)
        return value if isinstance(value, dict) else {}


def _merge_defaults(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    merged = cast(Dict[str, Any], json.loads(json.dumps(base)))
    for key, value in overrides.items():
        if isinstance(value, dict) and key in merged and isinstance(merged[key], dict):
            merged[key] = _merge_defaults(merged[key], value)
        else:
            merged[key] = value
    return merged


def _load_yaml_dict(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Failed to read config file {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Config file must be a mapping: {path}")
    return data


def load_dotenv_for_root(root: Path) -> None:
    """
    Best-effort load of environment variables for the bot root.

    Files are read from fixed locations rather than the process CWD, so a
    service started by a supervisor sees the same secrets as an interactive run.
    """
    try:
        root = root.resolve()
        for candidate in (root / ".env", root / STATE_DIRNAME / ".env"):
            if candidate.exists():
                load_dotenv(dotenv_path=candidate, override=True)
    except OSError as exc:
        logger.debug("Failed to load .env file: %s", exc)


def collect_env_overrides(*, env: Optional[Mapping[str, str]] = None) -> list[str]:
    source = env if env is not None else os.environ
    overrides: list[str] = []
    for key in ENV_OVERRIDES:
        value = source.get(key)
        if value is not None and str(value).strip() != "":
            overrides.append(key)
    return overrides


def _parse_log_level(value: Any) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str):
        level = logging.getLevelName(value.strip().upper())
        if isinstance(level, int):
            return level
    raise ConfigError(f"log.level must be a logging level name, got {value!r}")


def _parse_log_config(raw: Any, root: Path) -> LogConfig:
    cfg = raw if isinstance(raw, dict) else {}
    defaults = DEFAULT_CONFIG["log"]
    path_value = cfg.get("path", defaults["path"])
    if not isinstance(path_value, str) or not path_value.strip():
        raise ConfigError("log.path must be a non-empty string")
    try:
        max_bytes = int(cfg.get("max_bytes", defaults["max_bytes"]))
        backup_count = int(cfg.get("backup_count", defaults["backup_count"]))
    except (TypeError, ValueError) as exc:
        raise ConfigError("log.max_bytes and log.backup_count must be integers") from exc
    path = Path(path_value).expanduser()
    if not path.is_absolute():
        path = root / path
    return LogConfig(
        path=path,
        max_bytes=max(max_bytes, 0),
        backup_count=max(backup_count, 0),
        level=_parse_log_level(cfg.get("level", defaults["level"])),
    )


def load_config_data(root: Path) -> Dict[str, Any]:
    """Load, merge, and return the raw config dict for a bot root."""
    base = _load_yaml_dict(root / CONFIG_FILENAME)
    override_path = root / OVERRIDE_FILENAME
    try:
        override = _load_yaml_dict(override_path)
    except ConfigError as exc:
        raise ConfigError(
            f"Invalid override config {override_path}; fix or delete it: {exc}"
        ) from exc
    merged = _merge_defaults(DEFAULT_CONFIG, base)
    if override:
        merged = _merge_defaults(merged, override)
    return merged


def load_bot_config(start: Path) -> BotConfig:
    root = start.resolve()
    if not (root / CONFIG_FILENAME).exists():
        raise ConfigError(f"Missing config file {root / CONFIG_FILENAME}")
    load_dotenv_for_root(root)
    raw = load_config_data(root)
    username = raw.get("username")
    if not isinstance(username, str) or not username.strip():
        raise ConfigError("username must be set to the authorized chat username")
    return BotConfig(
        root=root,
        username=username.strip(),
        log=_parse_log_config(raw.get("log"), root),
        raw=raw,
    )

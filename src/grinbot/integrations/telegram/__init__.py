"""Telegram Bot API transport."""

from .client import TelegramAPIError, TelegramBotClient
from .config import TelegramBotConfig, TelegramBotConfigError
from .normalizer import TelegramUpdateNormalizer
from .service import TelegramBotService

__all__ = [
    "TelegramAPIError",
    "TelegramBotClient",
    "TelegramBotConfig",
    "TelegramBotConfigError",
    "TelegramBotService",
    "TelegramUpdateNormalizer",
]

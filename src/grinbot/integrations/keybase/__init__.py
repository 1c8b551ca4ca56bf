"""Keybase chat transport built on the ``keybase chat`` JSON API."""

from .client import KeybaseChatClient, KeybaseError
from .config import KeybaseBotConfig, KeybaseBotConfigError
from .normalizer import KeybaseNotificationNormalizer
from .service import KeybaseBotService

__all__ = [
    "KeybaseBotConfig",
    "KeybaseBotConfigError",
    "KeybaseBotService",
    "KeybaseChatClient",
    "KeybaseError",
    "KeybaseNotificationNormalizer",
]

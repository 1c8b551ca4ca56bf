"""Transport-agnostic chat adapter contracts."""

from .bootstrap import ChatBootstrapStep, run_chat_bootstrap_steps
from .errors import (
    BootstrapStepTimeout,
    ChatAdapterError,
    ChatAdapterPermanentError,
    ChatAdapterTransientError,
    MalformedNotification,
)
from .normalizer import UpdateNormalizer, normalize_or_unknown

__all__ = [
    "BootstrapStepTimeout",
    "ChatAdapterError",
    "ChatAdapterPermanentError",
    "ChatAdapterTransientError",
    "ChatBootstrapStep",
    "MalformedNotification",
    "UpdateNormalizer",
    "normalize_or_unknown",
    "run_chat_bootstrap_steps",
]

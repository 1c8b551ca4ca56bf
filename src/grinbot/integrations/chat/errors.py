"""Error hierarchy for the chat transports.

Transient errors are retried with backoff by the polling loops; permanent
errors stop the service.
"""

from __future__ import annotations

from ...core.exceptions import GrinbotError, PermanentError, TransientError


class ChatAdapterError(GrinbotError):
    """Base chat adapter error."""


class ChatAdapterTransientError(ChatAdapterError, TransientError):
    """Retryable failure (network, rate limit, platform hiccup)."""


class ChatAdapterPermanentError(ChatAdapterError, PermanentError):
    """Non-retryable failure (bad credentials, missing binary, config)."""


class MalformedNotification(ChatAdapterError):
    """An inbound payload is missing a field its transport guarantees."""


class BootstrapStepTimeout(ChatAdapterPermanentError):
    """A startup step did not finish within its time limit."""

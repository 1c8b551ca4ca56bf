"""Shared error hierarchy.

``recoverable`` tells a service loop whether to keep running after the error;
``severity`` is the logging level the failure is reported at.
"""

from __future__ import annotations

import logging


class GrinbotError(Exception):
    """Base error for grinbot failures."""

    recoverable: bool = True
    severity: int = logging.ERROR


class TransientError(GrinbotError):
    """Failure that may succeed when retried (network, rate limits)."""

    recoverable = True
    severity = logging.WARNING


class PermanentError(GrinbotError):
    """Failure that will not succeed on retry (validation, auth, config)."""

    recoverable = False
    severity = logging.ERROR

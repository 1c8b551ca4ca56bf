"""Contract for turning transport payloads into ``CanonicalUpdate`` values."""

from __future__ import annotations

import logging
from typing import Any, Protocol, runtime_checkable

from ...controller.models import UNKNOWN_UPDATE, CanonicalUpdate
from ...core.logging_utils import log_event
from .errors import MalformedNotification


@runtime_checkable
class UpdateNormalizer(Protocol):
    """Implemented once per transport."""

    platform: str

    def normalize(self, payload: Any) -> CanonicalUpdate:
        """Map one inbound payload; raise ``MalformedNotification`` if it is broken."""


def normalize_or_unknown(
    normalizer: UpdateNormalizer,
    payload: Any,
    logger: logging.Logger,
) -> CanonicalUpdate:
    """Normalize ``payload``, degrading malformed input to the unknown update."""
    try:
        return normalizer.normalize(payload)
    except MalformedNotification as exc:
        log_event(
            logger,
            logging.WARNING,
            f"{normalizer.platform}.update.malformed",
            exc=exc,
        )
        return UNKNOWN_UPDATE

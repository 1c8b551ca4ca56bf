from __future__ import annotations

import logging
from typing import Any

import pytest

from grinbot.controller.models import UNKNOWN_UPDATE, CanonicalUpdate
from grinbot.integrations.chat import (
    MalformedNotification,
    UpdateNormalizer,
    normalize_or_unknown,
)
from grinbot.integrations.keybase import KeybaseNotificationNormalizer
from grinbot.integrations.telegram import TelegramUpdateNormalizer


class _EchoNormalizer:
    platform = "echo"

    def normalize(self, payload: Any) -> CanonicalUpdate:
        if payload is None:
            raise MalformedNotification("payload is missing")
        return CanonicalUpdate(1, "alice", str(payload))


def test_transport_normalizers_satisfy_protocol() -> None:
    assert isinstance(TelegramUpdateNormalizer(), UpdateNormalizer)
    assert isinstance(KeybaseNotificationNormalizer(), UpdateNormalizer)


def test_normalize_or_unknown_passes_through() -> None:
    update = normalize_or_unknown(
        _EchoNormalizer(), "/help", logging.getLogger("test.chat.normalizer")
    )
    assert update == CanonicalUpdate(1, "alice", "/help")


def test_normalize_or_unknown_degrades_malformed_payloads(
    caplog: pytest.LogCaptureFixture,
) -> None:
    with caplog.at_level(logging.WARNING, logger="test.chat.normalizer"):
        update = normalize_or_unknown(
            _EchoNormalizer(), None, logging.getLogger("test.chat.normalizer")
        )
    assert update == UNKNOWN_UPDATE
    assert "echo.update.malformed" in caplog.text

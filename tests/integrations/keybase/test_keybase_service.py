from __future__ import annotations

import asyncio
import logging
from typing import Any, AsyncIterator

import pytest

from grinbot.controller import CommandPipeline, ReducerContext, State
from grinbot.controller.messages import WRONG_IDENTITY_MESSAGE
from grinbot.integrations.chat import BootstrapStepTimeout
from grinbot.integrations.keybase import KeybaseBotConfig, KeybaseBotService
from grinbot.integrations.keybase.client import KeybaseError
from grinbot.integrations.keybase import service as keybase_service
from grinbot.integrations.keybase.service import reply_channel_name


class _FakeKeybaseClient:
    def __init__(self, notifications: list[Any]) -> None:
        self._notifications = notifications
        self.calls: list[tuple[Any, ...]] = []
        self.sent: list[tuple[str, str]] = []
        self.fail_sends = False
        self.fail_login = False
        self.status_delay = 0.0

    async def login_oneshot(self, username: str, paperkey: str) -> None:
        self.calls.append(("oneshot", username, paperkey))
        if self.fail_login:
            raise KeybaseError("oneshot exited with 1: already logged in")

    async def current_username(self) -> str:
        self.calls.append(("status",))
        await asyncio.sleep(self.status_delay)
        return "grinbot"

    async def send_message(self, channel_name: str, body: str) -> None:
        if self.fail_sends:
            raise KeybaseError("send failed")
        self.sent.append((channel_name, body))

    async def listen(self) -> AsyncIterator[Any]:
        for notification in self._notifications:
            yield notification


def _chat(body: str, sender: str = "alice", msg_id: int = 1) -> dict[str, Any]:
    return {
        "type": "chat",
        "msg": {
            "id": msg_id,
            "channel": {"name": f"grinbot,{sender}", "members_type": "impteamnative"},
            "sender": {"username": sender},
            "content": {"type": "text", "text": {"body": body}},
        },
    }


def _service(
    fake_wallet, client: _FakeKeybaseClient, config: KeybaseBotConfig
) -> KeybaseBotService:
    pipeline = CommandPipeline(
        configured_identity="alice",
        initial_state=State(context=ReducerContext(wallet=fake_wallet)),
    )
    return KeybaseBotService(
        config,
        pipeline,
        client=client,  # type: ignore[arg-type]
        logger=logging.getLogger("test.keybase.service"),
    )


def test_reply_channel_name() -> None:
    assert reply_channel_name("grinbot", "alice") == "grinbot,alice"


@pytest.mark.anyio
async def test_run_answers_until_stream_ends(fake_wallet) -> None:
    client = _FakeKeybaseClient(
        [_chat("/balance"), {"type": "chat"}, _chat("/help", sender="mallory")]
    )
    service = _service(fake_wallet, client, KeybaseBotConfig())

    await service.run()

    assert client.calls == [("status",)]
    assert client.sent[0] == ("grinbot,alice", "*Success:*\nTotal: *1.5*")
    assert client.sent[1] == ("grinbot,mallory", WRONG_IDENTITY_MESSAGE)
    assert len(client.sent) == 2
    assert fake_wallet.calls == [("balance",)]


@pytest.mark.anyio
async def test_paperkey_triggers_oneshot_login(fake_wallet) -> None:
    client = _FakeKeybaseClient([])
    config = KeybaseBotConfig(bot_username="grinbot", paperkey="paper key")

    await _service(fake_wallet, client, config).run()

    assert client.calls == [("oneshot", "grinbot", "paper key"), ("status",)]


@pytest.mark.anyio
async def test_delivery_failures_are_logged(
    fake_wallet, caplog: pytest.LogCaptureFixture
) -> None:
    client = _FakeKeybaseClient([_chat("/help")])
    client.fail_sends = True
    service = _service(fake_wallet, client, KeybaseBotConfig())

    with caplog.at_level(logging.WARNING, logger="test.keybase.service"):
        await service.run()

    assert "keybase.reply.failed" in caplog.text


@pytest.mark.anyio
async def test_failed_oneshot_login_is_tolerated(
    fake_wallet, caplog: pytest.LogCaptureFixture
) -> None:
    client = _FakeKeybaseClient([_chat("/help")])
    client.fail_login = True
    config = KeybaseBotConfig(bot_username="grinbot", paperkey="paper key")

    with caplog.at_level(logging.INFO, logger="test.keybase.service"):
        await _service(fake_wallet, client, config).run()

    assert client.calls == [("oneshot", "grinbot", "paper key"), ("status",)]
    assert len(client.sent) == 1
    assert '"skipped_steps": ["oneshot_login"]' in caplog.text


@pytest.mark.anyio
async def test_unresponsive_daemon_aborts_startup(
    fake_wallet, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(keybase_service, "BOOTSTRAP_STEP_TIMEOUT_SECONDS", 0.01)
    client = _FakeKeybaseClient([_chat("/help")])
    client.status_delay = 10.0

    with pytest.raises(BootstrapStepTimeout):
        await _service(fake_wallet, client, KeybaseBotConfig()).run()

    assert client.sent == []

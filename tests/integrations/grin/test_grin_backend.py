from __future__ import annotations

import json
import subprocess
from decimal import Decimal
from pathlib import Path
from typing import Any

import httpx
import pytest

from grinbot.controller import (
    ReducerContext,
    Screen,
    Severity,
    State,
    WalletBackend,
    parse_command,
    reduce,
)
from grinbot.controller.wallet import WalletOperationError
from grinbot.integrations.grin import GrinWalletBackend, WalletConfig

WALLET_INFO = {
    "last_confirmed_height": "412345",
    "minimum_confirmations": "10",
    "total": "1500000000",
    "amount_awaiting_finalization": "0",
    "amount_awaiting_confirmation": "250000000",
    "amount_immature": "0",
    "amount_currently_spendable": "1250000000",
    "amount_locked": "0",
}


def _config(tmp_path: Path, password: str = "pw") -> WalletConfig:
    return WalletConfig(
        base_dir=tmp_path,
        owner_endpoint="http://127.0.0.1:3420/v2/owner",
        password_env="GRINBOT_WALLET_PASSWORD",
        password=password,
    )


def _backend(tmp_path: Path, handler) -> GrinWalletBackend:
    wallet_dir = tmp_path / "alice"
    wallet_dir.mkdir()
    (wallet_dir / ".api_secret").write_text("secret", encoding="utf-8")
    return GrinWalletBackend(
        config=_config(tmp_path),
        username="alice",
        transport=httpx.MockTransport(handler),
    )


def _ok(result: Any) -> httpx.Response:
    return httpx.Response(200, json={"id": "1", "jsonrpc": "2.0", "result": {"Ok": result}})


def test_backend_satisfies_wallet_protocol(tmp_path: Path) -> None:
    assert isinstance(GrinWalletBackend(config=_config(tmp_path), username="a"), WalletBackend)


def test_password_is_not_in_repr(tmp_path: Path) -> None:
    backend = GrinWalletBackend(config=_config(tmp_path, "hunter2"), username="a")
    assert "hunter2" not in repr(backend)


def test_send_builds_init_send_tx_request(tmp_path: Path) -> None:
    seen: list[dict[str, Any]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(json.loads(request.content))
        return _ok(
            {
                "amount": "500000000",
                "fee": "8000000",
                "height": "412346",
                "id": "0436430c-2b02-624c-2032-570501212b00",
            }
        )

    reply = _backend(tmp_path, handler).send(Decimal("0.5"), "http://recipient.org")

    assert seen[0]["method"] == "init_send_tx"
    args = seen[0]["params"]["args"]
    assert args["src_acct_name"] == "default"
    assert args["amount"] == 500_000_000
    assert args["minimum_confirmations"] == 10
    assert args["max_outputs"] == 500
    assert args["num_change_outputs"] == 1
    assert args["selection_strategy_is_use_all"] is False
    assert args["send_args"] == {
        "method": "http",
        "dest": "http://recipient.org",
        "finalize": True,
        "post_tx": True,
        "fluff": False,
    }
    assert reply.startswith("<b>Success:</b>\n")
    assert "Sent <b>0.5</b> grin (fee 0.008)" in reply
    assert "412346" in reply
    assert "0436430c-2b02-624c-2032-570501212b00" in reply


def test_send_rejects_non_positive_amounts(tmp_path: Path) -> None:
    backend = _backend(tmp_path, lambda request: _ok({}))
    with pytest.raises(WalletOperationError, match="greater than zero"):
        backend.send(Decimal("-1"), "http://recipient.org")


@pytest.mark.parametrize("amount", ["1e999999", "18446744074"])
def test_send_rejects_out_of_range_amounts(tmp_path: Path, amount: str) -> None:
    calls: list[httpx.Request] = []
    backend = _backend(tmp_path, lambda request: calls.append(request) or _ok({}))
    with pytest.raises(WalletOperationError, match="too large"):
        backend.send(Decimal(amount), "http://recipient.org")
    assert calls == []


def test_huge_send_amount_becomes_a_reply(tmp_path: Path) -> None:
    backend = _backend(tmp_path, lambda request: _ok({}))
    state = State(context=ReducerContext(wallet=backend))
    action = parse_command("/send", ["1e999999", "http://recipient.org"], 1)

    new_state = reduce(state, action)

    assert new_state.screen is Screen.SEND
    assert new_state.message == "Error: The amount is too large."
    assert new_state.error_level is Severity.INFO


def test_send_with_incomplete_slate_fails(tmp_path: Path) -> None:
    backend = _backend(tmp_path, lambda request: _ok({"amount": "1"}))
    with pytest.raises(WalletOperationError, match="incomplete slate"):
        backend.send(Decimal("1"), "http://recipient.org")


def test_balance_renders_wallet_summary(tmp_path: Path) -> None:
    seen: list[dict[str, Any]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(json.loads(request.content))
        return _ok([True, WALLET_INFO])

    reply = _backend(tmp_path, handler).balance()

    assert seen[0]["method"] == "retrieve_summary_info"
    assert seen[0]["params"] == [True, 10]
    assert reply.startswith("<b>Success:</b>\n")
    assert "Total: <b>1.5</b>" in reply
    assert "Awaiting confirmation: <b>0.25</b>" in reply
    assert "Currently spendable: <b>1.25</b>" in reply
    assert "Locked: <b>0</b>" in reply
    assert "412345" in reply


def test_balance_without_api_secret_fails(tmp_path: Path) -> None:
    backend = GrinWalletBackend(config=_config(tmp_path), username="alice")
    with pytest.raises(WalletOperationError, match=".api_secret file does not exist"):
        backend.balance()


def test_create_wallet_renders_seed(tmp_path: Path) -> None:
    def runner(cmd, cwd, timeout_seconds):
        return subprocess.CompletedProcess(
            args=list(cmd),
            returncode=0,
            stdout="Your recovery phrase is:\n\nword1 word2 word3\n",
            stderr="",
        )

    backend = GrinWalletBackend(config=_config(tmp_path), username="alice", runner=runner)

    reply = backend.create_wallet()

    assert "<pre>word1 word2 word3</pre>" in reply
    assert (tmp_path / "alice").is_dir()


def test_create_wallet_requires_password(tmp_path: Path) -> None:
    backend = GrinWalletBackend(config=_config(tmp_path, password=""), username="alice")
    with pytest.raises(WalletOperationError, match="GRINBOT_WALLET_PASSWORD"):
        backend.create_wallet()

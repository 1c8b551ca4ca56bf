from __future__ import annotations

import base64
import json
from pathlib import Path

import httpx
import pytest

from grinbot.controller.wallet import WalletOperationError
from grinbot.integrations.grin.owner_api import OwnerApiClient, read_api_secret

ENDPOINT = "http://127.0.0.1:3420/v2/owner"


def _client(handler) -> OwnerApiClient:
    return OwnerApiClient(
        endpoint=ENDPOINT,
        api_secret="s3cret",
        transport=httpx.MockTransport(handler),
    )


def test_call_posts_json_rpc_with_basic_auth() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200, json={"id": "1", "jsonrpc": "2.0", "result": {"Ok": [True, {}]}}
        )

    assert _client(handler).call("retrieve_summary_info", [True, 10]) == [True, {}]

    request = seen[0]
    assert str(request.url) == ENDPOINT
    expected = base64.b64encode(b"grin:s3cret").decode()
    assert request.headers["Authorization"] == f"Basic {expected}"
    assert json.loads(request.content) == {
        "jsonrpc": "2.0",
        "id": "1",
        "method": "retrieve_summary_info",
        "params": [True, 10],
    }


def test_err_results_become_wallet_errors() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            json={
                "id": "1",
                "jsonrpc": "2.0",
                "result": {"Err": {"NotEnoughFunds": "available 0.1, needed 1.0"}},
            },
        )

    with pytest.raises(WalletOperationError, match="NotEnoughFunds: available 0.1"):
        _client(handler).call("init_send_tx", {"args": {}})


def test_error_members_become_wallet_errors() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            json={
                "id": "1",
                "jsonrpc": "2.0",
                "error": {"code": -32601, "message": "Method not found"},
            },
        )

    with pytest.raises(WalletOperationError, match="Method not found"):
        _client(handler).call("nope", [])


def test_http_errors_become_wallet_errors() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, text="Unauthorized")

    with pytest.raises(WalletOperationError, match="status=401"):
        _client(handler).call("retrieve_summary_info", [True, 10])


def test_connection_errors_become_wallet_errors() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(WalletOperationError, match="connection refused"):
        _client(handler).call("retrieve_summary_info", [True, 10])


def test_non_json_responses_become_wallet_errors() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>")

    with pytest.raises(WalletOperationError, match="non-JSON"):
        _client(handler).call("retrieve_summary_info", [True, 10])


def test_read_api_secret(tmp_path: Path) -> None:
    (tmp_path / ".api_secret").write_text("abc\n", encoding="utf-8")
    assert read_api_secret(tmp_path) == "abc"


def test_read_api_secret_missing(tmp_path: Path) -> None:
    with pytest.raises(WalletOperationError) as excinfo:
        read_api_secret(tmp_path)
    assert str(excinfo.value) == ".api_secret file does not exist in wallet directory"

"""Test harness configuration.

This repo uses a `src/` layout; make sure tests import the in-repo code
rather than an installed `grinbot` package.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path
from typing import Any, Optional

import pytest

DEFAULT_NON_INTEGRATION_TIMEOUT_SECONDS = 60


def pytest_configure() -> None:
    repo_root = Path(__file__).resolve().parents[1]
    src_path = str(repo_root / "src")
    if sys.path[:1] != [src_path] and src_path not in sys.path:
        sys.path.insert(0, src_path)


def pytest_collection_modifyitems(
    session: pytest.Session, config: pytest.Config, items: list[pytest.Item]
) -> None:
    """
    Apply a default per-test timeout to non-integration tests.

    This relies on `pytest-timeout` when installed; if it isn't installed, the
    marker is inert but still documents the intent.
    """
    _ = session, config
    for item in items:
        if item.get_closest_marker("integration") is not None:
            continue
        item.add_marker(pytest.mark.timeout(DEFAULT_NON_INTEGRATION_TIMEOUT_SECONDS))


@dataclass
class FakeWallet:
    """In-memory ``WalletBackend`` that records calls and can be told to fail."""

    error: Optional[str] = None
    calls: list[tuple[Any, ...]] = field(default_factory=list)

    def _maybe_fail(self) -> None:
        if self.error is not None:
            from grinbot.controller.wallet import WalletOperationError

            raise WalletOperationError(self.error)

    def create_wallet(self) -> str:
        self.calls.append(("create",))
        self._maybe_fail()
        return "<pre>seed words</pre>"

    def send(self, amount: Decimal, destination: str) -> str:
        self.calls.append(("send", amount, destination))
        self._maybe_fail()
        return f"<b>Success:</b>\nsent {amount}"

    def balance(self) -> str:
        self.calls.append(("balance",))
        self._maybe_fail()
        return "<b>Success:</b>\nTotal: <b>1.5</b>"


@pytest.fixture()
def fake_wallet() -> FakeWallet:
    return FakeWallet()


@pytest.fixture()
def bot_root(tmp_path: Path) -> Path:
    """A bot root with a minimal ``grinbot.yml`` authorizing ``alice``."""
    root = tmp_path / "bot"
    root.mkdir()
    (root / "grinbot.yml").write_text(
        "username: alice\n"
        "wallet:\n"
        "  dir: wallets\n"
        "log:\n"
        "  path: logs/grinbot.log\n",
        encoding="utf-8",
    )
    return root


@pytest.fixture(scope="session")
def anyio_backend() -> str:
    """The services are built on asyncio; run ``@pytest.mark.anyio`` tests there."""
    return "asyncio"

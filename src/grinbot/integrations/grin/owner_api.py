"""Minimal JSON-RPC client for the Grin wallet Owner API v2."""

from __future__ import annotations

import itertools
import logging
from pathlib import Path
from typing import Any, Optional

import httpx

from ...controller.wallet import WalletOperationError
from ...core.logging_utils import log_event

logger = logging.getLogger(__name__)

API_SECRET_FILENAME = ".api_secret"
OWNER_API_USER = "grin"


def read_api_secret(wallet_dir: Path) -> str:
    path = wallet_dir / API_SECRET_FILENAME
    try:
        return path.read_text(encoding="utf-8").strip()
    except FileNotFoundError as exc:
        raise WalletOperationError(
            ".api_secret file does not exist in wallet directory"
        ) from exc
    except OSError as exc:
        raise WalletOperationError(f"Failed to read {path}: {exc}") from exc


class OwnerApiClient:
    def __init__(
        self,
        *,
        endpoint: str,
        api_secret: str,
        timeout_seconds: float = 60.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._endpoint = endpoint
        self._auth = httpx.BasicAuth(OWNER_API_USER, api_secret)
        self._timeout_seconds = timeout_seconds
        self._transport = transport
        self._ids = itertools.count(1)

    def call(self, method: str, params: Any) -> Any:
        """Invoke ``method`` and return the ``Ok`` member of its result.

        Every failure mode (connection errors, non-2xx statuses, JSON-RPC
        ``error`` members, ``{"Err": ...}`` results and undecodable bodies)
        is raised as ``WalletOperationError``.
        """
        request_id = str(next(self._ids))
        payload = {
            "jsonrpc": "2.0",
            "id": request_id,
            "method": method,
            "params": params,
        }
        log_event(logger, logging.DEBUG, "grin.owner_api.request", method=method)
        try:
            with httpx.Client(
                auth=self._auth,
                timeout=self._timeout_seconds,
                transport=self._transport,
            ) as client:
                response = client.post(self._endpoint, json=payload)
                response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            body_preview = (exc.response.text or "").strip().replace("\n", " ")[:200]
            raise WalletOperationError(
                f"Owner API {method} failed: status={exc.response.status_code} "
                f"body={body_preview!r}"
            ) from exc
        except httpx.HTTPError as exc:
            raise WalletOperationError(f"Owner API {method} failed: {exc}") from exc

        try:
            data = response.json()
        except ValueError as exc:
            raise WalletOperationError(
                f"Owner API {method} returned a non-JSON response"
            ) from exc
        if not isinstance(data, dict):
            raise WalletOperationError(f"Owner API {method} returned an invalid response")

        error = data.get("error")
        if error:
            message = error.get("message") if isinstance(error, dict) else error
            raise WalletOperationError(f"Owner API {method} failed: {message}")

        result = data.get("result")
        if isinstance(result, dict) and "Err" in result:
            raise WalletOperationError(_describe_err(result["Err"]))
        if not isinstance(result, dict) or "Ok" not in result:
            raise WalletOperationError(f"Owner API {method} returned no result")
        return result["Ok"]


def _describe_err(err: Any) -> str:
    # Grin serializes error enums as {"Variant": "detail"} or a bare string.
    if isinstance(err, dict) and len(err) == 1:
        ((variant, detail),) = err.items()
        return f"{variant}: {detail}" if detail not in (None, "") else str(variant)
    return str(err)

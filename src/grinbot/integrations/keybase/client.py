"""Async wrapper around the ``keybase`` command line JSON API."""

from __future__ import annotations

import asyncio
import json
import logging
import os
from typing import Any, AsyncIterator, Optional, Sequence

from ...core.logging_utils import log_event
from ..chat.errors import ChatAdapterPermanentError

_INVALID_JSON_PREVIEW_CHARS = 200
_TERMINATE_TIMEOUT_SECONDS = 5.0


class KeybaseError(ChatAdapterPermanentError):
    """A ``keybase`` invocation failed or returned an error payload."""


class KeybaseChatClient:
    def __init__(
        self, *, binary: str = "keybase", logger: Optional[logging.Logger] = None
    ) -> None:
        self._binary = binary
        self._logger = logger or logging.getLogger(__name__)

    async def _spawn(
        self, args: Sequence[str], *, env: Optional[dict[str, str]] = None
    ) -> asyncio.subprocess.Process:
        try:
            return await asyncio.create_subprocess_exec(
                self._binary,
                *args,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                env=env,
            )
        except OSError as exc:
            raise KeybaseError(f"Failed to run {self._binary}: {exc}") from exc

    async def _run(
        self, args: Sequence[str], *, env: Optional[dict[str, str]] = None
    ) -> str:
        process = await self._spawn(args, env=env)
        stdout, stderr = await process.communicate()
        if process.returncode != 0:
            detail = stderr.decode("utf-8", errors="ignore").strip()
            raise KeybaseError(
                f"{self._binary} {args[0]} exited with {process.returncode}: {detail}"
            )
        return stdout.decode("utf-8", errors="ignore")

    async def login_oneshot(self, username: str, paperkey: str) -> None:
        env = dict(os.environ)
        env["KEYBASE_PAPERKEY"] = paperkey
        await self._run(["oneshot", "--username", username], env=env)
        log_event(self._logger, logging.INFO, "keybase.oneshot.ok", username=username)

    async def current_username(self) -> str:
        output = await self._run(["status", "--json"])
        try:
            status = json.loads(output)
        except json.JSONDecodeError as exc:
            raise KeybaseError("keybase status returned invalid JSON") from exc
        username = status.get("Username") if isinstance(status, dict) else None
        if not isinstance(username, str) or not username:
            raise KeybaseError("keybase is not logged in")
        return username

    async def send_message(self, channel_name: str, body: str) -> None:
        request = {
            "method": "send",
            "params": {
                "options": {
                    "channel": {"name": channel_name},
                    "message": {"body": body},
                }
            },
        }
        output = await self._run(["chat", "api", "-m", json.dumps(request)])
        try:
            response = json.loads(output) if output.strip() else {}
        except json.JSONDecodeError as exc:
            raise KeybaseError("keybase chat api returned invalid JSON") from exc
        error = response.get("error") if isinstance(response, dict) else None
        if error:
            message = error.get("message") if isinstance(error, dict) else error
            raise KeybaseError(f"keybase chat api send failed: {message}")

    async def listen(self) -> AsyncIterator[Any]:
        """Yield decoded ``keybase chat api-listen`` notifications until EOF."""
        process = await self._spawn(["chat", "api-listen"])
        assert process.stdout is not None
        log_event(self._logger, logging.INFO, "keybase.listen.spawned", pid=process.pid)
        try:
            while True:
                line = await process.stdout.readline()
                if not line:
                    break
                payload = line.decode("utf-8", errors="ignore").strip()
                if not payload:
                    continue
                try:
                    notification = json.loads(payload)
                except json.JSONDecodeError as exc:
                    log_event(
                        self._logger,
                        logging.WARNING,
                        "keybase.listen.invalid_json",
                        preview=payload[:_INVALID_JSON_PREVIEW_CHARS],
                        exc=exc,
                    )
                    continue
                yield notification
        finally:
            await _terminate(process)


async def _terminate(process: asyncio.subprocess.Process) -> None:
    if process.returncode is not None:
        return
    process.terminate()
    try:
        await asyncio.wait_for(process.wait(), timeout=_TERMINATE_TIMEOUT_SECONDS)
    except asyncio.TimeoutError:
        process.kill()
        await process.wait()

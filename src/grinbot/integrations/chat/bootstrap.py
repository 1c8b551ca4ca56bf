"""Startup steps run by a chat service before it starts reading updates.

Steps run in order. Each one is logged as ``<platform>.bootstrap.step_ok``
(with its duration) or ``<platform>.bootstrap.step_failed``. A failing
required step aborts startup; a failing optional one is only logged.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Awaitable, Callable, Iterable, Optional

from ...core.logging_utils import log_event
from .errors import BootstrapStepTimeout

BootstrapAction = Callable[[], Awaitable[None]]


@dataclass(frozen=True)
class ChatBootstrapStep:
    name: str
    action: BootstrapAction
    required: bool = True
    timeout_seconds: Optional[float] = None


async def _run_step(step: ChatBootstrapStep) -> None:
    if step.timeout_seconds is None:
        await step.action()
        return
    try:
        await asyncio.wait_for(step.action(), timeout=step.timeout_seconds)
    except asyncio.TimeoutError as exc:
        raise BootstrapStepTimeout(
            f"startup step {step.name} timed out after {step.timeout_seconds:g}s"
        ) from exc


async def run_chat_bootstrap_steps(
    *,
    platform: str,
    logger: logging.Logger,
    steps: Iterable[ChatBootstrapStep],
) -> list[str]:
    """Run ``steps``; return the names of optional steps that failed."""
    skipped: list[str] = []
    for step in steps:
        started = time.monotonic()
        try:
            await _run_step(step)
        except Exception as exc:
            log_event(
                logger,
                logging.ERROR if step.required else logging.WARNING,
                f"{platform}.bootstrap.step_failed",
                step=step.name,
                required=step.required,
                exc=exc,
            )
            if step.required:
                raise
            skipped.append(step.name)
            continue
        log_event(
            logger,
            logging.INFO,
            f"{platform}.bootstrap.step_ok",
            step=step.name,
            duration_ms=int((time.monotonic() - started) * 1000),
        )
    return skipped

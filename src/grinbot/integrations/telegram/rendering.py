"""Neutral markup to Telegram HTML."""

from __future__ import annotations

import html
import re
from typing import Any, Final, Sequence

TELEGRAM_PARSE_MODE: Final[str] = "HTML"

_NEUTRAL_TAG_RE = re.compile(r"</?(?:b|i|pre)>")


def format_telegram_html(text: str) -> str:
    """Escape everything except the ``<b>``, ``<i>`` and ``<pre>`` tags."""
    if not text:
        return ""
    parts: list[str] = []
    last = 0
    for match in _NEUTRAL_TAG_RE.finditer(text):
        parts.append(html.escape(html.unescape(text[last : match.start()]), quote=False))
        parts.append(match.group(0))
        last = match.end()
    parts.append(html.escape(html.unescape(text[last:]), quote=False))
    return "".join(parts)


def build_quick_command_keyboard(commands: Sequence[str]) -> dict[str, Any]:
    return {
        "keyboard": [list(commands)],
        "resize_keyboard": True,
        "one_time_keyboard": True,
        "selective": True,
    }

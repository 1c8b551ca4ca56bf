"""Neutral markup to Keybase chat markdown."""

from __future__ import annotations

import html
import re

_BOLD_RE = re.compile(r"<b>(.*?)</b>", re.DOTALL)
_ITALIC_RE = re.compile(r"<i>(.*?)</i>", re.DOTALL)
_PRE_RE = re.compile(r"<pre>(.*?)</pre>", re.DOTALL)


def format_keybase_message(text: str) -> str:
    if not text:
        return ""
    rendered = _PRE_RE.sub(lambda match: f"```{match.group(1)}```", text)
    rendered = _BOLD_RE.sub(lambda match: f"*{match.group(1)}*", rendered)
    rendered = _ITALIC_RE.sub(lambda match: f"_{match.group(1)}_", rendered)
    return html.unescape(rendered)

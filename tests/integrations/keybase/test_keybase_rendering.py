from __future__ import annotations

from grinbot.controller.messages import SEND_USAGE
from grinbot.integrations.keybase.rendering import format_keybase_message


def test_tags_become_keybase_markdown() -> None:
    assert (
        format_keybase_message("<b>Success:</b>\nSent <i>1</i> &amp; <pre>abc</pre>")
        == "*Success:*\nSent _1_ & ```abc```"
    )


def test_usage_text() -> None:
    assert format_keybase_message(SEND_USAGE) == (
        "Wrong number of arguments.\n\n"
        "Usage: ```/send 0.001 http://some-recipient123.org```"
    )


def test_empty_text() -> None:
    assert format_keybase_message("") == ""

"""Static reply texts.

Markup is limited to the neutral tag set (``<b>``, ``<i>``, ``<pre>``);
transport renderers translate or strip it.
"""

NO_IDENTITY_MESSAGE = "You must have a username to use Grin Bot."
WRONG_IDENTITY_MESSAGE = (
    "Your username does not match the username in the Grin Bot config."
)
MODE_NOT_SUPPORTED_MESSAGE = (
    "For security reasons, inline and group messages are not supported."
)

SEND_USAGE = (
    "Wrong number of arguments.\n\n"
    "Usage: <pre>/send 0.001 http://some-recipient123.org</pre>"
)

HELP_TEXT = (
    "<b>Grin Bot</b>\n"
    "Operate your Grin wallet from this chat.\n\n"
    "<b>Commands</b>\n"
    "/create - create a new wallet and show its recovery phrase\n"
    "/balance - show the wallet balance\n"
    "/send <i>amount</i> <i>url</i> - send grin to a listening wallet, e.g.\n"
    "<pre>/send 0.001 http://some-recipient123.org</pre>\n"
    "/home - return to the home screen\n"
    "/back - return to the previous screen\n"
    "/help - show this message"
)


def format_error(detail: object) -> str:
    return f"Error: {detail}"

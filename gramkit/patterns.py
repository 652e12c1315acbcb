"""Matching of handler patterns against incoming text and callback data."""

from __future__ import annotations

import re
from typing import Any, Optional, Union

ON_MESSAGE = "message"
ON_EDIT = "edit"
ON_INLINE = "inline"
ON_CALLBACK = "callback"
ON_INLINE_CALLBACK = "inlineCallback"

COMMAND_PREFIX = "cmd:"
COMMAND_TRIGGERS = r"(?i)^[!\/?]"

Data = Union[bytes, bytearray, str]


def _anchored(pattern: str) -> str:
    return pattern if pattern.startswith("^") else "^" + pattern


def _as_bytes(data: Data) -> bytes:
    if isinstance(data, str):
        return data.encode("utf-8")
    return bytes(data)


def _search_compiled(pattern: re.Pattern, subject: Data) -> bool:
    """Search a compiled pattern in text or bytes, converting as the pattern needs."""
    if isinstance(pattern.pattern, bytes):
        return pattern.search(_as_bytes(subject)) is not None
    if isinstance(subject, (bytes, bytearray)):
        subject = bytes(subject).decode("utf-8", errors="replace")
    return pattern.search(subject) is not None


def command_regex(command: str, bot_username: Optional[str] = None) -> str:
    """Build the expression that recognises a command such as ``/ping``.

    With a bot username the command may also be addressed as ``/ping@name``.
    """
    expression = COMMAND_TRIGGERS + command
    if bot_username:
        return expression + "(?: |$|@" + bot_username + ")(.*)"
    return expression + "(?: |$)(.*)"


def match_message_pattern(pattern: Any, text: str, bot_username: Optional[str] = None) -> bool:
    """True when a new-message handler pattern matches the message text.

    ``"message"`` matches everything; ``"cmd:<name>"`` matches a command;
    any other string is a regular expression anchored at the start. A
    compiled expression is searched as it is. Other patterns never match.
    """
    if isinstance(pattern, re.Pattern):
        return _search_compiled(pattern, text)
    if not isinstance(pattern, str):
        return False
    if pattern == ON_MESSAGE:
        return True
    if pattern.startswith(COMMAND_PREFIX):
        expression = command_regex(pattern[len(COMMAND_PREFIX):], bot_username)
    else:
        expression = _anchored(pattern)
    return re.search(expression, text) is not None or text.startswith(expression)


def match_edit_pattern(pattern: Any, text: str) -> bool:
    """True when an edit handler pattern matches the edited text.

    ``"edit"`` matches everything; any other string is a regular expression
    anchored at the start, or a plain prefix of the text.
    """
    if isinstance(pattern, re.Pattern):
        return _search_compiled(pattern, text)
    if not isinstance(pattern, str):
        return False
    if pattern == ON_EDIT:
        return True
    return re.search("^" + pattern, text) is not None or text.startswith(pattern)


def match_inline_pattern(pattern: Any, text: str) -> bool:
    """True when an inline handler pattern matches the query text.

    ``"inline"`` matches everything; any other string is a regular
    expression anchored at the start.
    """
    if isinstance(pattern, re.Pattern):
        return _search_compiled(pattern, text)
    if not isinstance(pattern, str):
        return False
    if pattern == ON_INLINE:
        return True
    expression = _anchored(pattern)
    return re.search(expression, text) is not None or text.startswith(expression)


def match_callback_pattern(pattern: Any, data: Data) -> bool:
    """True when a callback handler pattern matches the callback data.

    ``"callback"`` and ``"inlineCallback"`` match everything; any other
    string is an unanchored regular expression, or a plain prefix of the data.
    """
    if isinstance(pattern, re.Pattern):
        return _search_compiled(pattern, data)
    if not isinstance(pattern, str):
        return False
    if pattern in (ON_CALLBACK, ON_INLINE_CALLBACK):
        return True
    raw = _as_bytes(data)
    encoded = pattern.encode("utf-8")
    return re.search(encoded, raw) is not None or raw.startswith(encoded)
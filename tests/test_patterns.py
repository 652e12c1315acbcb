import re

import pytest

from gramkit.patterns import (
    command_regex,
    match_callback_pattern,
    match_edit_pattern,
    match_inline_pattern,
    match_message_pattern,
)


def test_message_catch_all():
    assert match_message_pattern("message", "anything at all") is True


@pytest.mark.parametrize(
    "text,expected",
    [
        ("/ping", True),
        ("!PING now", True),
        ("?ping", True),
        ("/pinger", False),
        ("ping", False),
        ("/ping@mybot", False),
    ],
)
def test_command_without_bot_username(text, expected):
    assert match_message_pattern("cmd:ping", text) is expected


def test_command_with_bot_username():
    assert match_message_pattern("cmd:ping", "/ping@mybot", "mybot") is True
    assert match_message_pattern("cmd:ping", "/ping@otherbot", "mybot") is False


def test_command_regex_shape():
    assert command_regex("ping") == r"(?i)^[!\/?]ping(?: |$)(.*)"
    assert command_regex("ping", "mybot").endswith("(?: |$|@mybot)(.*)")


def test_message_pattern_is_anchored():
    assert match_message_pattern("hello", "hello world") is True
    assert match_message_pattern("hello", "say hello") is False
    assert match_message_pattern("^hello", "hello") is True


def test_message_compiled_pattern_searches():
    assert match_message_pattern(re.compile("world"), "hello world") is True
    assert match_message_pattern(re.compile("^world"), "hello world") is False


def test_message_unknown_pattern_type():
    assert match_message_pattern(42, "42") is False


def test_message_invalid_regex_raises():
    with pytest.raises(re.error):
        match_message_pattern("(open", "(open")


def test_edit_patterns():
    assert match_edit_pattern("edit", "whatever") is True
    assert match_edit_pattern("hi", "hi there") is True
    assert match_edit_pattern("hi", "oh hi") is False
    assert match_edit_pattern(re.compile("hi"), "oh hi") is True


def test_edit_prefix_fallback():
    # "$x" never matches as an expression but is a literal prefix
    assert match_edit_pattern("$x", "$xyz") is True


def test_inline_patterns():
    assert match_inline_pattern("inline", "") is True
    assert match_inline_pattern("search", "search cats") is True
    assert match_inline_pattern("search", "cats search") is False
    assert match_inline_pattern(None, "search") is False


def test_callback_catch_alls():
    assert match_callback_pattern("callback", b"x") is True
    assert match_callback_pattern("inlineCallback", b"x") is True


def test_callback_pattern_is_unanchored():
    assert match_callback_pattern("vote_", b"vote_1") is True
    assert match_callback_pattern("_1", b"vote_1") is True
    assert match_callback_pattern("nope", b"vote_1") is False


def test_callback_prefix_fallback_and_str_data():
    assert match_callback_pattern("$x", b"$x1") is True
    assert match_callback_pattern("vote", "vote_2") is True


def test_callback_compiled_patterns():
    assert match_callback_pattern(re.compile(rb"^vote_\d$"), b"vote_7") is True
    assert match_callback_pattern(re.compile(r"^vote_\d$"), b"vote_7") is True
    assert match_callback_pattern(re.compile(r"^vote_\d$"), b"vote_x") is False
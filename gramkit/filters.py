"""Filters that decide whether a message reaches a handler."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Optional

from gramkit.message import NewMessage

MessagePredicate = Callable[[NewMessage], bool]
CallbackPredicate = Callable[[Any], bool]


@dataclass
class Filter:
    """Conditions a message must meet.

    The boolean flags each require one property of the message. ``users``,
    ``chats`` and ``channels`` restrict the sender id, the bare chat id and
    the marked chat id; with ``blacklist`` set they exclude instead.
    ``func`` is an extra predicate on the message. ``func_callback`` is a
    predicate meant for callback queries and is not used on messages.
    """

    private: bool = False
    group: bool = False
    channel: bool = False
    media: bool = False
    command: bool = False
    reply: bool = False
    forward: bool = False
    from_bot: bool = False
    blacklist: bool = False
    mention: bool = False
    users: list[int] = field(default_factory=list)
    chats: list[int] = field(default_factory=list)
    channels: list[int] = field(default_factory=list)
    func: Optional[MessagePredicate] = None
    func_callback: Optional[CallbackPredicate] = None

    def _rejects(self, message: NewMessage) -> bool:
        """True when one of the flag conditions or the predicate fails."""
        required = (
            (self.private, message.is_private),
            (self.group, message.is_group),
            (self.channel, message.is_channel),
            (self.media, message.is_media),
            (self.command, message.is_command),
            (self.reply, message.is_reply),
            (self.forward, message.is_forward),
            (self.from_bot, lambda: message.sender_is_bot),
            (self.mention, lambda: message.message.mentioned),
        )
        if any(wanted and not check() for wanted, check in required):
            return True
        return self.func is not None and not self.func(message)


FILTER_PRIVATE = Filter(private=True)
FILTER_GROUP = Filter(group=True)
FILTER_CHANNEL = Filter(channel=True)
FILTER_MEDIA = Filter(media=True)
FILTER_COMMAND = Filter(command=True)
FILTER_REPLY = Filter(reply=True)
FILTER_FORWARD = Filter(forward=True)
FILTER_FROM_BOT = Filter(from_bot=True)
FILTER_BLACKLIST = Filter(blacklist=True)
FILTER_MENTION = Filter(mention=True)


def _peer_check(ident: int, allowed: list[int], blacklist: bool) -> Optional[bool]:
    """Return whether the id passes; None means the message must be rejected."""
    if not allowed or ident == 0:
        return True
    if ident in allowed:
        return None if blacklist else True
    return False


def run_filter_chain(message: NewMessage, filters: Optional[Iterable[Filter]]) -> bool:
    """Return True when the message passes every filter.

    Among the filters, the last non-empty ``users``, ``chats`` and
    ``channels`` lists are the ones applied, and ``blacklist`` set on any
    filter turns all of them into exclusion lists.
    """
    blacklist = False
    users: list[int] = []
    chats: list[int] = []
    channels: list[int] = []

    for item in filters or ():
        if item._rejects(message):
            return False
        if item.users:
            users = list(item.users)
        if item.chats:
            chats = list(item.chats)
        if item.channels:
            channels = list(item.channels)
        if item.blacklist:
            blacklist = True

    results = []
    for ident, allowed in (
        (message.sender_id(), users),
        (message.chat_id(), chats),
        (message.channel_id(), channels),
    ):
        outcome = _peer_check(ident, allowed, blacklist)
        if outcome is None:
            return False
        results.append(outcome)

    if not blacklist and (users or chats or channels) and not all(results):
        return False
    return True
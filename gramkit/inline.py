"""Inline queries and the results users chose from them."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional, Union

from gramkit.peers import InputPeerChannel


class InlineQueryPeerType(enum.Enum):
    """The kind of chat an inline query was typed in."""

    SAME_BOT_PM = "same_bot_pm"
    PM = "pm"
    CHAT = "chat"
    MEGAGROUP = "megagroup"
    BROADCAST = "broadcast"


@dataclass
class InlineQuery:
    """An inline query sent to the bot."""

    query_id: int = 0
    query: str = ""
    sender_id: int = 0
    offset: str = ""
    peer_type: Optional[InlineQueryPeerType] = None

    def is_channel(self) -> bool:
        """True when the query came from a broadcast channel."""
        return self.peer_type is InlineQueryPeerType.BROADCAST

    def is_group(self) -> bool:
        """True when the query came from a group or supergroup."""
        return self.peer_type in (InlineQueryPeerType.CHAT, InlineQueryPeerType.MEGAGROUP)

    def is_private(self) -> bool:
        """True when the query came from a private chat."""
        return self.peer_type in (InlineQueryPeerType.PM, InlineQueryPeerType.SAME_BOT_PM)

    def args(self) -> str:
        """Return the query text after its first space-separated word."""
        words = self.query.split(" ")
        if len(words) < 2:
            return ""
        return " ".join(words[1:]).strip()


@dataclass(frozen=True)
class InlineMessageID:
    """An inline message identifier packing chat and message into one number."""

    dc_id: int
    id: int
    access_hash: int = 0


@dataclass(frozen=True)
class InlineMessageID64:
    """An inline message identifier with separate owner and message ids."""

    dc_id: int
    owner_id: int
    id: int
    access_hash: int = 0


AnyInlineMessageID = Union[InlineMessageID, InlineMessageID64]


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - (1 << 32) if value >= 1 << 31 else value


@dataclass
class InlineSend:
    """An inline result that a user picked and sent."""

    id: str = ""
    sender_id: int = 0
    msg_id: Optional[AnyInlineMessageID] = None

    def chat_id(self) -> int:
        """Return the unsigned chat identifier, or 0 when unknown."""
        match self.msg_id:
            case InlineMessageID(id=packed):
                return abs(packed >> 32)
            case InlineMessageID64(owner_id=owner):
                return abs(owner)
            case _:
                return 0

    def access_hash(self) -> int:
        """Return the access hash of the message, or 0 when unknown."""
        match self.msg_id:
            case InlineMessageID(access_hash=value) | InlineMessageID64(access_hash=value):
                return value
            case _:
                return 0

    def message_id(self) -> int:
        """Return the message identifier, or 0 when unknown."""
        match self.msg_id:
            case InlineMessageID(id=packed):
                return _to_int32(packed)
            case InlineMessageID64(id=ident):
                return ident
            case _:
                return 0

    def get_peer(self) -> InputPeerChannel:
        """Return the chat the message lives in.

        Raises TypeError when the message identifier is missing or unknown.
        """
        if not isinstance(self.msg_id, (InlineMessageID, InlineMessageID64)):
            raise TypeError(f"unknown message type: {type(self.msg_id).__name__}")
        return InputPeerChannel(channel_id=self.chat_id(), access_hash=self.msg_id.access_hash)
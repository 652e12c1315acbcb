"""Peer references and the identifier conventions used for chats."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

CHANNEL_ID_OFFSET = 1_000_000_000_000
"""Offset applied to channel identifiers in their marked form."""


@dataclass(frozen=True)
class PeerUser:
    """A reference to a user."""

    user_id: int


@dataclass(frozen=True)
class PeerChat:
    """A reference to a basic group chat."""

    chat_id: int


@dataclass(frozen=True)
class PeerChannel:
    """A reference to a channel or supergroup."""

    channel_id: int


@dataclass(frozen=True)
class InputPeerUser:
    """A user reference that can be sent in requests."""

    user_id: int
    access_hash: int = 0


@dataclass(frozen=True)
class InputPeerChat:
    """A basic group reference that can be sent in requests."""

    chat_id: int


@dataclass(frozen=True)
class InputPeerChannel:
    """A channel reference that can be sent in requests."""

    channel_id: int
    access_hash: int = 0


Peer = Union[PeerUser, PeerChat, PeerChannel]
InputPeer = Union[InputPeerUser, InputPeerChat, InputPeerChannel]


def peer_id(peer: Peer | InputPeer | None) -> int:
    """Return the bare identifier of a peer, or 0 when there is none."""
    match peer:
        case PeerUser(user_id=ident) | InputPeerUser(user_id=ident):
            return ident
        case PeerChat(chat_id=ident) | InputPeerChat(chat_id=ident):
            return ident
        case PeerChannel(channel_id=ident) | InputPeerChannel(channel_id=ident):
            return ident
        case _:
            return 0


def marked_id(peer: Peer | InputPeer | None) -> int:
    """Return the signed identifier that tells users, chats and channels apart.

    Users keep their id, chats are negated and channels are shifted
    below ``-CHANNEL_ID_OFFSET``. A missing peer gives 0.
    """
    match peer:
        case PeerChannel(channel_id=ident) | InputPeerChannel(channel_id=ident):
            return -CHANNEL_ID_OFFSET - ident
        case PeerChat(chat_id=ident) | InputPeerChat(chat_id=ident):
            return -ident
        case PeerUser(user_id=ident) | InputPeerUser(user_id=ident):
            return ident
        case _:
            return 0
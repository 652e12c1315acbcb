"""Incoming messages, their media and the albums they form."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Optional

from gramkit.peers import CHANNEL_ID_OFFSET, Peer, PeerChannel, PeerChat, PeerUser, marked_id, peer_id

LINK_BASE = "https://t.me"
"""Base of the public links built for messages."""

STICKER_SUFFIXES = (".tgs", ".webp")


class ChatType(enum.Enum):
    """The kind of chat a message was sent in."""

    USER = "user"
    CHAT = "chat"
    CHANNEL = "channel"
    UNKNOWN = "unknown"


class EntityKind(enum.Enum):
    """The kind of a formatting entity inside a message text."""

    BOT_COMMAND = "bot_command"
    MENTION = "mention"
    HASHTAG = "hashtag"
    URL = "url"
    TEXT_URL = "text_url"
    BOLD = "bold"
    ITALIC = "italic"
    CODE = "code"
    PRE = "pre"
    OTHER = "other"


@dataclass(frozen=True)
class MessageEntity:
    """A span of the message text with a special meaning."""

    kind: EntityKind
    offset: int
    length: int


class AttributeKind(enum.Enum):
    """The kind of an attribute attached to a document."""

    STICKER = "sticker"
    FILENAME = "filename"
    VIDEO = "video"
    AUDIO = "audio"
    ANIMATED = "animated"
    IMAGE_SIZE = "image_size"


@dataclass(frozen=True)
class Document:
    """A file attached to a message.

    ``file_name`` is set when the document carries a file-name attribute.
    """

    id: int = 0
    attributes: tuple[AttributeKind, ...] = ()
    file_name: Optional[str] = None
    mime_type: str = ""
    size: int = 0

    def has(self, kind: AttributeKind) -> bool:
        """True when the document carries an attribute of the given kind."""
        if kind is AttributeKind.FILENAME:
            return self.file_name is not None or kind in self.attributes
        return kind in self.attributes


class MediaKind(enum.Enum):
    """The kind of media attached to a message."""

    PHOTO = "photo"
    DOCUMENT = "document"
    VENUE = "venue"
    CONTACT = "contact"
    GEO = "geo"
    GAME = "game"
    INVOICE = "invoice"
    GEO_LIVE = "geo_live"
    UNSUPPORTED = "unsupported"
    WEB_PAGE = "web_page"
    DICE = "dice"
    POLL = "poll"
    OTHER = "other"


_NAMED_MEDIA = frozenset(
    {
        MediaKind.PHOTO,
        MediaKind.DOCUMENT,
        MediaKind.VENUE,
        MediaKind.CONTACT,
        MediaKind.GEO,
        MediaKind.GAME,
        MediaKind.INVOICE,
        MediaKind.GEO_LIVE,
        MediaKind.UNSUPPORTED,
        MediaKind.WEB_PAGE,
        MediaKind.DICE,
    }
)


@dataclass(frozen=True)
class Media:
    """Media attached to a message; ``payload`` holds kind-specific data."""

    kind: MediaKind
    document: Optional[Document] = None
    payload: Any = None


@dataclass(frozen=True)
class ReplyHeader:
    """Details of the message that a message replies to."""

    reply_to_msg_id: int = 0
    reply_to_top_id: int = 0
    forum_topic: bool = False
    reply_to_peer_id: Optional[Peer] = None


@dataclass
class Message:
    """The raw content of a message."""

    id: int = 0
    peer_id: Optional[Peer] = None
    from_id: Optional[Peer] = None
    text: str = ""
    date: int = 0
    entities: list[MessageEntity] = field(default_factory=list)
    reply_to: Optional[ReplyHeader] = None
    fwd_from: Any = None
    media: Optional[Media] = None
    grouped_id: int = 0
    mentioned: bool = False
    out: bool = False


@dataclass
class NewMessage:
    """A message together with what is known about its chat and sender.

    ``broadcast`` tells, for channel peers, whether the channel is a
    broadcast channel (True), a supergroup (False), or unknown (None).
    """

    message: Message
    broadcast: Optional[bool] = None
    sender_is_bot: bool = False

    @property
    def id(self) -> int:
        return self.message.id

    @property
    def date(self) -> int:
        return self.message.date

    def text(self) -> str:
        """Return the text of the message."""
        return self.message.text

    def reply_to_msg_id(self) -> int:
        """Return the id of the replied-to message, or 0."""
        header = self.message.reply_to
        return header.reply_to_msg_id if header is not None else 0

    def topic_id(self) -> Optional[int]:
        """Return the forum topic the message belongs to, or None."""
        header = self.message.reply_to
        if header is None or not header.forum_topic:
            return None
        return header.reply_to_top_id or header.reply_to_msg_id

    def chat_id(self) -> int:
        """Return the bare identifier of the chat."""
        return peer_id(self.message.peer_id)

    def channel_id(self) -> int:
        """Return the marked identifier of the chat."""
        return marked_id(self.message.peer_id)

    def sender_id(self) -> int:
        """Return the identifier of the sender, or 0 when unknown."""
        if self.is_private():
            return self.chat_id()
        return peer_id(self.message.from_id)

    def chat_type(self) -> ChatType:
        """Return the kind of chat the message lives in."""
        match self.message.peer_id:
            case PeerUser():
                return ChatType.USER
            case PeerChat():
                return ChatType.CHAT
            case PeerChannel():
                return ChatType.CHAT if self.broadcast is False else ChatType.CHANNEL
            case _:
                return ChatType.UNKNOWN

    def is_private(self) -> bool:
        return self.chat_type() is ChatType.USER

    def is_group(self) -> bool:
        return self.chat_type() is ChatType.CHAT

    def is_channel(self) -> bool:
        return self.chat_type() is ChatType.CHANNEL

    def is_reply(self) -> bool:
        return self.message.reply_to is not None

    def is_forward(self) -> bool:
        return self.message.fwd_from is not None

    def is_media(self) -> bool:
        return self.message.media is not None

    def media_type(self) -> str:
        """Return the name of the attached media kind, or "" without media."""
        media = self.message.media
        if media is None:
            return ""
        return media.kind.value if media.kind in _NAMED_MEDIA else "unknown"

    def document(self) -> Optional[Document]:
        """Return the attached document, if any."""
        media = self.message.media
        if media is not None and media.kind is MediaKind.DOCUMENT:
            return media.document
        return None

    def _document_with(self, kind: AttributeKind) -> Optional[Document]:
        doc = self.document()
        return doc if doc is not None and doc.has(kind) else None

    def sticker(self) -> Optional[Document]:
        """Return the attached document when it is a sticker."""
        doc = self.document()
        if doc is None:
            return None
        if doc.has(AttributeKind.STICKER):
            return doc
        if doc.file_name is not None and doc.file_name.endswith(STICKER_SUFFIXES):
            return doc
        return None

    def video(self) -> Optional[Document]:
        return self._document_with(AttributeKind.VIDEO)

    def audio(self) -> Optional[Document]:
        return self._document_with(AttributeKind.AUDIO)

    def animation(self) -> Optional[Document]:
        return self._document_with(AttributeKind.ANIMATED)

    def args(self) -> str:
        """Return the text after its first space-separated word."""
        words = self.text().split(" ")
        if len(words) < 2:
            return ""
        return " ".join(words[1:]).strip()

    def is_command(self) -> bool:
        """True when the message holds a bot command entity."""
        return any(e.kind is EntityKind.BOT_COMMAND for e in self.message.entities)

    def get_command(self) -> str:
        """Return the text of the first bot command, or ""."""
        text = self.text()
        if not text:
            return ""
        for entity in self.message.entities:
            if entity.kind is EntityKind.BOT_COMMAND:
                return text[entity.offset : entity.offset + entity.length]
        return ""

    def link(self, username: Optional[str] = None) -> str:
        """Return a link to the message; private chats have none."""
        if not (self.is_channel() or self.is_group()):
            return ""
        if username:
            return f"{LINK_BASE}/{username}/{self.id}"
        ident = self.channel_id()
        if ident < 0:
            ident = -ident
            if ident > CHANNEL_ID_OFFSET:
                ident -= CHANNEL_ID_OFFSET
        return f"{LINK_BASE}/c/{ident}/{self.id}"


@dataclass
class Album:
    """Messages sent together as one media group."""

    grouped_id: int = 0
    messages: list[NewMessage] = field(default_factory=list)

    def _first(self) -> NewMessage:
        if not self.messages:
            raise ValueError("album has no messages")
        return self.messages[0]

    def ids(self) -> list[int]:
        """Return the ids of the album's messages in order."""
        return [m.id for m in self.messages]

    def is_reply(self) -> bool:
        return self._first().is_reply()

    def is_forward(self) -> bool:
        return self._first().is_forward()
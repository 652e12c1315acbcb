"""Chunked reading of a group call's live stream."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Optional

CHUNK_LIMIT = 512 * 1024
VIDEO_QUALITY = 2


class StreamError(Exception):
    """Raised when a stream chunk cannot be fetched."""


@dataclass
class StreamChannel:
    """One channel of a group call stream."""

    channel: int
    scale: int
    last_timestamp_ms: int = 0


Fetcher = Callable[..., Any]


@dataclass
class GroupCallStream:
    """Reads consecutive chunks from one selected stream channel.

    ``fetch`` is called with the keyword arguments ``call``, ``time_ms``,
    ``scale``, ``video_channel``, ``video_quality``, ``offset`` and
    ``limit`` and must return the chunk bytes.
    """

    channels: list[StreamChannel]
    fetch: Fetcher
    call: Any = None
    dc_id: int = 0
    ts: int = 0
    scale: int = field(default=0)
    _selected: int = field(default=0, repr=False)

    def __post_init__(self) -> None:
        if not self.channels:
            raise StreamError("group call has no stream channels")
        self.scale = self.channels[0].scale

    def current_channel(self) -> Optional[StreamChannel]:
        """Return the selected channel, or None when the selection is invalid."""
        if 0 <= self._selected < len(self.channels):
            return self.channels[self._selected]
        return None

    def select_channel(self, index: int) -> None:
        """Select a channel and resume from its last timestamp; ignore bad indexes."""
        if not 0 <= index < len(self.channels):
            return
        chosen = self.channels[index]
        self._selected = index
        self.scale = chosen.scale
        self.ts = chosen.last_timestamp_ms

    def next_chunk(self) -> bytes:
        """Fetch the chunk at the current timestamp and advance past it."""
        channel = self.current_channel()
        if channel is None:
            raise StreamError("selected channel is out of range")

        result = self.fetch(
            call=self.call,
            time_ms=self.ts,
            scale=self.scale,
            video_channel=channel.channel,
            video_quality=VIDEO_QUALITY,
            offset=0,
            limit=CHUNK_LIMIT,
        )
        if result is None:
            raise StreamError("file info is nil")
        if not isinstance(result, (bytes, bytearray)):
            raise StreamError("unknown file info type")

        self.ts += 1000 >> self.scale
        return bytes(result)

    def __iter__(self):
        """Yield chunks until fetching fails."""
        while True:
            yield self.next_chunk()
"""Peer, message, participant and inline models with filters, pattern matching and an update dispatcher."""

__version__ = "0.1.0"

__all__ = [
    "dispatcher",
    "filters",
    "groupcall",
    "inline",
    "message",
    "participant",
    "patterns",
    "peers",
]
"""Registration of update handlers and routing of updates to them."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Optional

from gramkit.filters import Filter, run_filter_chain
from gramkit.inline import InlineQuery
from gramkit.message import NewMessage
from gramkit.participant import ParticipantUpdate
from gramkit.patterns import (
    COMMAND_PREFIX,
    ON_CALLBACK,
    ON_EDIT,
    ON_INLINE,
    ON_MESSAGE,
    Data,
    match_callback_pattern,
    match_edit_pattern,
    match_inline_pattern,
    match_message_pattern,
)

logger = logging.getLogger(__name__)

DEFAULT_GROUP = "default"
CONVERSATION_GROUP = "conversation"


class EndGroup(Exception):
    """Raised by a handler to stop the remaining handlers of its group."""

    def __init__(self, message: str = "handler propagation ended") -> None:
        super().__init__(message)


class HandlerKind(enum.Enum):
    """The kind of update a handler receives."""

    MESSAGE = "message"
    EDIT = "edit"
    INLINE = "inline"
    CALLBACK = "callback"
    PARTICIPANT = "participant"
    RAW = "raw"


def _is_default(group: str) -> bool:
    return group == "" or group.strip().lower() == DEFAULT_GROUP


@dataclass(eq=False)
class Handle:
    """A registered handler with its pattern, filters, group and priority.

    Handlers with a higher priority run first within their group.
    """

    kind: HandlerKind
    handler: Callable[..., Any]
    pattern: Any = None
    filters: list[Filter] = field(default_factory=list)
    group: str = DEFAULT_GROUP
    priority: int = 0
    _on_change: Optional[Callable[[], None]] = field(default=None, repr=False)

    def set_group(self, group: str) -> "Handle":
        """Move the handle into another group."""
        self.group = group
        if self._on_change is not None:
            self._on_change()
        return self

    def set_priority(self, priority: int) -> "Handle":
        """Change the priority of the handle within its group."""
        self.priority = priority
        if self._on_change is not None:
            self._on_change()
        return self


class Dispatcher:
    """Holds handlers by kind and group and routes updates to them.

    Handlers in the default group all run; an ``EndGroup`` they raise is
    ignored. In any other group handlers run in priority order and an
    ``EndGroup`` stops the rest of that group. New messages reach only the
    ``conversation`` group, which runs first and can stop everything else
    with ``EndGroup``, and the default group.
    """

    def __init__(self, bot_username: Optional[str] = None) -> None:
        self.bot_username = bot_username
        self.pts = 0
        self._handles: dict[HandlerKind, dict[str, list[Handle]]] = {
            kind: {} for kind in HandlerKind
        }

    # ------------------------------------------------------------ registration

    def _add(
        self,
        kind: HandlerKind,
        handler: Callable[..., Any],
        pattern: Any = None,
        filters: Optional[Iterable[Filter]] = None,
    ) -> Handle:
        handle = Handle(
            kind=kind,
            handler=handler,
            pattern=pattern,
            filters=list(filters or ()),
            _on_change=self.resort,
        )
        self._handles[kind].setdefault(DEFAULT_GROUP, []).append(handle)
        return handle

    def add_message_handler(self, pattern, handler, filters=None) -> Handle:
        """Register a handler for new messages matching ``pattern``."""
        return self._add(HandlerKind.MESSAGE, handler, pattern, filters)

    def add_command_handler(self, pattern, handler, filters=None) -> Handle:
        """Register a handler for a command such as ``start``."""
        if not pattern.startswith(COMMAND_PREFIX):
            pattern = COMMAND_PREFIX + pattern
        return self.add_message_handler(pattern, handler, filters)

    def add_edit_handler(self, pattern, handler, filters=None) -> Handle:
        """Register a handler for edited messages matching ``pattern``."""
        return self._add(HandlerKind.EDIT, handler, pattern, filters)

    def add_inline_handler(self, pattern, handler) -> Handle:
        """Register a handler for inline queries matching ``pattern``."""
        return self._add(HandlerKind.INLINE, handler, pattern)

    def add_callback_handler(self, pattern, handler) -> Handle:
        """Register a handler for callback queries whose data matches ``pattern``."""
        return self._add(HandlerKind.CALLBACK, handler, pattern)

    def add_participant_handler(self, handler) -> Handle:
        """Register a handler for channel membership changes."""
        return self._add(HandlerKind.PARTICIPANT, handler)

    def add_raw_handler(self, update_type, handler) -> Handle:
        """Register a handler for raw updates of a type, or of any type when None.

        ``update_type`` may be a class or an instance of the wanted class.
        """
        return self._add(HandlerKind.RAW, handler, update_type)

    def on(self, pattern, handler, filters=None) -> Handle:
        """Register a handler by event name, optionally followed by ``:args``.

        Known names are message, command, edit, inline, callback,
        participant and raw. A non-string pattern registers a raw handler
        for that update type. Raises ValueError for an unknown event.
        """
        key, args = "", ""
        if isinstance(pattern, str):
            if ":" in pattern:
                head, tail = pattern.split(":", 1)
                key, args = head.strip(), tail.strip()
            else:
                key = pattern.strip()

        match key:
            case "message":
                return self.add_message_handler(args or ON_MESSAGE, handler, filters)
            case "command":
                target = COMMAND_PREFIX + args if args else ON_MESSAGE
                return self.add_message_handler(target, handler, filters)
            case "edit":
                return self.add_edit_handler(args or ON_EDIT, handler)
            case "inline":
                return self.add_inline_handler(args or ON_INLINE, handler)
            case "callback":
                return self.add_callback_handler(args or ON_CALLBACK, handler)
            case "participant":
                return self.add_participant_handler(handler)
            case "raw":
                return self.add_raw_handler(None, handler)
        if pattern is not None and not isinstance(pattern, str):
            return self.add_raw_handler(pattern, handler)
        raise ValueError(f"unknown event: {pattern!r}")

    def remove_handle(self, handle) -> bool:
        """Unregister a handle; return whether it was registered."""
        if not isinstance(handle, Handle):
            raise TypeError(f"handle type not supported: {type(handle).__name__}")
        groups = self._handles[handle.kind]
        for group, handles in list(groups.items()):
            for index, candidate in enumerate(handles):
                if candidate is handle:
                    del handles[index]
                    if not handles:
                        del groups[group]
                    return True
        return False

    def resort(self) -> None:
        """Regroup every handle by its group and order each group by priority."""
        for kind, groups in self._handles.items():
            regrouped: dict[str, list[Handle]] = {}
            for handles in groups.values():
                for handle in handles:
                    regrouped.setdefault(handle.group or DEFAULT_GROUP, []).append(handle)
            for handles in regrouped.values():
                handles.sort(key=lambda h: h.priority, reverse=True)
            self._handles[kind] = regrouped

    def handles(self, kind) -> dict[str, list[Handle]]:
        """Return the handles of one kind by group, as a copy."""
        return {group: list(items) for group, items in self._handles[kind].items()}

    # ---------------------------------------------------------------- dispatch

    @staticmethod
    def _call(handle: Handle, *args: Any) -> bool:
        """Run a handler; return True when it raised EndGroup."""
        try:
            handle.handler(*args)
        except EndGroup:
            return True
        except Exception:
            logger.exception("[%s_HANDLER_ERROR]", handle.kind.name)
        return False

    def _run_group(
        self,
        group: str,
        handles: list[Handle],
        accepts: Callable[[Handle], bool],
        args: tuple,
        ran: list[Handle],
    ) -> bool:
        """Run one group; return True when a handler ended a non-default group."""
        default = _is_default(group)
        for handle in handles:
            if not accepts(handle):
                continue
            ran.append(handle)
            if self._call(handle, *args) and not default:
                return True
        return False

    def _run_all(self, kind: HandlerKind, accepts: Callable[[Handle], bool], args: tuple) -> list[Handle]:
        ran: list[Handle] = []
        for group, handles in list(self._handles[kind].items()):
            self._run_group(group, list(handles), accepts, args, ran)
        return ran

    def dispatch_message(self, message: NewMessage) -> list[Handle]:
        """Route a new message; return the handles whose handler ran."""
        text = message.text()

        def accepts(handle: Handle) -> bool:
            return match_message_pattern(
                handle.pattern, text, self.bot_username
            ) and run_filter_chain(message, handle.filters)

        ran: list[Handle] = []
        groups = list(self._handles[HandlerKind.MESSAGE].items())
        for group, handles in groups:
            if group.lower() == CONVERSATION_GROUP:
                if self._run_group(group, list(handles), accepts, (message,), ran):
                    return ran
        for group, handles in groups:
            if group.lower() == CONVERSATION_GROUP or not _is_default(group):
                continue
            self._run_group(group, list(handles), accepts, (message,), ran)
        return ran

    def dispatch_edit(self, message: NewMessage) -> list[Handle]:
        """Route an edited message; return the handles whose handler ran."""
        text = message.text()
        return self._run_all(
            HandlerKind.EDIT,
            lambda h: match_edit_pattern(h.pattern, text) and run_filter_chain(message, h.filters),
            (message,),
        )

    def dispatch_inline(self, query: InlineQuery) -> list[Handle]:
        """Route an inline query; return the handles whose handler ran."""
        return self._run_all(
            HandlerKind.INLINE,
            lambda h: match_inline_pattern(h.pattern, query.query),
            (query,),
        )

    def dispatch_callback(self, data: Data, payload: Any = None) -> list[Handle]:
        """Route a callback query by its data, handing ``payload`` to handlers."""
        target = data if payload is None else payload
        return self._run_all(
            HandlerKind.CALLBACK,
            lambda h: match_callback_pattern(h.pattern, data),
            (target,),
        )

    def dispatch_participant(self, update: ParticipantUpdate) -> list[Handle]:
        """Route a membership change to every participant handler."""
        return self._run_all(HandlerKind.PARTICIPANT, lambda h: True, (update,))

    def dispatch_raw(self, update: Any) -> list[Handle]:
        """Route a raw update to the handlers registered for its type."""

        def accepts(handle: Handle) -> bool:
            wanted = handle.pattern
            if wanted is None:
                return True
            wanted_type = wanted if isinstance(wanted, type) else type(wanted)
            return type(update) is wanted_type

        return self._run_all(HandlerKind.RAW, accepts, (update,))

    # -------------------------------------------------------------------- pts

    def manage_pts(self, pts: int, pts_count: int) -> bool:
        """Advance the stored update sequence number; updates are always accepted."""
        current = self.pts
        if current + pts_count == pts or current == 0:
            self.pts = pts
        elif current + pts_count < pts:
            logger.debug("[PTS_MISMATCH] - %d + %d != %d", current, pts_count, pts)
            self.pts = pts
        return True
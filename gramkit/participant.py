"""Channel membership changes and how to classify them."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Optional


class ParticipantState(enum.Enum):
    """The membership state of a user in a channel."""

    MEMBER = "member"
    ADMIN = "admin"
    CREATOR = "creator"
    BANNED = "banned"
    LEFT = "left"


@dataclass
class ParticipantUpdate:
    """A change in a user's membership of a channel.

    ``old`` and ``new`` are None when the user had no state before, or has
    none after the change. Identifiers of 0 mean the party is unknown.
    """

    channel_id: int = 0
    user_id: int = 0
    actor_id: int = 0
    old: Optional[ParticipantState] = None
    new: Optional[ParticipantState] = None
    invite: Any = None
    date: int = 0

    def _transition(self, before: ParticipantState, after: ParticipantState) -> bool:
        return self.old is before and self.new is after

    def _actor_is_user(self) -> Optional[bool]:
        """Whether the actor is the user, or None when either is unknown."""
        if self.actor_id and self.user_id:
            return self.actor_id == self.user_id
        return None

    def is_added(self) -> bool:
        """True when someone other than the user brought the user in."""
        if self._actor_is_user() is True:
            return False
        if self.old is not None and self.new is not None:
            return self._transition(
                ParticipantState.BANNED, ParticipantState.MEMBER
            ) or self._transition(ParticipantState.LEFT, ParticipantState.MEMBER)
        if self.old is None and self.new is not None:
            return self.new in (ParticipantState.MEMBER, ParticipantState.ADMIN)
        return False

    def is_left(self) -> bool:
        """True when the user has no membership after the change."""
        return self.new is None

    def is_joined(self) -> bool:
        """True when the user joined by their own action."""
        if self._actor_is_user() is False:
            return False
        if self.old is not None and self.new is not None:
            return self._transition(
                ParticipantState.LEFT, ParticipantState.MEMBER
            ) or self._transition(ParticipantState.BANNED, ParticipantState.MEMBER)
        if self.old is None and self.new is not None:
            return self.new is ParticipantState.MEMBER
        return False

    def is_banned(self) -> bool:
        """True when a member was banned."""
        return self._transition(ParticipantState.MEMBER, ParticipantState.BANNED)

    def is_kicked(self) -> bool:
        """True when a member was removed."""
        return self._transition(ParticipantState.MEMBER, ParticipantState.LEFT)

    def is_promoted(self) -> bool:
        """True when a member or banned user became an admin."""
        return self._transition(
            ParticipantState.MEMBER, ParticipantState.ADMIN
        ) or self._transition(ParticipantState.BANNED, ParticipantState.ADMIN)

    def is_demoted(self) -> bool:
        """True when an admin became a plain member or was banned."""
        return self._transition(
            ParticipantState.ADMIN, ParticipantState.MEMBER
        ) or self._transition(ParticipantState.ADMIN, ParticipantState.BANNED)
"""Player model for the mission rule engine.

A player's record is an immutable value. Every change produces a new
PlayerState, so a GameState holding the old record never sees it change.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional

from .constants import Faction, Vote


@dataclass(frozen=True)
class PlayerState:
    """Represents one player in a match.

    Attributes:
        faction: Hidden alignment, None until the match starts.
        vote: Vote on the current mission (PENDING until cast).
        on_team: Whether the player is on the proposed mission team.
    """

    faction: Optional[Faction] = None
    vote: Vote = Vote.PENDING
    on_team: bool = False

    def has_voted(self) -> bool:
        """Check if the player has cast a vote on the current mission."""
        return self.vote != Vote.PENDING

    def is_spy(self) -> bool:
        """Check if the player belongs to the spies."""
        return self.faction == Faction.SPY

    def with_faction(self, faction: Faction) -> PlayerState:
        """Return a copy assigned to the given faction."""
        return replace(self, faction=faction)

    def with_vote(self, vote: Vote) -> PlayerState:
        """Return a copy with the given vote recorded."""
        return replace(self, vote=vote)

    def with_team(self, on_team: bool) -> PlayerState:
        """Return a copy placed on (or off) the mission team, vote reset."""
        return replace(self, on_team=on_team, vote=Vote.PENDING)

    def reset_for_new_mission(self) -> PlayerState:
        """Return a copy with per-mission flags cleared."""
        return replace(self, on_team=False, vote=Vote.PENDING)

"""Balance table lookups.

Maps a player count to the faction split and the mission sequence for a
match of that size. A count with no table entry (3, 4, below 2, above 10)
yields None so callers can report it instead of building an empty match.
"""

from __future__ import annotations

from typing import Optional

from .constants import FACTION_BALANCES, MISSION_TEAM_SIZES
from .mission import MissionSpec


def is_supported_player_count(num_players: int) -> bool:
    """Check if a match can be played with this many players."""
    return num_players in FACTION_BALANCES and num_players in MISSION_TEAM_SIZES


def faction_split(num_players: int) -> Optional[tuple[int, int]]:
    """Get the (resistance, spies) split for a player count.

    Args:
        num_players: Number of players in the match.

    Returns:
        The split, or None if the player count is not supported.
    """
    return FACTION_BALANCES.get(num_players)


def mission_specs(num_players: int) -> Optional[tuple[MissionSpec, ...]]:
    """Build the mission sequence for a player count.

    Args:
        num_players: Number of players in the match.

    Returns:
        Missions in play order, or None if the player count is not supported.
    """
    entries = MISSION_TEAM_SIZES.get(num_players)
    if entries is None:
        return None
    return tuple(MissionSpec.from_entry(entry) for entry in entries)

"""Match end detection."""

from __future__ import annotations

from typing import Optional

from core.constants import Faction, WINS_REQUIRED
from core.game_state import GameState, Score


def winning_faction(score: Score) -> Optional[Faction]:
    """Get the faction that has won WINS_REQUIRED missions, if any."""
    if score.resistance_wins >= WINS_REQUIRED:
        return Faction.RESISTANCE
    if score.spy_wins >= WINS_REQUIRED:
        return Faction.SPY
    return None


def is_match_over(score: Score, missions_remaining: int) -> bool:
    """Check if the match ends after a mission is resolved.

    A match ends once a faction reaches WINS_REQUIRED, or when no missions
    are left to play (only possible in the two-player variant, whose table
    has two missions).

    Args:
        score: Score after the latest mission.
        missions_remaining: Missions still to be played.

    Returns:
        True if the match is over.
    """
    return winning_faction(score) is not None or missions_remaining == 0


def match_winner(state: GameState) -> Optional[Faction]:
    """Get the winner of a finished match.

    When the missions ran out before either faction reached WINS_REQUIRED,
    the faction with more wins takes it.

    Returns:
        The winning faction; None while the match is running or on a tie.
    """
    if not state.is_game_over():
        return None

    winner = winning_faction(state.score)
    if winner is not None:
        return winner

    resistance = state.score.resistance_wins
    spies = state.score.spy_wins
    if resistance > spies:
        return Faction.RESISTANCE
    if spies > resistance:
        return Faction.SPY
    return None

"""Rejection reasons and the result type returned by every operation.

Operations never raise for bad input. They return an ActionResult holding
either the new state, or the untouched prior state and an ErrorKind the
host can render for the player.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from core.game_state import GameState


class ErrorKind(Enum):
    """Why an operation was rejected."""

    WRONG_PHASE = "wrong_phase"
    ALREADY_JOINED = "already_joined"
    MAX_PLAYERS = "max_players"
    NOT_ENOUGH_PLAYERS = "not_enough_players"
    UNSUPPORTED_PLAYER_COUNT = "unsupported_player_count"
    NOT_LEADER = "not_leader"
    WRONG_TEAM_SIZE = "wrong_team_size"
    INVALID_PLAYER = "invalid_player"
    INVALID_VOTE = "invalid_vote"
    ALREADY_VOTED = "already_voted"
    NOT_IN_MISSION = "not_in_mission"

    @property
    def message(self) -> str:
        """Human-readable description of the error."""
        return _MESSAGES[self]


_MESSAGES: dict[ErrorKind, str] = {
    ErrorKind.WRONG_PHASE: "That can't be done right now.",
    ErrorKind.ALREADY_JOINED: "You have already joined.",
    ErrorKind.MAX_PLAYERS: "The game is full.",
    ErrorKind.NOT_ENOUGH_PLAYERS: "Not enough players to start.",
    ErrorKind.UNSUPPORTED_PLAYER_COUNT: "The game can't be played with this many players.",
    ErrorKind.NOT_LEADER: "Only the leader can pick the team.",
    ErrorKind.WRONG_TEAM_SIZE: "That team is the wrong size for this mission.",
    ErrorKind.INVALID_PLAYER: "That player isn't in the game.",
    ErrorKind.INVALID_VOTE: "Vote either pass or fail.",
    ErrorKind.ALREADY_VOTED: "You have already voted on this mission.",
    ErrorKind.NOT_IN_MISSION: "You aren't on this mission.",
}


@dataclass(frozen=True)
class ActionResult:
    """Result of an engine operation.

    Attributes:
        state: The new state on success, the unchanged prior state otherwise.
        error: Why the operation was rejected, None on success.
    """

    state: GameState
    error: Optional[ErrorKind] = None

    @property
    def success(self) -> bool:
        return self.error is None

    @classmethod
    def ok(cls, state: GameState) -> ActionResult:
        return cls(state=state)

    @classmethod
    def rejected(cls, state: GameState, error: ErrorKind) -> ActionResult:
        return cls(state=state, error=error)

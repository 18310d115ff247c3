"""Roster management before the match starts."""

from __future__ import annotations

from loguru import logger

from core.constants import Phase, MAX_PLAYERS
from core.game_state import GameState
from core.player import PlayerState

from .errors import ErrorKind, ActionResult
from .phase_machine import check_phase, enter_phase


def join(state: GameState, player_name: str) -> ActionResult:
    """<player_name> attempts to join the match.

    Args:
        state: Current state; must be INACTIVE.
        player_name: Unique name of the joining player.

    Returns:
        ActionResult with the player appended to the roster, or one of
        WRONG_PHASE, ALREADY_JOINED, MAX_PLAYERS.
    """
    error = check_phase(state, Phase.INACTIVE)
    if error is None and state.has_player(player_name):
        error = ErrorKind.ALREADY_JOINED
    if error is None and state.num_players() >= MAX_PLAYERS:
        error = ErrorKind.MAX_PLAYERS
    if error is not None:
        logger.debug("Join by {} rejected: {}", player_name, error.value)
        return ActionResult.rejected(state, error)

    players = dict(state.players)
    players[player_name] = PlayerState()
    logger.debug("{} joined ({} players)", player_name, len(players))
    return ActionResult.ok(enter_phase(state, Phase.INACTIVE, players=players))

"""Main game engine for the mission rule engine.

Public operations (pure functions over GameState):
- join(): Add a player before the match starts
- start(): Deal factions, build the missions, pick the first leader
- pick_team(): Leader proposes the mission team
- vote(): Team member votes; the last vote resolves the mission

Each returns an ActionResult and never modifies the state it was given.
GameEngine wraps these for hosts that keep one object per session.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Any

from loguru import logger

from core.constants import Phase, Faction
from core.balance import faction_split, mission_specs
from core.game_state import GameState

from .config import EngineConfig
from .errors import ErrorKind, ActionResult
from .factions import assign_factions
from .missions import pick_team, vote
from .phase_machine import check_phase, enter_phase
from .random_source import RandomSource, NumpyRandomSource, choose
from .roster import join
from .win_condition import match_winner


def start(state: GameState, rng: Optional[RandomSource] = None) -> ActionResult:
    """Start the match with the players who have joined.

    Args:
        state: Current state; must be INACTIVE.
        rng: Random source for faction assignment and the first leader.
            Defaults to an unseeded NumpyRandomSource.

    Returns:
        ActionResult in PICK_TEAM, or one of WRONG_PHASE,
        NOT_ENOUGH_PLAYERS, UNSUPPORTED_PLAYER_COUNT.
    """
    error = check_phase(state, Phase.INACTIVE)
    if error is not None:
        return ActionResult.rejected(state, error)

    num_players = state.num_players()
    if num_players < 2:
        logger.debug("Start rejected: only {} player(s)", num_players)
        return ActionResult.rejected(state, ErrorKind.NOT_ENOUGH_PLAYERS)

    split = faction_split(num_players)
    missions = mission_specs(num_players)
    if split is None or missions is None:
        logger.debug("Start rejected: no balance table for {} players", num_players)
        return ActionResult.rejected(state, ErrorKind.UNSUPPORTED_PLAYER_COUNT)

    if rng is None:
        rng = NumpyRandomSource()

    names = state.player_names()
    factions = assign_factions(names, split, rng)
    players = {
        name: player.with_faction(factions[name])
        for name, player in state.players.items()
    }
    leader = choose(names, rng)

    logger.info(
        "Match started with {} players ({} resistance, {} spies), leader {}",
        num_players,
        split[0],
        split[1],
        leader,
    )
    return ActionResult.ok(
        enter_phase(
            state,
            Phase.PICK_TEAM,
            players=players,
            missions=missions,
            leader=leader,
        )
    )


# -----------------------------------------------------------------------------
# Queries
# -----------------------------------------------------------------------------


def awaiting_players(state: GameState) -> list[str]:
    """Get the players the match is waiting on.

    Returns:
        The leader while a team is being picked, the team members who have
        not voted while voting, and nobody otherwise.
    """
    if state.phase == Phase.PICK_TEAM:
        return [state.leader]
    if state.phase == Phase.VOTING:
        return state.pending_voters()
    return []


@dataclass(frozen=True)
class FactionReveal:
    """What a player privately learns when the match starts.

    Attributes:
        player_name: The player the reveal is for.
        faction: The player's own faction (None on error).
        known_spies: Other spies, for a spy; empty for the resistance.
        error: Why the reveal could not be made, None on success.
    """

    player_name: str
    faction: Optional[Faction] = None
    known_spies: tuple[str, ...] = ()
    error: Optional[ErrorKind] = None

    @property
    def success(self) -> bool:
        return self.error is None


def faction_reveal(state: GameState, player_name: str) -> FactionReveal:
    """Get the hidden information a player is entitled to.

    Spies know each other; resistance members only know themselves.

    Args:
        state: A state after the match has started.
        player_name: The player asking.

    Returns:
        FactionReveal, with WRONG_PHASE before the match starts or
        INVALID_PLAYER for an unknown name.
    """
    if state.phase == Phase.INACTIVE:
        return FactionReveal(player_name=player_name, error=ErrorKind.WRONG_PHASE)
    if not state.has_player(player_name):
        return FactionReveal(player_name=player_name, error=ErrorKind.INVALID_PLAYER)

    player = state.get_player(player_name)
    known_spies: tuple[str, ...] = ()
    if player.is_spy():
        known_spies = tuple(
            name
            for name, other in state.players.items()
            if other.is_spy() and name != player_name
        )
    return FactionReveal(
        player_name=player_name,
        faction=player.faction,
        known_spies=known_spies,
    )


# -----------------------------------------------------------------------------
# Stateful facade
# -----------------------------------------------------------------------------


class ActionType(Enum):
    """Commands a host can issue."""

    JOIN = "join"
    START = "start"
    PICK_TEAM = "pick_team"
    VOTE = "vote"


@dataclass
class Action:
    """Represents a command to be executed.

    Attributes:
        action_type: The type of command.
        player_name: The player issuing it (None for START).
        params: Command parameters: "team" for PICK_TEAM, "choice" for VOTE.
    """

    action_type: ActionType
    player_name: Optional[str] = None
    params: dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        return f"Action({self.action_type.value}, player={self.player_name}, params={self.params})"


class GameEngine:
    """Holds one match for a host session.

    The engine keeps the latest accepted state and the session's random
    source. Rejected commands leave the held state as it was. Commands
    must be issued one at a time per engine.

    Usage:
        engine = GameEngine(EngineConfig(seed=7))
        for name in ("ann", "bob", "cat", "dan", "eve"):
            engine.step(Action(ActionType.JOIN, name))
        engine.step(Action(ActionType.START))
    """

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        rng: Optional[RandomSource] = None,
    ):
        """Initialize the game engine.

        Args:
            config: Engine settings; its seed is used when rng is not given.
            rng: Random source to use instead of a seeded NumpyRandomSource.
        """
        self.config = config if config is not None else EngineConfig()
        self._rng = rng if rng is not None else NumpyRandomSource(self.config.seed)
        self._state = GameState.initial()

    @property
    def state(self) -> GameState:
        """Get the current game state."""
        return self._state

    @property
    def phase(self) -> Phase:
        """Get the current match phase."""
        return self._state.phase

    def reset(self) -> GameState:
        """Discard the current match and return to the initial state."""
        self._state = GameState.initial()
        return self._state

    def is_game_over(self) -> bool:
        """Check if the match has ended."""
        return self._state.is_game_over()

    def winner(self) -> Optional[Faction]:
        """Get the winning faction of a finished match."""
        return match_winner(self._state)

    def step(self, action: Action) -> ActionResult:
        """Execute a command against the current state.

        Args:
            action: The command to execute.

        Returns:
            The ActionResult; on success its state becomes the held state.
            A command without a player is rejected with INVALID_PLAYER; a
            missing team or choice is rejected by the operation itself
            (WRONG_TEAM_SIZE, INVALID_VOTE).

        Raises:
            ValueError: If the action type is not an ActionType.
        """
        if action.action_type != ActionType.START and action.player_name is None:
            result = ActionResult.rejected(self._state, ErrorKind.INVALID_PLAYER)
        elif action.action_type == ActionType.JOIN:
            result = join(self._state, action.player_name)
        elif action.action_type == ActionType.START:
            result = start(self._state, self._rng)
        elif action.action_type == ActionType.PICK_TEAM:
            result = pick_team(
                self._state, action.player_name, action.params.get("team", ())
            )
        elif action.action_type == ActionType.VOTE:
            result = vote(self._state, action.player_name, action.params.get("choice"))
        else:
            raise ValueError(f"Unknown action type: {action.action_type}")

        if result.success:
            self._state = result.state
        else:
            logger.debug("{} rejected: {}", action, result.error.value)
        return result

    def __str__(self) -> str:
        """Return string representation of the engine."""
        return f"GameEngine(phase={self.phase.value}, mission={self._state.mission_number()})"

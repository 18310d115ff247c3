"""Game engine for the mission rule engine.

This module provides the game logic including:
- Phase state machine for match flow control
- Roster management, faction assignment and match start
- Team proposal, voting and mission resolution
- Match end detection
"""

from loguru import logger

from .errors import ErrorKind, ActionResult

from .random_source import RandomSource, NumpyRandomSource, shuffled, choose

from .phase_machine import (
    PhaseTransitionResult,
    PHASE_TRANSITIONS,
    check_phase,
    can_transition,
    validate_transition,
)

from .factions import assign_factions

from .roster import join

from .missions import pick_team, vote, parse_vote, resolve_mission

from .win_condition import winning_faction, is_match_over, match_winner

from .config import EngineConfig, configure_logging

from .game_engine import (
    start,
    awaiting_players,
    faction_reveal,
    FactionReveal,
    GameEngine,
    Action,
    ActionType,
)

# Silent until a host calls configure_logging()
logger.disable("engine")

__all__ = [
    # Errors
    "ErrorKind",
    "ActionResult",
    # Randomness
    "RandomSource",
    "NumpyRandomSource",
    "shuffled",
    "choose",
    # Phase machine
    "PhaseTransitionResult",
    "PHASE_TRANSITIONS",
    "check_phase",
    "can_transition",
    "validate_transition",
    # Operations
    "assign_factions",
    "join",
    "start",
    "pick_team",
    "vote",
    "parse_vote",
    "resolve_mission",
    # Win conditions
    "winning_faction",
    "is_match_over",
    "match_winner",
    # Queries
    "awaiting_players",
    "faction_reveal",
    "FactionReveal",
    # Config
    "EngineConfig",
    "configure_logging",
    # Game engine
    "GameEngine",
    "Action",
    "ActionType",
]

"""Core data models for the mission rule engine."""

from .constants import (
    Phase,
    Faction,
    Vote,
    MissionResult,
    MIN_PLAYERS,
    MAX_PLAYERS,
    WINS_REQUIRED,
    DEFAULT_FAIL_THRESHOLD,
    FACTION_BALANCES,
    MISSION_TEAM_SIZES,
    SUPPORTED_PLAYER_COUNTS,
)

from .player import PlayerState

from .mission import MissionSpec, MissionRecord

from .balance import is_supported_player_count, faction_split, mission_specs

from .game_state import Score, GameState

__all__ = [
    # Constants
    "Phase",
    "Faction",
    "Vote",
    "MissionResult",
    "MIN_PLAYERS",
    "MAX_PLAYERS",
    "WINS_REQUIRED",
    "DEFAULT_FAIL_THRESHOLD",
    "FACTION_BALANCES",
    "MISSION_TEAM_SIZES",
    "SUPPORTED_PLAYER_COUNTS",
    # Player
    "PlayerState",
    # Missions
    "MissionSpec",
    "MissionRecord",
    # Balance tables
    "is_supported_player_count",
    "faction_split",
    "mission_specs",
    # Game State
    "Score",
    "GameState",
]

"""Constants and enums for the mission rule engine."""

from enum import Enum
from typing import Union


class Phase(Enum):
    """Match phases.

    Mission resolution happens inside the final vote of a mission and is
    never a phase of its own.
    """

    INACTIVE = "inactive"  # Players are joining
    PICK_TEAM = "pick_team"  # Leader is proposing a team
    VOTING = "voting"  # Team members are voting
    GAME_OVER = "game_over"


class Faction(Enum):
    """Hidden player alignment."""

    RESISTANCE = "resistance"
    SPY = "spy"


class Vote(Enum):
    """A team member's vote on the current mission."""

    PENDING = "pending"
    PASS = "pass"
    FAIL = "fail"


class MissionResult(Enum):
    """Outcome of a mission."""

    PENDING = "pending"
    SUCCESS = "success"
    FAIL = "fail"


# Player limits
MIN_PLAYERS = 2
MAX_PLAYERS = 10

# First faction to this many mission wins takes the match
WINS_REQUIRED = 3

# Failing votes needed when a mission entry does not say otherwise
DEFAULT_FAIL_THRESHOLD = 1

# Split of (resistance, spies) per player count
FACTION_BALANCES: dict[int, tuple[int, int]] = {
    2: (2, 0),
    5: (3, 2),
    6: (4, 2),
    7: (4, 3),
    8: (5, 3),
    9: (6, 3),
    10: (6, 4),
}

# Mission team sizes per player count. A bare number needs the default
# number of failing votes; a (team_size, fail_threshold) pair overrides it.
MissionEntry = Union[int, tuple[int, int]]

MISSION_TEAM_SIZES: dict[int, tuple[MissionEntry, ...]] = {
    2: (2, 2),
    5: (2, 3, 2, 3, 3),
    6: (2, 3, 4, 3, 4),
    7: (2, 3, 3, (4, 2), 4),
    8: (3, 4, 4, (5, 2), 5),
    9: (3, 4, 4, (5, 2), 5),
    10: (3, 4, 4, (5, 2), 5),
}

SUPPORTED_PLAYER_COUNTS: tuple[int, ...] = tuple(sorted(FACTION_BALANCES))

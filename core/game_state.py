"""Game state for the mission rule engine.

GameState is the single source of truth for a match. It is an immutable
value: every engine operation returns a new GameState and leaves the one
it was given untouched, so any state can be kept and compared by value.
States are not hashable with hash(); use state_hash() for a content key.
"""

from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass, field, replace
from typing import Optional, Any

from .constants import (
    Phase,
    Faction,
    Vote,
    MissionResult,
    WINS_REQUIRED,
)
from .balance import faction_split, mission_specs, is_supported_player_count
from .mission import MissionSpec, MissionRecord
from .player import PlayerState


@dataclass(frozen=True)
class Score:
    """Mission wins per faction.

    Attributes:
        resistance_wins: Missions that succeeded.
        spy_wins: Missions that failed.
    """

    resistance_wins: int = 0
    spy_wins: int = 0

    def record(self, result: MissionResult) -> Score:
        """Return a copy with the mission result counted.

        Raises:
            ValueError: If the result is still PENDING.
        """
        if result == MissionResult.SUCCESS:
            return replace(self, resistance_wins=self.resistance_wins + 1)
        if result == MissionResult.FAIL:
            return replace(self, spy_wins=self.spy_wins + 1)
        raise ValueError("Cannot score a pending mission")

    def wins_for(self, faction: Faction) -> int:
        """Get the number of missions won by a faction."""
        if faction == Faction.RESISTANCE:
            return self.resistance_wins
        return self.spy_wins


@dataclass(frozen=True)
class GameState:
    """The complete match state.

    The players dict is never mutated once the state is built; operations
    copy it. Its insertion order is the join order, which is also the
    order the leader role rotates in.

    Attributes:
        phase: Current match phase.
        players: Player records keyed by unique player name.
        missions: Missions still to be played; index 0 is the current one.
        leader: Name of the player proposing the team, if any.
        current_team: Names on the proposed team (empty outside VOTING).
        score: Mission wins per faction.
        history: Resolved missions in the order they were played.
    """

    phase: Phase = Phase.INACTIVE
    players: dict[str, PlayerState] = field(default_factory=dict)
    missions: tuple[MissionSpec, ...] = ()
    leader: Optional[str] = None
    current_team: frozenset[str] = frozenset()
    score: Score = field(default_factory=Score)
    history: tuple[MissionRecord, ...] = ()

    @classmethod
    def initial(cls) -> GameState:
        """Create the state a match begins in: inactive, nobody joined."""
        return cls()

    # -------------------------------------------------------------------------
    # Player access methods
    # -------------------------------------------------------------------------

    def num_players(self) -> int:
        """Return the number of players."""
        return len(self.players)

    def player_names(self) -> list[str]:
        """Return player names in join order."""
        return list(self.players)

    def has_player(self, name: str) -> bool:
        """Check if a player with this name has joined."""
        return name in self.players

    def get_player(self, name: str) -> PlayerState:
        """Get a player by name.

        Raises:
            KeyError: If no such player has joined.
        """
        if name not in self.players:
            raise KeyError(f"Unknown player: {name}")
        return self.players[name]

    def is_leader(self, name: str) -> bool:
        """Check if the named player is the current leader."""
        return self.leader is not None and self.leader == name

    def next_leader(self) -> Optional[str]:
        """Get the player after the current leader in join order (wrapping)."""
        names = self.player_names()
        if self.leader is None or self.leader not in self.players:
            return None
        idx = names.index(self.leader)
        return names[(idx + 1) % len(names)]

    def faction_counts(self) -> dict[Faction, int]:
        """Count assigned players per faction."""
        counts = {faction: 0 for faction in Faction}
        for player in self.players.values():
            if player.faction is not None:
                counts[player.faction] += 1
        return counts

    def team_members(self) -> list[str]:
        """Return names on the current team, in join order."""
        return [name for name in self.players if name in self.current_team]

    def pending_voters(self) -> list[str]:
        """Return team members who have not voted yet, in join order."""
        return [
            name
            for name in self.team_members()
            if not self.players[name].has_voted()
        ]

    # -------------------------------------------------------------------------
    # Mission access
    # -------------------------------------------------------------------------

    def current_mission(self) -> Optional[MissionSpec]:
        """Get the mission being played, or None if none remain."""
        return self.missions[0] if self.missions else None

    def mission_number(self) -> int:
        """Get the 1-indexed number of the current mission.

        Once the match is over this is the number of the last mission
        played.
        """
        if self.phase == Phase.GAME_OVER:
            return len(self.history)
        return len(self.history) + 1

    def is_game_over(self) -> bool:
        """Check if the match has ended."""
        return self.phase == Phase.GAME_OVER

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        """Serialize the game state to a dictionary.

        Player order is preserved as list order.

        Returns:
            Dictionary representation of the game state.
        """
        return {
            "phase": self.phase.value,
            "players": [
                {
                    "name": name,
                    "faction": p.faction.value if p.faction else None,
                    "vote": p.vote.value,
                    "on_team": p.on_team,
                }
                for name, p in self.players.items()
            ],
            "missions": [
                {
                    "team_size": m.team_size,
                    "fail_threshold": m.fail_threshold,
                    "result": m.result.value,
                }
                for m in self.missions
            ],
            "leader": self.leader,
            "current_team": sorted(self.current_team),
            "score": {
                "resistance": self.score.resistance_wins,
                "spies": self.score.spy_wins,
            },
            "history": [
                {
                    "team_size": r.mission.team_size,
                    "fail_threshold": r.mission.fail_threshold,
                    "result": r.mission.result.value,
                    "team": sorted(r.team),
                    "fail_count": r.fail_count,
                }
                for r in self.history
            ],
        }

    def state_hash(self) -> str:
        """Compute a hash of the game state.

        Two states with the same content hash the same regardless of how
        they were reached.

        Returns:
            A hex string hash of the serialized state.
        """
        state_json = json.dumps(self.to_dict(), sort_keys=True)
        return hashlib.sha256(state_json.encode()).hexdigest()

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    def validate(self) -> list[str]:
        """Validate the game state for consistency.

        Returns:
            List of validation error messages (empty if valid).
        """
        errors: list[str] = []
        num_players = self.num_players()

        if self.phase == Phase.INACTIVE:
            if self.missions or self.history:
                errors.append("Missions present before the match started")
            if self.leader is not None:
                errors.append(f"Leader {self.leader} set before the match started")
            return errors

        # Player count is frozen once the match starts
        if not is_supported_player_count(num_players):
            errors.append(f"Unsupported player count: {num_players}")
            return errors

        # Faction split must match the balance table
        resistance, spies = faction_split(num_players)
        counts = self.faction_counts()
        if counts[Faction.RESISTANCE] != resistance or counts[Faction.SPY] != spies:
            errors.append(
                f"Faction split {counts[Faction.RESISTANCE]}/{counts[Faction.SPY]} "
                f"does not match {resistance}/{spies} for {num_players} players"
            )

        # Missions are only ever consumed from the front
        expected = mission_specs(num_players)
        played = tuple(
            replace(r.mission, result=MissionResult.PENDING) for r in self.history
        )
        if played + self.missions != expected:
            errors.append("Mission sequence does not match the balance table")

        if self.phase in (Phase.PICK_TEAM, Phase.VOTING):
            if self.leader not in self.players:
                errors.append(f"Leader {self.leader!r} is not a player")
            if not self.missions:
                errors.append(f"No mission left in phase {self.phase.value}")

        if self.phase == Phase.VOTING and self.missions:
            if len(self.current_team) != self.missions[0].team_size:
                errors.append(
                    f"Team of {len(self.current_team)} for a mission needing "
                    f"{self.missions[0].team_size}"
                )
            for name in self.current_team:
                if name not in self.players:
                    errors.append(f"Team member {name} is not a player")
        elif self.current_team:
            errors.append(f"Team set outside voting: {sorted(self.current_team)}")

        for name, player in self.players.items():
            if player.on_team != (name in self.current_team):
                errors.append(f"Player {name} on_team flag does not match the team")
            if player.has_voted() and not player.on_team:
                errors.append(f"Player {name} voted without being on the team")

        for value in (self.score.resistance_wins, self.score.spy_wins):
            if not 0 <= value <= WINS_REQUIRED:
                errors.append(f"Score out of range: {value}")

        return errors

    # -------------------------------------------------------------------------
    # String representation
    # -------------------------------------------------------------------------

    def __str__(self) -> str:
        """Return a human-readable string representation."""
        lines = [
            f"GameState(phase={self.phase.value}, mission={self.mission_number()})",
            f"  Score: resistance={self.score.resistance_wins}, "
            f"spies={self.score.spy_wins}",
            f"  Leader: {self.leader}",
            f"  Missions remaining: {len(self.missions)}",
            f"  Players ({self.num_players()}):",
        ]
        for name, p in self.players.items():
            team = "TEAM" if p.on_team else "----"
            vote = p.vote.value if p.vote != Vote.PENDING else "-"
            lines.append(f"    {name}: [{team}] vote={vote}")
        return "\n".join(lines)

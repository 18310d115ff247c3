"""Mission models for the mission rule engine.

A MissionSpec describes one mission of a match: how many players go on it
and how many failing votes sink it. Once resolved, the spec is kept in a
MissionRecord together with the team that attempted it.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from .constants import MissionResult, DEFAULT_FAIL_THRESHOLD, MissionEntry


@dataclass(frozen=True)
class MissionSpec:
    """Represents a single mission.

    Attributes:
        team_size: Number of players that must go on the mission.
        fail_threshold: Minimum number of FAIL votes that fails the mission.
        result: Outcome, PENDING until the mission is resolved.
    """

    team_size: int
    fail_threshold: int = DEFAULT_FAIL_THRESHOLD
    result: MissionResult = MissionResult.PENDING

    @classmethod
    def from_entry(cls, entry: MissionEntry) -> MissionSpec:
        """Expand a mission table entry.

        Args:
            entry: Either a team size, or a (team_size, fail_threshold) pair.

        Returns:
            The expanded MissionSpec.

        Raises:
            TypeError: If the entry is neither an int nor a pair.
        """
        if isinstance(entry, int):
            return cls(team_size=entry)
        if isinstance(entry, tuple) and len(entry) == 2:
            team_size, fail_threshold = entry
            return cls(team_size=team_size, fail_threshold=fail_threshold)
        raise TypeError(f"Invalid mission table entry: {entry!r}")

    def is_resolved(self) -> bool:
        """Check if the mission has an outcome."""
        return self.result != MissionResult.PENDING

    def resolve(self, fail_count: int) -> MissionSpec:
        """Return a copy marked with the outcome for the given fail count."""
        failed = fail_count >= self.fail_threshold
        return replace(
            self,
            result=MissionResult.FAIL if failed else MissionResult.SUCCESS,
        )


@dataclass(frozen=True)
class MissionRecord:
    """A resolved mission.

    Attributes:
        mission: The mission spec with its result marked.
        team: Names of the players who went on the mission.
        fail_count: Number of FAIL votes cast by the team.
    """

    mission: MissionSpec
    team: frozenset[str]
    fail_count: int

    @property
    def succeeded(self) -> bool:
        return self.mission.result == MissionResult.SUCCESS

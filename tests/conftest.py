"""Shared helpers for engine tests."""

from typing import Optional, Sequence

import pytest

from core.game_state import GameState
from engine.game_engine import start
from engine.missions import pick_team, vote
from engine.roster import join


FIVE_NAMES = ["ann", "bob", "cat", "dan", "eve"]


class ScriptedRandomSource:
    """RandomSource that replays a fixed list of values (cycling)."""

    def __init__(self, values: Sequence[int]):
        self._values = list(values)
        self._pos = 0
        self.calls: list[int] = []

    def next_index(self, upper: int) -> int:
        self.calls.append(upper)
        value = self._values[self._pos % len(self._values)]
        self._pos += 1
        return value % upper


def joined_state(names: Sequence[str]) -> GameState:
    """Build an INACTIVE state with the given players joined in order."""
    state = GameState.initial()
    for name in names:
        result = join(state, name)
        assert result.success, result.error
        state = result.state
    return state


def started_state(names: Sequence[str], rng=None) -> GameState:
    """Build a PICK_TEAM state for the given players."""
    if rng is None:
        rng = ScriptedRandomSource([0])
    result = start(joined_state(names), rng)
    assert result.success, result.error
    return result.state


def proposed_state(state: GameState, team: Optional[Sequence[str]] = None) -> GameState:
    """Have the leader propose a team (first names in join order by default)."""
    if team is None:
        team = state.player_names()[: state.current_mission().team_size]
    result = pick_team(state, state.leader, team)
    assert result.success, result.error
    return result.state


def play_mission(state: GameState, fails: int = 0) -> GameState:
    """Propose a team and have it vote, with the first <fails> members failing."""
    state = proposed_state(state)
    for i, name in enumerate(state.team_members()):
        result = vote(state, name, "fail" if i < fails else "pass")
        assert result.success, result.error
        state = result.state
    return state


@pytest.fixture
def five_player_game() -> GameState:
    """A five-player match in PICK_TEAM, led by the first player to join."""
    return started_state(FIVE_NAMES, ScriptedRandomSource([0]))

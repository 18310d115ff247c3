"""Tests for the public operations and the GameEngine facade.

Tests cover:
1. Roster management (join)
2. Match start
3. Queries (awaiting players, faction reveal)
4. A complete match through the public operations
5. GameEngine step/reset
6. Configuration and logging
"""

from collections import Counter

import pytest
from loguru import logger

from core.constants import Phase, Faction, Vote, MAX_PLAYERS
from core.game_state import GameState, Score
from core.player import PlayerState
from engine import (
    join,
    start,
    pick_team,
    vote,
    awaiting_players,
    faction_reveal,
    ErrorKind,
    GameEngine,
    Action,
    ActionType,
    EngineConfig,
    NumpyRandomSource,
    configure_logging,
)

from conftest import (
    FIVE_NAMES,
    ScriptedRandomSource,
    joined_state,
    started_state,
    proposed_state,
    play_mission,
)


# =============================================================================
# Join Tests
# =============================================================================


class TestJoin:
    """Test roster management."""

    def test_join_adds_player(self):
        state = GameState.initial()
        result = join(state, "ann")

        assert result.success
        assert result.error is None
        assert result.state.phase == Phase.INACTIVE
        assert result.state.players == {"ann": PlayerState()}
        assert state.players == {}

    def test_join_adds_exactly_one(self):
        state = joined_state(FIVE_NAMES[:3])
        result = join(state, "dan")
        assert result.state.num_players() == 4
        assert result.state.player_names() == ["ann", "bob", "cat", "dan"]

    def test_already_joined(self):
        state = joined_state(["ann"])
        result = join(state, "ann")
        assert result.error == ErrorKind.ALREADY_JOINED
        assert result.state is state

    def test_already_joined_is_repeatable(self):
        state = joined_state(["ann"])
        first = join(state, "ann")
        second = join(first.state, "ann")
        assert second.error == ErrorKind.ALREADY_JOINED
        assert second.state is state

    def test_max_players(self):
        state = joined_state([f"p{i}" for i in range(MAX_PLAYERS)])
        result = join(state, "late")
        assert result.error == ErrorKind.MAX_PLAYERS
        assert result.state is state

    def test_wrong_phase(self, five_player_game: GameState):
        result = join(five_player_game, "zed")
        assert result.error == ErrorKind.WRONG_PHASE
        assert result.state is five_player_game


# =============================================================================
# Start Tests
# =============================================================================


class TestStart:
    """Test match start."""

    def test_five_players(self):
        state = joined_state(FIVE_NAMES)
        result = start(state, NumpyRandomSource(seed=5))

        assert result.success
        started = result.state
        assert started.phase == Phase.PICK_TEAM
        assert [m.team_size for m in started.missions] == [2, 3, 2, 3, 3]
        assert [m.fail_threshold for m in started.missions] == [1, 1, 1, 1, 1]
        assert started.faction_counts() == {Faction.RESISTANCE: 3, Faction.SPY: 2}
        assert started.leader in started.players
        assert started.player_names() == FIVE_NAMES
        assert started.validate() == []

        # Original roster untouched
        assert all(p.faction is None for p in state.players.values())
        assert state.phase == Phase.INACTIVE

    @pytest.mark.parametrize("names", [[], ["ann"]])
    def test_not_enough_players(self, names):
        state = joined_state(names)
        result = start(state, ScriptedRandomSource([0]))
        assert result.error == ErrorKind.NOT_ENOUGH_PLAYERS
        assert result.state is state

    @pytest.mark.parametrize("count", [3, 4])
    def test_unsupported_player_count(self, count: int):
        state = joined_state(FIVE_NAMES[:count])
        rng = ScriptedRandomSource([0])
        result = start(state, rng)
        assert result.error == ErrorKind.UNSUPPORTED_PLAYER_COUNT
        assert result.state is state
        assert rng.calls == []

    def test_wrong_phase(self, five_player_game: GameState):
        result = start(five_player_game, ScriptedRandomSource([0]))
        assert result.error == ErrorKind.WRONG_PHASE
        assert result.state is five_player_game

    def test_leader_drawn_after_factions(self):
        rng = ScriptedRandomSource([0, 0, 0, 0, 3])
        state = start(joined_state(FIVE_NAMES), rng).state
        assert state.leader == "dan"
        assert rng.calls == [5, 4, 3, 2, 5]

    def test_default_random_source(self):
        result = start(joined_state(FIVE_NAMES))
        assert result.success
        assert result.state.leader in FIVE_NAMES

    def test_leader_uniform(self):
        rng = NumpyRandomSource(seed=99)
        state = joined_state(FIVE_NAMES)
        leaders = Counter(start(state, rng).state.leader for _ in range(3000))
        assert set(leaders) == set(FIVE_NAMES)
        for count in leaders.values():
            assert abs(count - 600) < 120


# =============================================================================
# Query Tests
# =============================================================================


class TestQueries:
    """Test awaiting_players and faction_reveal."""

    def test_awaiting_inactive(self):
        assert awaiting_players(joined_state(FIVE_NAMES)) == []

    def test_awaiting_leader(self, five_player_game: GameState):
        assert awaiting_players(five_player_game) == ["ann"]

    def test_awaiting_voters(self, five_player_game: GameState):
        voting = proposed_state(five_player_game, ["bob", "eve"])
        assert awaiting_players(voting) == ["bob", "eve"]
        voting = vote(voting, "eve", "pass").state
        assert awaiting_players(voting) == ["bob"]

    def test_reveal_spy_sees_other_spies(self, five_player_game: GameState):
        reveal = faction_reveal(five_player_game, "cat")
        assert reveal.success
        assert reveal.faction == Faction.SPY
        assert reveal.known_spies == ("dan",)

    def test_reveal_resistance_sees_nothing(self, five_player_game: GameState):
        reveal = faction_reveal(five_player_game, "ann")
        assert reveal.faction == Faction.RESISTANCE
        assert reveal.known_spies == ()

    def test_reveal_before_start(self):
        reveal = faction_reveal(joined_state(FIVE_NAMES), "ann")
        assert reveal.error == ErrorKind.WRONG_PHASE
        assert not reveal.success

    def test_reveal_unknown_player(self, five_player_game: GameState):
        assert faction_reveal(five_player_game, "zed").error == ErrorKind.INVALID_PLAYER


# =============================================================================
# Integration Tests
# =============================================================================


class TestFullMatch:
    """Play through the public operations."""

    def test_first_mission_end_to_end(self):
        state = GameState.initial()
        for name in FIVE_NAMES:
            state = join(state, name).state

        state = start(state, NumpyRandomSource(seed=11)).state
        first_leader = state.leader
        team = [n for n in FIVE_NAMES if n != first_leader][:2]

        state = pick_team(state, first_leader, team).state
        assert state.phase == Phase.VOTING
        assert state.current_team == frozenset(team)

        for name in team:
            state = vote(state, name, Vote.PASS).state

        assert state.phase == Phase.PICK_TEAM
        assert state.score.resistance_wins == 1
        assert len(state.missions) == 4
        idx = FIVE_NAMES.index(first_leader)
        assert state.leader == FIVE_NAMES[(idx + 1) % len(FIVE_NAMES)]
        assert state.validate() == []

    def test_every_state_valid_through_a_match(self, five_player_game: GameState):
        state = five_player_game
        for fails in (1, 0, 1, 0, 2):
            state = proposed_state(state)
            assert state.validate() == []
            for i, name in enumerate(state.team_members()):
                state = vote(state, name, "fail" if i < fails else "pass").state
                assert state.validate() == []
        assert state.phase == Phase.GAME_OVER
        assert state.score == Score(resistance_wins=2, spy_wins=3)

    def test_rejected_operations_never_change_state(self, five_player_game: GameState):
        voting = proposed_state(five_player_game, ["ann", "bob"])
        snapshot = voting.state_hash()
        attempts = [
            join(voting, "zed"),
            start(voting, ScriptedRandomSource([0])),
            pick_team(voting, "ann", ["ann", "bob"]),
            vote(voting, "eve", "pass"),
            vote(voting, "ann", "abstain"),
        ]
        for result in attempts:
            assert not result.success
            assert result.state is voting
        assert voting.state_hash() == snapshot


# =============================================================================
# GameEngine Tests
# =============================================================================


def _join_all(engine: GameEngine, names=FIVE_NAMES) -> None:
    for name in names:
        assert engine.step(Action(ActionType.JOIN, name)).success


class TestGameEngine:
    """Test the stateful facade."""

    def test_initial(self):
        engine = GameEngine()
        assert engine.state == GameState.initial()
        assert engine.phase == Phase.INACTIVE
        assert not engine.is_game_over()

    def test_seeded_engines_agree(self):
        a = GameEngine(EngineConfig(seed=7))
        b = GameEngine(EngineConfig(seed=7))
        for engine in (a, b):
            _join_all(engine)
            engine.step(Action(ActionType.START))
        assert a.state == b.state
        assert a.state.state_hash() == b.state.state_hash()

    def test_injected_random_source(self):
        engine = GameEngine(rng=ScriptedRandomSource([0]))
        _join_all(engine)
        engine.step(Action(ActionType.START))
        assert engine.state.leader == "ann"

    def test_rejected_step_keeps_state(self):
        engine = GameEngine()
        _join_all(engine, ["ann"])
        held = engine.state
        result = engine.step(Action(ActionType.JOIN, "ann"))
        assert result.error == ErrorKind.ALREADY_JOINED
        assert engine.state is held

    def test_play_to_game_over(self):
        engine = GameEngine(rng=ScriptedRandomSource([0]))
        _join_all(engine)
        engine.step(Action(ActionType.START))

        while not engine.is_game_over():
            state = engine.state
            team = state.player_names()[: state.current_mission().team_size]
            result = engine.step(
                Action(ActionType.PICK_TEAM, state.leader, {"team": team})
            )
            assert result.success
            for name in team:
                assert engine.step(
                    Action(ActionType.VOTE, name, {"choice": "fail"})
                ).success

        assert engine.phase == Phase.GAME_OVER
        assert engine.winner() == Faction.SPY
        assert engine.state.score == Score(resistance_wins=0, spy_wins=3)

    @pytest.mark.parametrize(
        "action_type", [ActionType.JOIN, ActionType.PICK_TEAM, ActionType.VOTE]
    )
    def test_missing_player_name_rejected(self, action_type: ActionType):
        engine = GameEngine()
        held = engine.state
        result = engine.step(Action(action_type))
        assert result.error == ErrorKind.INVALID_PLAYER
        assert result.state is held
        assert engine.state is held

    def test_missing_team_rejected(self):
        engine = GameEngine(rng=ScriptedRandomSource([0]))
        _join_all(engine)
        engine.step(Action(ActionType.START))
        held = engine.state

        result = engine.step(Action(ActionType.PICK_TEAM, held.leader))
        assert result.error == ErrorKind.WRONG_TEAM_SIZE
        assert engine.state is held

    def test_missing_choice_rejected(self):
        engine = GameEngine(rng=ScriptedRandomSource([0]))
        _join_all(engine)
        engine.step(Action(ActionType.START))
        engine.step(Action(ActionType.PICK_TEAM, "ann", {"team": ["ann", "bob"]}))
        held = engine.state

        result = engine.step(Action(ActionType.VOTE, "ann"))
        assert result.error == ErrorKind.INVALID_VOTE
        assert engine.state is held
        assert held.get_player("ann").vote == Vote.PENDING

    def test_str_after_game_over(self):
        engine = GameEngine(rng=ScriptedRandomSource([0]))
        _join_all(engine)
        engine.step(Action(ActionType.START))
        while not engine.is_game_over():
            state = engine.state
            team = state.player_names()[: state.current_mission().team_size]
            engine.step(Action(ActionType.PICK_TEAM, state.leader, {"team": team}))
            for name in team:
                engine.step(Action(ActionType.VOTE, name, {"choice": "pass"}))
        assert str(engine) == "GameEngine(phase=game_over, mission=3)"

    def test_reset(self):
        engine = GameEngine()
        _join_all(engine)
        assert engine.reset() == GameState.initial()
        assert engine.state.num_players() == 0

    def test_str(self):
        assert str(GameEngine()) == "GameEngine(phase=inactive, mission=1)"
        assert "join" in str(Action(ActionType.JOIN, "ann"))


# =============================================================================
# Configuration Tests
# =============================================================================


class TestEngineConfig:
    """Test configuration loading and logging setup."""

    def test_defaults(self):
        config = EngineConfig()
        assert config.seed is None
        assert config.log_level == "INFO"

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("VOVERI_SEED", "21")
        monkeypatch.setenv("VOVERI_LOG_LEVEL", "debug")
        config = EngineConfig.from_env()
        assert config == EngineConfig(seed=21, log_level="DEBUG")

    def test_from_env_unset(self, monkeypatch):
        monkeypatch.delenv("VOVERI_SEED", raising=False)
        monkeypatch.delenv("VOVERI_LOG_LEVEL", raising=False)
        assert EngineConfig.from_env() == EngineConfig()

    def test_from_env_bad_seed(self, monkeypatch):
        monkeypatch.setenv("VOVERI_SEED", "seven")
        with pytest.raises(ValueError):
            EngineConfig.from_env()

    def test_configure_logging(self):
        messages: list[str] = []
        handler_id = configure_logging(EngineConfig(log_level="DEBUG"), sink=messages.append)
        try:
            started_state(FIVE_NAMES)
        finally:
            logger.remove(handler_id)
            logger.disable("engine")

        assert any("ann joined" in m for m in messages)
        assert any("Match started with 5 players" in m for m in messages)

    def test_info_level_hides_debug(self):
        messages: list[str] = []
        handler_id = configure_logging(EngineConfig(log_level="INFO"), sink=messages.append)
        try:
            play_mission(started_state(FIVE_NAMES))
        finally:
            logger.remove(handler_id)
            logger.disable("engine")

        assert not any("joined" in m for m in messages)
        assert any("Mission 1 success" in m for m in messages)

    def test_below_level_never_reaches_stderr(self, capfd):
        handler_id = configure_logging(EngineConfig(log_level="WARNING"))
        try:
            play_mission(started_state(FIVE_NAMES))
        finally:
            logger.remove(handler_id)
            logger.disable("engine")

        err = capfd.readouterr().err
        assert "joined" not in err
        assert "Match started" not in err
        assert "Mission 1" not in err

    def test_replaces_earlier_handlers(self):
        first: list[str] = []
        second: list[str] = []
        configure_logging(EngineConfig(log_level="DEBUG"), sink=first.append)
        handler_id = configure_logging(EngineConfig(log_level="WARNING"), sink=second.append)
        try:
            join(GameState.initial(), "ann")
        finally:
            logger.remove(handler_id)
            logger.disable("engine")

        assert first == []
        assert second == []

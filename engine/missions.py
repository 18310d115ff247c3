"""Team proposal, voting and mission resolution.

The leader proposes a team sized for the current mission; each team
member then votes pass or fail. The vote that completes the team's
ballot resolves the mission in the same step:

1. Count FAIL votes among team members.
2. The mission fails when that count reaches its fail threshold.
3. The score of the winning faction goes up by one.
4. The resolved mission moves from the mission queue into the history.
5. If the match is over, the phase becomes GAME_OVER.
6. Otherwise the leader role passes to the next player in join order
   and the match goes back to PICK_TEAM.
"""

from __future__ import annotations

from typing import Iterable, Optional, Union

from loguru import logger

from core.constants import Phase, Vote
from core.game_state import GameState
from core.mission import MissionRecord

from .errors import ErrorKind, ActionResult
from .phase_machine import check_phase, enter_phase
from .win_condition import is_match_over, match_winner


_VOTE_NAMES = {"pass": Vote.PASS, "fail": Vote.FAIL}


def parse_vote(choice: Union[Vote, str]) -> Optional[Vote]:
    """Interpret a vote choice.

    Args:
        choice: A Vote, or the strings "pass" / "fail" in any case.

    Returns:
        Vote.PASS or Vote.FAIL, or None if the choice is not a valid vote.
    """
    if isinstance(choice, Vote):
        return choice if choice != Vote.PENDING else None
    if isinstance(choice, str):
        return _VOTE_NAMES.get(choice.strip().lower())
    return None


# -----------------------------------------------------------------------------
# Team proposal
# -----------------------------------------------------------------------------


def pick_team(
    state: GameState,
    player_name: str,
    team: Iterable[str],
) -> ActionResult:
    """Player <player_name> attempts to choose <team> for the current mission.

    Args:
        state: Current state; must be PICK_TEAM.
        player_name: The player proposing the team.
        team: Names of the proposed team members. Repeated names count
            as a wrongly sized team.

    Returns:
        ActionResult in VOTING with the team set, or one of WRONG_PHASE,
        NOT_LEADER, WRONG_TEAM_SIZE, INVALID_PLAYER.
    """
    error = check_phase(state, Phase.PICK_TEAM)
    if error is not None:
        return ActionResult.rejected(state, error)

    if not state.is_leader(player_name):
        logger.debug("{} tried to pick a team but {} leads", player_name, state.leader)
        return ActionResult.rejected(state, ErrorKind.NOT_LEADER)

    names = [team] if isinstance(team, str) else list(team)
    members = frozenset(names)
    mission = state.current_mission()
    if len(members) != len(names) or len(members) != mission.team_size:
        logger.debug(
            "Team {} rejected: mission {} needs {} players",
            names,
            state.mission_number(),
            mission.team_size,
        )
        return ActionResult.rejected(state, ErrorKind.WRONG_TEAM_SIZE)

    unknown = [name for name in names if not state.has_player(name)]
    if unknown:
        logger.debug("Team rejected: unknown players {}", unknown)
        return ActionResult.rejected(state, ErrorKind.INVALID_PLAYER)

    players = {
        name: player.with_team(name in members)
        for name, player in state.players.items()
    }
    logger.debug("{} picked {} for mission {}", player_name, sorted(members), state.mission_number())
    return ActionResult.ok(
        enter_phase(state, Phase.VOTING, players=players, current_team=members)
    )


# -----------------------------------------------------------------------------
# Voting
# -----------------------------------------------------------------------------


def vote(
    state: GameState,
    player_name: str,
    choice: Union[Vote, str],
) -> ActionResult:
    """Player <player_name> attempts to vote <choice> on the current mission.

    Args:
        state: Current state; must be VOTING.
        player_name: The voting player.
        choice: Vote.PASS / Vote.FAIL or "pass" / "fail".

    Returns:
        ActionResult with the vote recorded (and the mission resolved if it
        was the last vote), or one of WRONG_PHASE, INVALID_VOTE,
        NOT_IN_MISSION, ALREADY_VOTED.
    """
    error = check_phase(state, Phase.VOTING)
    if error is not None:
        return ActionResult.rejected(state, error)

    parsed = parse_vote(choice)
    if parsed is None:
        logger.debug("Invalid vote {!r} from {}", choice, player_name)
        return ActionResult.rejected(state, ErrorKind.INVALID_VOTE)

    player = state.players.get(player_name)
    if player is None or not player.on_team:
        logger.debug("{} voted but is not on the mission", player_name)
        return ActionResult.rejected(state, ErrorKind.NOT_IN_MISSION)

    if player.has_voted():
        logger.debug("{} already voted", player_name)
        return ActionResult.rejected(state, ErrorKind.ALREADY_VOTED)

    players = dict(state.players)
    players[player_name] = player.with_vote(parsed)
    voted = enter_phase(state, Phase.VOTING, players=players)
    logger.debug(
        "{} voted on mission {} ({} pending)",
        player_name,
        state.mission_number(),
        len(voted.pending_voters()),
    )

    if voted.pending_voters():
        return ActionResult.ok(voted)
    return ActionResult.ok(resolve_mission(voted))


# -----------------------------------------------------------------------------
# Mission resolution
# -----------------------------------------------------------------------------


def count_fail_votes(state: GameState) -> int:
    """Count FAIL votes cast by members of the current team."""
    return sum(
        1
        for name in state.team_members()
        if state.players[name].vote == Vote.FAIL
    )


def resolve_mission(state: GameState) -> GameState:
    """Resolve the current mission once every team member has voted.

    Args:
        state: A VOTING state with no pending team votes.

    Returns:
        The state after scoring: PICK_TEAM with the next leader, or
        GAME_OVER if the match has ended.

    Raises:
        ValueError: If the state is not VOTING, or team members have not
            all voted yet.
    """
    if check_phase(state, Phase.VOTING) is not None:
        raise ValueError(
            f"Can only resolve a mission in VOTING (current: {state.phase.value})"
        )
    if state.pending_voters():
        raise ValueError(f"Votes still pending from {state.pending_voters()}")

    fail_count = count_fail_votes(state)
    mission = state.current_mission().resolve(fail_count)
    record = MissionRecord(
        mission=mission,
        team=state.current_team,
        fail_count=fail_count,
    )
    score = state.score.record(mission.result)
    missions = state.missions[1:]
    players = {
        name: player.reset_for_new_mission()
        for name, player in state.players.items()
    }
    logger.info(
        "Mission {} {} with {} fail vote(s); score {}-{}",
        state.mission_number(),
        mission.result.value,
        fail_count,
        score.resistance_wins,
        score.spy_wins,
    )

    changes = dict(
        players=players,
        missions=missions,
        current_team=frozenset(),
        score=score,
        history=state.history + (record,),
    )

    if is_match_over(score, len(missions)):
        finished = enter_phase(state, Phase.GAME_OVER, **changes)
        winner = match_winner(finished)
        logger.info("Game over, winner: {}", winner.value if winner else "none (tie)")
        return finished

    return enter_phase(
        state,
        Phase.PICK_TEAM,
        leader=state.next_leader(),
        **changes,
    )

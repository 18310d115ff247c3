"""Phase state machine for the mission rule engine.

Defines which phase may follow which, and the single guard every
operation runs first. The machine is stateless: the phase lives on the
GameState, and moving to a new phase means building a new GameState.

    INACTIVE  --join-->              INACTIVE
    INACTIVE  --start-->             PICK_TEAM
    PICK_TEAM --pick_team-->         VOTING
    VOTING    --vote (partial)-->    VOTING
    VOTING    --vote (resolved)-->   PICK_TEAM | GAME_OVER
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional

from loguru import logger

from core.constants import Phase
from core.game_state import GameState

from .errors import ErrorKind


# Valid phase transitions
PHASE_TRANSITIONS: dict[Phase, list[Phase]] = {
    Phase.INACTIVE: [Phase.INACTIVE, Phase.PICK_TEAM],
    Phase.PICK_TEAM: [Phase.VOTING],
    Phase.VOTING: [Phase.VOTING, Phase.PICK_TEAM, Phase.GAME_OVER],
    # Terminal
    Phase.GAME_OVER: [],
}


@dataclass
class PhaseTransitionResult:
    """Result of a phase transition attempt.

    Attributes:
        success: Whether the transition was successful.
        new_phase: The new phase if successful, None otherwise.
        reason: Description of why the transition failed (if it did).
    """

    success: bool
    new_phase: Optional[Phase]
    reason: Optional[str] = None


def check_phase(state: GameState, expected: Phase) -> Optional[ErrorKind]:
    """Guard run at the top of every operation.

    Args:
        state: The state the operation was issued against.
        expected: The phase the operation is legal in.

    Returns:
        WRONG_PHASE if the state is in another phase, None otherwise.
    """
    if state.phase != expected:
        logger.debug(
            "Rejected: expected phase {} but match is in {}",
            expected.value,
            state.phase.value,
        )
        return ErrorKind.WRONG_PHASE
    return None


def get_valid_transitions(phase: Phase) -> list[Phase]:
    """Get the list of phases that may follow the given phase."""
    return PHASE_TRANSITIONS.get(phase, [])


def can_transition(current: Phase, target: Phase) -> bool:
    """Check if moving from current to target is allowed."""
    return target in get_valid_transitions(current)


def validate_transition(current: Phase, target: Phase) -> PhaseTransitionResult:
    """Check a transition against the table.

    Args:
        current: The phase being left.
        target: The phase being entered.

    Returns:
        PhaseTransitionResult indicating success or failure.
    """
    if not can_transition(current, target):
        valid = get_valid_transitions(current)
        return PhaseTransitionResult(
            success=False,
            new_phase=None,
            reason=f"Cannot transition from {current.value} to {target.value}. "
            f"Valid transitions: {[p.value for p in valid]}",
        )
    return PhaseTransitionResult(success=True, new_phase=target)


def enter_phase(state: GameState, target: Phase, **changes) -> GameState:
    """Build the successor state in the target phase.

    Args:
        state: The current state.
        target: Phase of the returned state.
        **changes: Other GameState fields to replace.

    Returns:
        A new GameState.

    Raises:
        ValueError: If the table does not allow the transition. Operations
            only call this after their own checks pass, so this signals an
            engine bug rather than a bad command.
    """
    result = validate_transition(state.phase, target)
    if not result.success:
        raise ValueError(result.reason)
    if target != state.phase:
        logger.debug("Phase {} -> {}", state.phase.value, target.value)
    return replace(state, phase=target, **changes)


def is_terminal(phase: Phase) -> bool:
    """Check if no phase may follow this one."""
    return not get_valid_transitions(phase)

"""
Transition table of the reconciliation engine.

decide() is pure: it maps the current state and the latest observations to the
next state and the ordered side effects that lead there.
"""
from typing import Optional

from failover.models import (
    Action,
    ConfigStatus,
    EngineState,
    LivenessStatus,
    Transition,
)

REACHABLE = LivenessStatus.REACHABLE
UNREACHABLE = LivenessStatus.UNREACHABLE

# (state, liveness) -> transition, for every state but INIT
TRANSITIONS = {
    (EngineState.UP, REACHABLE): Transition(next_state=EngineState.UP),
    (EngineState.UP, UNREACHABLE): Transition(
        next_state=EngineState.GOING_DOWN,
        actions=(Action.DISABLE_CONFIG, Action.SEND_ALERT, Action.RESTART_TARGET),
    ),
    (EngineState.DOWN, UNREACHABLE): Transition(next_state=EngineState.DOWN),
    (EngineState.DOWN, REACHABLE): Transition(
        next_state=EngineState.GOING_UP,
        actions=(Action.ENABLE_CONFIG,),
    ),
    (EngineState.GOING_UP, REACHABLE): Transition(next_state=EngineState.GOING_UP),
    (EngineState.GOING_UP, UNREACHABLE): Transition(
        next_state=EngineState.GOING_DOWN,
        actions=(Action.DISABLE_CONFIG,),
    ),
    (EngineState.GOING_DOWN, UNREACHABLE): Transition(next_state=EngineState.GOING_DOWN),
    (EngineState.GOING_DOWN, REACHABLE): Transition(
        next_state=EngineState.GOING_UP,
        actions=(Action.ENABLE_CONFIG,),
    ),
}


def needs_config_status(state: EngineState) -> bool:
    """Only the INIT rule looks at the configuration file."""
    return state == EngineState.INIT


def decide(state: EngineState,
           liveness: LivenessStatus,
           config: Optional[ConfigStatus] = None) -> Transition:
    """
    Decide the transition for one tick.

    Args:
        state: Current engine state
        liveness: Result of this tick's probe
        config: Current configuration status, required in INIT

    Returns:
        The transition to apply
    """
    if state != EngineState.INIT:
        return TRANSITIONS[(state, liveness)]

    if config is None:
        raise ValueError("INIT requires the configuration status")

    if liveness == REACHABLE and config == ConfigStatus.DISABLED:
        return Transition(
            next_state=EngineState.GOING_UP,
            actions=(Action.ENABLE_CONFIG, Action.RESTART_TARGET),
        )

    if config == ConfigStatus.ENABLED:
        return Transition(next_state=EngineState.UP)

    return Transition(next_state=EngineState.DOWN)

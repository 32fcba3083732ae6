"""Tests for the engine transition table."""

import pytest

from failover.core.state_machine import decide, needs_config_status
from failover.models import Action, ConfigStatus, EngineState, LivenessStatus

REACHABLE = LivenessStatus.REACHABLE
UNREACHABLE = LivenessStatus.UNREACHABLE
ENABLED = ConfigStatus.ENABLED
DISABLED = ConfigStatus.DISABLED


class TestInitState:
    def test_reachable_server_with_disabled_config_enables_and_restarts(self):
        transition = decide(EngineState.INIT, REACHABLE, DISABLED)

        assert transition.next_state == EngineState.GOING_UP
        assert transition.actions == (Action.ENABLE_CONFIG, Action.RESTART_TARGET)

    @pytest.mark.parametrize("liveness,config,expected", [
        (REACHABLE, ENABLED, EngineState.UP),
        (UNREACHABLE, ENABLED, EngineState.UP),
        (UNREACHABLE, DISABLED, EngineState.DOWN),
    ])
    def test_bootstrap_follows_config_without_side_effects(self, liveness, config, expected):
        transition = decide(EngineState.INIT, liveness, config)

        assert transition.next_state == expected
        assert transition.actions == ()

    def test_init_without_config_status_is_rejected(self):
        with pytest.raises(ValueError):
            decide(EngineState.INIT, REACHABLE)

    def test_only_init_reads_config(self):
        assert needs_config_status(EngineState.INIT)
        for state in (EngineState.UP, EngineState.DOWN, EngineState.GOING_UP, EngineState.GOING_DOWN):
            assert not needs_config_status(state)


class TestSteadyStates:
    def test_up_failure_disables_alerts_then_restarts(self):
        transition = decide(EngineState.UP, UNREACHABLE)

        assert transition.next_state == EngineState.GOING_DOWN
        assert transition.actions == (Action.DISABLE_CONFIG, Action.SEND_ALERT, Action.RESTART_TARGET)

    def test_down_recovery_enables_without_restart_or_alert(self):
        transition = decide(EngineState.DOWN, REACHABLE)

        assert transition.next_state == EngineState.GOING_UP
        assert transition.actions == (Action.ENABLE_CONFIG,)

    def test_going_up_failure_only_disables(self):
        transition = decide(EngineState.GOING_UP, UNREACHABLE)

        assert transition.next_state == EngineState.GOING_DOWN
        assert transition.actions == (Action.DISABLE_CONFIG,)

    def test_going_down_recovery_only_enables(self):
        transition = decide(EngineState.GOING_DOWN, REACHABLE)

        assert transition.next_state == EngineState.GOING_UP
        assert transition.actions == (Action.ENABLE_CONFIG,)

    @pytest.mark.parametrize("state,liveness", [
        (EngineState.UP, REACHABLE),
        (EngineState.DOWN, UNREACHABLE),
        (EngineState.GOING_UP, REACHABLE),
        (EngineState.GOING_DOWN, UNREACHABLE),
    ])
    def test_matching_observation_keeps_state(self, state, liveness):
        """GOING_UP and GOING_DOWN are watch states and never promote to UP or DOWN."""
        transition = decide(state, liveness)

        assert transition.next_state == state
        assert transition.actions == ()

    def test_config_is_ignored_outside_init(self):
        assert decide(EngineState.UP, REACHABLE, DISABLED).next_state == EngineState.UP

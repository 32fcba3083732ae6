from prometheus_client import REGISTRY, Counter, Gauge, Histogram

from failover.models import EngineState


class Metrics:
    """Prometheus metrics for the failover watchdog."""
    def __init__(self, registry=REGISTRY):
        # Engine state
        self.engine_state = Gauge(
            'watchdog_engine_state',
            'Current reconciliation engine state (1=current)',
            ['state'],
            registry=registry
        )
        self.transitions = Counter(
            'watchdog_transitions_total',
            'Number of engine state transitions',
            ['from_state', 'to_state'],
            registry=registry
        )
        self.tick_duration = Histogram(
            'watchdog_tick_seconds',
            'Time spent in one reconciliation tick',
            registry=registry
        )

        # Probe results
        self.probes = Counter(
            'watchdog_probe_total',
            'Number of Valkey liveness probes',
            ['result'],
            registry=registry
        )

        # Side effects
        self.config_changes = Counter(
            'watchdog_config_changes_total',
            'Number of session manager configuration changes requested',
            ['status'],
            registry=registry
        )
        self.restarts = Counter(
            'watchdog_restarts_total',
            'Number of application server restarts',
            registry=registry
        )
        self.alerts = Counter(
            'watchdog_alerts_total',
            'Number of failure alerts sent',
            registry=registry
        )

    def set_state(self, state: EngineState):
        for candidate in EngineState:
            self.engine_state.labels(state=candidate.value).set(1 if candidate == state else 0)

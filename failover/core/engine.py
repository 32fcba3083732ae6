"""
Reconciliation engine for the failover watchdog.
Polls the Valkey server and keeps the application server configuration in line with it.
"""
import threading
import structlog
from prometheus_client import CollectorRegistry

from failover.core.state_machine import decide, needs_config_status
from failover.metrics import Metrics
from failover.models import Action, ConfigStatus, EngineState, Transition

# Configure logger
logger = structlog.get_logger()

DEFAULT_POLL_INTERVAL = 10.0


class ReconciliationEngine:
    """
    Finite state machine driving the failover.

    The engine owns its state and mutates it only from the thread running
    run(); collaborators are called in the order the transition lists them.
    """
    def __init__(self, probe, reconciler, notifier, poll_interval=DEFAULT_POLL_INTERVAL, metrics=None):
        """
        Initialize the engine.

        Args:
            probe: Object with check() -> LivenessStatus
            reconciler: Object with current_status(), set_status() and restart_target()
            notifier: Object with send_alert()
            poll_interval: Seconds between ticks
            metrics: Metrics instance, a private registry is used when omitted
        """
        self.probe = probe
        self.reconciler = reconciler
        self.notifier = notifier
        self.poll_interval = poll_interval
        self.metrics = metrics or Metrics(registry=CollectorRegistry())
        self._state = EngineState.INIT
        self._stop_event = threading.Event()
        self.failure = None

        self.metrics.set_state(self._state)

    @property
    def state(self) -> EngineState:
        return self._state

    def run(self, stop_event=None):
        """
        Poll until stop_event is set or a tick fails.

        Args:
            stop_event: threading.Event signalling shutdown
        """
        if stop_event is not None:
            self._stop_event = stop_event

        logger.info("Reconciliation engine started", poll_interval=self.poll_interval)

        try:
            while not self._stop_event.is_set():
                self.tick()

                if self._stop_event.wait(self.poll_interval):
                    logger.debug("Shutdown requested")
        except Exception as e:
            self.failure = e
            logger.exception("Reconciliation engine stopped after an error", error=str(e))

        logger.info("Reconciliation engine stopped", state=self._state.value)

    def tick(self) -> Transition:
        """
        Evaluate the current state's rule once and apply the result.

        Returns:
            The transition that was applied
        """
        with self.metrics.tick_duration.time():
            liveness = self.probe.check()
            self.metrics.probes.labels(result=liveness.value).inc()
            logger.debug("Valkey server status", status=liveness.value)

            config = None
            if needs_config_status(self._state):
                config = self.reconciler.current_status()
                logger.debug("Session manager configuration status", status=config.value)

            transition = decide(self._state, liveness, config)

            if transition.actions:
                logger.info("Reconciling configuration",
                            state=self._state.value,
                            liveness=liveness.value,
                            actions=[action.value for action in transition.actions])

            for action in transition.actions:
                self._perform(action)

            self._advance(transition.next_state)
            return transition

    def _perform(self, action: Action):
        if action == Action.ENABLE_CONFIG:
            self.reconciler.set_status(ConfigStatus.ENABLED)
            self.metrics.config_changes.labels(status=ConfigStatus.ENABLED.value).inc()
        elif action == Action.DISABLE_CONFIG:
            self.reconciler.set_status(ConfigStatus.DISABLED)
            self.metrics.config_changes.labels(status=ConfigStatus.DISABLED.value).inc()
        elif action == Action.SEND_ALERT:
            self.notifier.send_alert()
            self.metrics.alerts.inc()
        elif action == Action.RESTART_TARGET:
            self.reconciler.restart_target(cancel_event=self._stop_event)
            self.metrics.restarts.inc()

    def _advance(self, next_state: EngineState):
        if next_state == self._state:
            return

        logger.info("Engine state transition",
                    from_state=self._state.value,
                    to_state=next_state.value)
        self.metrics.transitions.labels(from_state=self._state.value, to_state=next_state.value).inc()
        self._state = next_state
        self.metrics.set_state(next_state)

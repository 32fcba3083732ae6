""" Watchdog service keeping Tomcat session clustering in line with Valkey availability """
import argparse
import signal
import sys
import threading
import structlog
from prometheus_client import start_http_server

from failover.appserver import ConfigReconciler, ProcessRestarter
from failover.config import Settings
from failover.core import ReconciliationEngine
from failover.custom_logging import configure_logging
from failover.metrics import Metrics
from failover.notifications import Notifier
from failover.probe import LivenessProbe

logger = structlog.get_logger()


def build_engine(settings: Settings, metrics=None) -> ReconciliationEngine:
    """ Wire the engine and its collaborators from settings. """
    probe = LivenessProbe(settings.VALKEY_HOST, settings.VALKEY_PORT, timeout=settings.PROBE_TIMEOUT)
    reconciler = ConfigReconciler(
        settings.config_file,
        settings.CONFIG_MARKER,
        restarter=ProcessRestarter(settings.restart_script)
    )
    notifier = Notifier.from_settings(settings)

    return ReconciliationEngine(
        probe,
        reconciler,
        notifier,
        poll_interval=settings.POLL_INTERVAL,
        metrics=metrics
    )


class WatchdogService:
    """ Runs the reconciliation engine on a background thread """
    def __init__(self, settings=None, engine=None, metrics=None):
        self.settings = settings or Settings()
        self.metrics = metrics
        self.engine = engine
        self.stop_event = threading.Event()
        self.thread = None

    def start(self):
        """ Build the engine if needed and start polling. """
        if self.thread is not None and self.thread.is_alive():
            logger.info("Watchdog already running")
            return

        logger.info("Starting Valkey watchdog",
                    valkey_host=self.settings.VALKEY_HOST,
                    valkey_port=self.settings.VALKEY_PORT,
                    config_file=self.settings.config_file)

        if self.engine is None:
            self.engine = build_engine(self.settings, metrics=self.metrics)

        self.stop_event.clear()
        self.thread = threading.Thread(
            target=self.engine.run,
            args=(self.stop_event,),
            name="valkey-watchdog",
            daemon=True
        )
        self.thread.start()

    def stop(self, timeout=None):
        """ Request shutdown and wait for the in-flight tick to finish. """
        if self.thread is None:
            logger.info("Watchdog was never started")
            return

        if not self.thread.is_alive():
            logger.info("Watchdog already stopped")
            return

        logger.info("Stopping Valkey watchdog")
        self.stop_event.set()
        self.thread.join(timeout)

    def is_running(self) -> bool:
        return self.thread is not None and self.thread.is_alive()

    def wait(self, poll=1.0):
        """ Block until the worker thread exits. """
        while self.is_running():
            self.thread.join(poll)


def check_once(settings: Settings) -> int:
    """ Log the current Valkey and configuration status without changing anything. """
    probe = LivenessProbe(settings.VALKEY_HOST, settings.VALKEY_PORT, timeout=settings.PROBE_TIMEOUT)
    reconciler = ConfigReconciler(settings.config_file, settings.CONFIG_MARKER)

    liveness = probe.check()
    try:
        config = reconciler.current_status()
    except Exception as e:
        logger.error("Failed to read session manager configuration", error=str(e))
        return 1

    logger.info("Current status", valkey=liveness.value, session_manager=config.value)
    return 0


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog="failover-watchdog",
        description="Disable Tomcat Valkey session clustering while the Valkey server is down."
    )
    parser.add_argument("--check", action="store_true",
                        help="print the current Valkey and configuration status and exit")
    return parser.parse_args(argv)


def install_signal_handlers(service: WatchdogService):
    """ Stop the service on SIGTERM and SIGINT. """
    def _graceful_shutdown(signum, frame):
        """Handle shutdown signals gracefully"""
        logger.info("Received shutdown signal, stopping watchdog", signal=signum)
        service.stop()

    signal.signal(signal.SIGTERM, _graceful_shutdown)
    signal.signal(signal.SIGINT, _graceful_shutdown)
    return _graceful_shutdown


def main(argv=None) -> int:
    args = parse_args(argv)
    settings = Settings()
    configure_logging(settings.LOG_LEVEL, settings.LOG_JSON)

    if args.check:
        return check_once(settings)

    if settings.PROMETHEUS_PORT:
        start_http_server(settings.PROMETHEUS_PORT)
        logger.info("Started metrics endpoint", port=settings.PROMETHEUS_PORT)

    service = WatchdogService(settings, metrics=Metrics())
    install_signal_handlers(service)

    service.start()
    service.wait()

    if service.engine.failure is not None:
        return 1

    logger.info("Watchdog shutdown complete")
    return 0


if __name__ == "__main__":
    sys.exit(main())

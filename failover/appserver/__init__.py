"""Application server management for the failover watchdog."""

from failover.appserver.context_config import ConfigReconciler
from failover.appserver.restarter import ProcessRestarter
from failover.appserver.errors import (
    WatchdogError,
    ConfigFileError,
    ConfigParseError,
    ConfigBackupError,
    ConfigWriteError,
    RestartError
)

__all__ = [
    'ConfigReconciler',
    'ProcessRestarter',
    'WatchdogError',
    'ConfigFileError',
    'ConfigParseError',
    'ConfigBackupError',
    'ConfigWriteError',
    'RestartError'
]

"""Errors raised while managing the application server."""


class WatchdogError(Exception):
    """Base class for fatal watchdog errors."""
    pass


class ConfigFileError(WatchdogError):
    """Raised when the managed configuration file is missing, empty or unreadable."""
    pass


class ConfigParseError(WatchdogError):
    """Raised when the marker or its comment delimiters cannot be located."""
    pass


class ConfigBackupError(WatchdogError):
    """Raised when the backup copy could not be written. Nothing was changed."""
    pass


class ConfigWriteError(WatchdogError):
    """Raised when writing the new configuration failed after a successful backup."""

    def __init__(self, message, backup_path):
        super().__init__(message)
        self.backup_path = backup_path


class RestartError(WatchdogError):
    """Raised when the restart script could not be started."""
    pass

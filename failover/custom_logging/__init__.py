"""Structured logging setup for the failover watchdog."""
import logging
import structlog


def configure_logging(level="INFO", json_output=False):
    """
    Configure structlog for the process.

    Args:
        level: Minimum level name, e.g. "DEBUG" or "INFO"
        json_output: Render events as JSON lines instead of console output
    """
    numeric_level = logging.getLevelName(str(level).upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    processors = [
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]
    if json_output:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        # ConsoleRenderer formats exceptions itself
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        cache_logger_on_first_use=True
    )


__all__ = ['configure_logging']

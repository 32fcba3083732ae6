"""Configuration module for the failover watchdog."""

from failover.config.settings import Settings

__all__ = ['Settings']

"""Notifications module for the failover watchdog."""

from failover.notifications.notifier import Notifier

__all__ = ['Notifier']

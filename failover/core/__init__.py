"""Core reconciliation logic for the failover watchdog."""

from failover.core.engine import ReconciliationEngine
from failover.core.state_machine import decide

__all__ = ['ReconciliationEngine', 'decide']

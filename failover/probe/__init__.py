"""Liveness probing for the monitored Valkey server."""

from failover.probe.liveness import LivenessProbe

__all__ = ['LivenessProbe']

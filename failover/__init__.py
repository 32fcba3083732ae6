"""Valkey failover watchdog for Tomcat session clustering."""

__version__ = "1.0.0"

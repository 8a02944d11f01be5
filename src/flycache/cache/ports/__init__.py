"""Outbound ports of the cache subsystem."""

"""Packaged resource files (configuration defaults)."""

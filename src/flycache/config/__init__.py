"""Typed configuration for FlyCache subsystems."""

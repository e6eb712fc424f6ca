"""Uniscape trip and shuttle booking backend."""

__version__ = "1.0.0"

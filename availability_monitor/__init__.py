"""Periodic HTTP endpoint availability monitor."""

__version__ = "1.0.0"

"""Logging and hook utilities for pfajs."""

from . import hooks, logger

__all__ = ["hooks", "logger"]

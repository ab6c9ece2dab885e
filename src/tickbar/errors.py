"""Tickbar exception hierarchy.

Keep this module small and dependency-free: it is imported broadly across the
project and by tests.
"""


class TickbarError(Exception):
    """Base exception for all Tickbar errors."""


class InvalidArgument(TickbarError, ValueError):
    """Raised when a constructor or mutator receives an out-of-range value."""


class TickbarConfigError(TickbarError):
    """Raised for invalid user configuration."""

"""
Base exception for user-facing errors.

All expected errors that should be displayed to the user
as clean messages (without stack traces) must inherit from CollieUserError.

Programming errors and bugs should NOT inherit from CollieUserError;
they will propagate with full tracebacks.
"""

from __future__ import annotations


class CollieUserError(Exception):
    """
    Base class for all user-facing errors in Collie tools.

    These errors indicate problems that the user can fix:
    unparsable markup selections, broken configuration files, etc.
    """
    pass


class MarkupParseError(CollieUserError):
    """The selected JSX/TSX could not be turned into a markup tree."""
    pass


class ConfigLoadError(CollieUserError, ValueError):
    """Typed configuration loading failed; the message carries the field path."""
    pass


__all__ = ["CollieUserError", "MarkupParseError", "ConfigLoadError"]

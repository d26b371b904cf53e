"""Exception types raised by navigation and pending-operation commands."""

from __future__ import annotations


class NavError(Exception):
    """Base class for failures reported back to the command caller."""


class NavigationError(NavError):
    """A cursor or directory change could not be performed.

    The navigation stack is left as it was before the failed call.
    """


class NothingToDoError(NavError):
    """User-facing "nothing to do" signal, not a system fault."""


class NoFileSelectedError(NothingToDoError):
    def __init__(self, message: str = "no file selected") -> None:
        super().__init__(message)


class EmptyBufferError(NothingToDoError):
    def __init__(self, message: str = "no file in yank/delete buffer") -> None:
        super().__init__(message)


class OperationError(NavError):
    """The pending-operation store or the move/copy job failed."""


__all__ = [
    "NavError",
    "NavigationError",
    "NothingToDoError",
    "NoFileSelectedError",
    "EmptyBufferError",
    "OperationError",
]

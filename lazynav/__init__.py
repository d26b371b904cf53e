"""Public package surface for lazynav.

Exports ``main`` for programmatic CLI invocation and ``NavigationStack`` for
embedding the navigation core in another front end.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .navigation import NavigationStack


def main(*args, **kwargs):
    """Lazily import CLI entrypoint to keep package imports lightweight."""
    from .cli import main as _main

    return _main(*args, **kwargs)


def __getattr__(name: str):
    if name == "NavigationStack":
        from .navigation import NavigationStack as _NavigationStack

        return _NavigationStack
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = ["main", "NavigationStack"]

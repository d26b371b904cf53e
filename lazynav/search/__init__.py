"""Search helpers for locating entries inside a listing."""

from __future__ import annotations

from .matcher import find_next, find_prev, match

__all__ = [
    "match",
    "find_next",
    "find_prev",
]

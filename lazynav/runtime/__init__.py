"""Runtime services around the navigation core.

Background loaders with their caches, the persisted config, and the store for
the pending copy/move operation.
"""

from __future__ import annotations

from .loader import Loader
from .pending import PendingOperationStore

__all__ = [
    "Loader",
    "PendingOperationStore",
]

from __future__ import annotations

from typing import Callable

ProgressCallback = Callable[[str, int, int], None]
CancelCheck = Callable[[], bool]


class ProbeCancelled(Exception):
    """Raised when a probe's cancel check fires mid-measurement."""

from __future__ import annotations

from enum import Enum


class NodeKind(str, Enum):
    FILE = "file"
    DIRECTORY = "directory"


class Safety(str, Enum):
    SAFE = "Safe"
    REVIEW = "Review"
    CAUTION = "Caution"


class ProbeStatus(str, Enum):
    COMPLETED = "completed"
    SKIPPED = "skipped"
    TIMED_OUT = "timed_out"
    FAILED = "failed"

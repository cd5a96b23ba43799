from __future__ import annotations

from dataclasses import dataclass, field

from honeycrisp.models.enums import ProbeStatus, Safety


@dataclass(slots=True, frozen=True)
class Finding:
    """One measured observation reported by a probe.

    ``path`` is ``None`` for synthetic findings such as a snapshot count.
    """

    label: str
    path: str | None
    size_bytes: int
    safety: Safety
    note: str = ""

    def __post_init__(self) -> None:
        if self.size_bytes < 0:
            object.__setattr__(self, "size_bytes", 0)


@dataclass(slots=True, frozen=True)
class Contribution:
    category: str
    size_bytes: int
    safety: Safety


@dataclass(slots=True)
class Category:
    name: str
    total_bytes: int
    safety: Safety


@dataclass(slots=True, frozen=True)
class BreakdownEntry:
    label: str
    size_bytes: int
    path: str | None = None
    note: str = ""
    flagged: bool = False


@dataclass(slots=True)
class Breakdown:
    heading: str
    entries: list[BreakdownEntry] = field(default_factory=list)


@dataclass(slots=True)
class Section:
    name: str
    title: str
    status: ProbeStatus = ProbeStatus.COMPLETED
    findings: list[Finding] = field(default_factory=list)
    breakdowns: list[Breakdown] = field(default_factory=list)
    notes: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    error: str | None = None
    elapsed: float = 0.0

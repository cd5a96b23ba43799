from __future__ import annotations

from dataclasses import dataclass, field

from honeycrisp.models.enums import Safety


@dataclass(slots=True, frozen=True)
class SummaryRow:
    category: str
    size_bytes: int
    human_size: str
    safety: Safety


@dataclass(slots=True, frozen=True)
class SummaryReport:
    rows: list[SummaryRow] = field(default_factory=list)
    grand_total_bytes: int = 0
    grand_total_human: str = "0 B"

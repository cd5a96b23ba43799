from __future__ import annotations

from honeycrisp.models.report import SummaryReport, SummaryRow
from honeycrisp.services.formatting import format_bytes
from honeycrisp.services.registry import CategoryRegistry


def build_report(registry: CategoryRegistry) -> SummaryReport:
    """Summarise *registry* as size-ordered rows plus the grand total.

    Zero-byte categories are left out. Equal sizes are ordered by category
    name so the same registry state always yields the same rows.
    """
    visible = [category for category in registry.categories() if category.total_bytes > 0]
    visible.sort(key=lambda c: (-c.total_bytes, c.name))
    rows = [
        SummaryRow(
            category=category.name,
            size_bytes=category.total_bytes,
            human_size=format_bytes(category.total_bytes),
            safety=category.safety,
        )
        for category in visible
    ]
    total = registry.grand_total
    return SummaryReport(rows=rows, grand_total_bytes=total, grand_total_human=format_bytes(total))

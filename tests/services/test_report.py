from __future__ import annotations

from honeycrisp.models.enums import Safety
from honeycrisp.services.registry import CategoryRegistry
from honeycrisp.services.report import build_report


def test_end_to_end_summary() -> None:
    registry = CategoryRegistry()
    registry.add("Caches", 104857600, Safety.SAFE)
    registry.add("Caches", 52428800, Safety.SAFE)
    registry.add("Logs", 0, Safety.SAFE)
    registry.add("Mail", 1073741824, Safety.REVIEW)

    report = build_report(registry)

    assert [(r.category, r.human_size, r.safety) for r in report.rows] == [
        ("Mail", "1.0 GB", Safety.REVIEW),
        ("Caches", "150.0 MB", Safety.SAFE),
    ]
    assert report.grand_total_bytes == 1231028224
    assert report.grand_total_human == "1.1 GB"


def test_rows_sorted_descending_and_sum_to_total() -> None:
    registry = CategoryRegistry()
    for name, size in [("a", 5), ("b", 500), ("c", 0), ("d", 50), ("e", 5000)]:
        registry.add(name, size, Safety.REVIEW)

    report = build_report(registry)
    sizes = [row.size_bytes for row in report.rows]

    assert sizes == sorted(sizes, reverse=True)
    assert all(row.size_bytes > 0 for row in report.rows)
    assert sum(sizes) == report.grand_total_bytes


def test_equal_sizes_break_ties_by_name() -> None:
    registry = CategoryRegistry()
    registry.add("Zeta", 100, Safety.SAFE)
    registry.add("Alpha", 100, Safety.SAFE)
    registry.add("Mid", 100, Safety.SAFE)

    assert [row.category for row in build_report(registry).rows] == ["Alpha", "Mid", "Zeta"]


def test_empty_registry() -> None:
    report = build_report(CategoryRegistry())

    assert report.rows == []
    assert report.grand_total_human == "0 B"


def test_report_is_pure() -> None:
    registry = CategoryRegistry()
    registry.add("Trash", 2048, Safety.SAFE)

    assert build_report(registry) == build_report(registry)
    assert registry.grand_total == 2048

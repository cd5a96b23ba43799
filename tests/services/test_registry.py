from __future__ import annotations

import threading

from honeycrisp.models.enums import Safety
from honeycrisp.models.finding import Contribution
from honeycrisp.services.registry import CategoryRegistry


def test_repeated_add_sums_and_last_safety_wins() -> None:
    registry = CategoryRegistry()
    registry.add("Caches", 100, Safety.SAFE)
    registry.add("Caches", 50, Safety.REVIEW)

    category = registry.get("Caches")
    assert category is not None
    assert category.total_bytes == 150
    assert category.safety is Safety.REVIEW
    assert registry.grand_total == 150


def test_chunking_does_not_change_totals() -> None:
    chunked = CategoryRegistry()
    chunked.add("X", 100, Safety.SAFE)
    chunked.add("X", 50, Safety.SAFE)

    single = CategoryRegistry()
    single.add("X", 150, Safety.SAFE)

    assert chunked.get("X") == single.get("X")
    assert chunked.grand_total == single.grand_total


def test_zero_byte_contribution_registers_category() -> None:
    registry = CategoryRegistry()
    registry.add("Docker", 0, Safety.REVIEW)

    assert "Docker" in registry
    assert len(registry) == 1
    assert registry.grand_total == 0


def test_names_are_case_sensitive() -> None:
    registry = CategoryRegistry()
    registry.add("Logs", 1, Safety.SAFE)
    registry.add("logs", 2, Safety.SAFE)

    assert len(registry) == 2
    assert registry.grand_total == 3


def test_negative_contributions_are_clamped() -> None:
    registry = CategoryRegistry()
    registry.add("Trash", 10, Safety.SAFE)
    registry.add("Trash", -20, Safety.SAFE)

    category = registry.get("Trash")
    assert category is not None
    assert category.total_bytes == 10
    assert registry.grand_total == 10


def test_extend_preserves_call_order() -> None:
    registry = CategoryRegistry()
    registry.extend(
        [
            Contribution("System & App Caches", 10, Safety.SAFE),
            Contribution("System & App Caches", 5, Safety.REVIEW),
        ]
    )

    category = registry.get("System & App Caches")
    assert category is not None
    assert category.safety is Safety.REVIEW
    assert [c.name for c in registry] == ["System & App Caches"]


def test_concurrent_adds_and_reads_stay_consistent() -> None:
    registry = CategoryRegistry()
    start = threading.Barrier(5)
    observed: list[int] = []

    def writer() -> None:
        start.wait()
        for _ in range(1000):
            registry.add("Caches", 1, Safety.SAFE)

    def reader() -> None:
        start.wait()
        for _ in range(1000):
            if "Caches" in registry:
                category = registry.get("Caches")
                assert category is not None
                observed.append(len(registry))
            assert 0 <= registry.grand_total <= 4000

    threads = [threading.Thread(target=writer) for _ in range(4)] + [threading.Thread(target=reader)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert registry.grand_total == 4000
    assert registry.get("Caches") == registry.categories()[0]
    assert registry.categories()[0].total_bytes == 4000
    assert set(observed) <= {1}

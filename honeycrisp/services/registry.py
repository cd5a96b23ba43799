from __future__ import annotations

import threading
from collections.abc import Iterator

from honeycrisp.models.enums import Safety
from honeycrisp.models.finding import Category, Contribution


class CategoryRegistry:
    """Accumulates byte contributions into named categories for one run.

    Repeated contributions to a name are summed and the last safety label
    wins. The grand total counts every contribution, zero-byte ones
    included.
    """

    def __init__(self) -> None:
        self._categories: dict[str, Category] = {}
        self._grand_total = 0
        self._lock = threading.Lock()

    def add(self, name: str, size_bytes: int, safety: Safety) -> Category:
        size_bytes = max(0, int(size_bytes))
        with self._lock:
            category = self._categories.get(name)
            if category is None:
                category = Category(name=name, total_bytes=size_bytes, safety=safety)
                self._categories[name] = category
            else:
                category.total_bytes += size_bytes
                category.safety = safety
            self._grand_total += size_bytes
            return category

    def extend(self, contributions: list[Contribution]) -> None:
        for item in contributions:
            self.add(item.category, item.size_bytes, item.safety)

    @property
    def grand_total(self) -> int:
        with self._lock:
            return self._grand_total

    def get(self, name: str) -> Category | None:
        with self._lock:
            return self._categories.get(name)

    def categories(self) -> list[Category]:
        with self._lock:
            return list(self._categories.values())

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._categories

    def __iter__(self) -> Iterator[Category]:
        return iter(self.categories())

    def __len__(self) -> int:
        with self._lock:
            return len(self._categories)

from __future__ import annotations

import threading
import time

from honeycrisp.config.defaults import default_config
from honeycrisp.models.enums import ProbeStatus, Safety
from honeycrisp.probes import Probe, ProbeContext, ProbeEnvironment
from honeycrisp.services.registry import CategoryRegistry
from honeycrisp.services.report import build_report
from honeycrisp.services.runner import execute_probe, run_probes
from tests.fs_mock import MemoryFileSystem
from tests.tools_mock import FakeToolRunner


def _env(**overrides: object) -> ProbeEnvironment:
    config = default_config()
    for key, value in overrides.items():
        setattr(config, key, value)
    fs = MemoryFileSystem()
    return ProbeEnvironment(config=config, home=fs.home, fs=fs, tools=FakeToolRunner(), now=2_000_000_000.0)


def _adder(category: str, size: int, safety: Safety):
    def probe(ctx: ProbeContext) -> None:
        ctx.add(category, size, safety)

    return probe


def test_contributions_committed_in_catalog_order() -> None:
    probes = [
        Probe("user", "User caches", _adder("Caches", 100, Safety.SAFE)),
        Probe("system", "System caches", _adder("Caches", 50, Safety.REVIEW)),
    ]

    outcome = run_probes(probes, _env())

    category = outcome.registry.get("Caches")
    assert category is not None
    assert category.total_bytes == 150
    assert category.safety is Safety.REVIEW
    assert [s.name for s in outcome.sections] == ["user", "system"]


def test_quick_mode_skips_slow_probes_without_adding() -> None:
    probes = [
        Probe("fast", "Fast", _adder("Logs", 10, Safety.SAFE)),
        Probe("slow", "Slow", _adder("Large Files", 999, Safety.REVIEW), slow=True),
    ]

    outcome = run_probes(probes, _env(quick=True))

    assert "Large Files" not in outcome.registry
    assert outcome.registry.grand_total == 10
    assert outcome.sections[1].status is ProbeStatus.SKIPPED
    assert "--quick" in outcome.sections[1].skipped[0]


def test_disabled_probes_are_skipped() -> None:
    probes = [Probe("docker", "Docker", _adder("Docker", 10, Safety.REVIEW))]

    outcome = run_probes(probes, _env(disabled_probes=["docker"]))

    assert len(outcome.registry) == 0
    assert outcome.sections[0].status is ProbeStatus.SKIPPED


def test_failing_probe_does_not_abort_run() -> None:
    def broken(ctx: ProbeContext) -> None:
        ctx.add("Half", 10, Safety.SAFE)
        raise RuntimeError("boom")

    probes = [
        Probe("broken", "Broken", broken),
        Probe("trash", "Trash", _adder("Trash", 5, Safety.SAFE)),
    ]

    outcome = run_probes(probes, _env())

    assert outcome.sections[0].status is ProbeStatus.FAILED
    assert "boom" in (outcome.sections[0].error or "")
    assert "Half" not in outcome.registry
    assert outcome.registry.grand_total == 5


def test_timed_out_probe_contributes_nothing() -> None:
    def slow(ctx: ProbeContext) -> None:
        ctx.add("Slow", 10, Safety.SAFE)
        time.sleep(0.05)
        ctx.check_cancelled()
        ctx.add("Slow", 10, Safety.SAFE)

    section, contributions = execute_probe(Probe("slow", "Slow", slow), _env(probe_timeout_seconds=0.01))

    assert section.status is ProbeStatus.TIMED_OUT
    assert contributions == []


def test_timeout_does_not_change_totals_of_fast_probes() -> None:
    probes = [Probe("logs", "Logs", _adder("Logs", 42, Safety.SAFE))]

    with_timeout = run_probes(probes, _env(probe_timeout_seconds=30.0))
    without = run_probes(probes, _env())

    assert build_report(with_timeout.registry) == build_report(without.registry)


def test_parallel_run_matches_sequential_run() -> None:
    barrier = threading.Barrier(2, timeout=5)

    def first(ctx: ProbeContext) -> None:
        barrier.wait()
        time.sleep(0.02)
        ctx.add("Caches", 100, Safety.SAFE)

    def second(ctx: ProbeContext) -> None:
        barrier.wait()
        ctx.add("Caches", 50, Safety.REVIEW)

    probes = [Probe("a", "A", first), Probe("b", "B", second)]
    parallel = run_probes(probes, _env(workers=2))

    category = parallel.registry.get("Caches")
    assert category is not None
    assert category.total_bytes == 150
    # second finishes first, but commits still follow catalog order
    assert category.safety is Safety.REVIEW


def test_progress_callback_reports_each_probe() -> None:
    calls: list[tuple[str, int, int]] = []
    probes = [
        Probe("a", "A", _adder("A", 1, Safety.SAFE)),
        Probe("b", "B", _adder("B", 1, Safety.SAFE)),
    ]

    run_probes(probes, _env(), progress_callback=lambda title, done, total: calls.append((title, done, total)))

    assert calls == [("A", 0, 2), ("B", 1, 2)]


def test_existing_registry_is_extended() -> None:
    registry = CategoryRegistry()
    registry.add("Logs", 1, Safety.SAFE)

    outcome = run_probes([Probe("logs", "Logs", _adder("Logs", 2, Safety.SAFE))], _env(), registry=registry)

    assert outcome.registry is registry
    assert registry.grand_total == 3

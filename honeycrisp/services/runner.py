from __future__ import annotations

import logging
import queue
import threading
import time
from dataclasses import dataclass

from honeycrisp.models.enums import ProbeStatus
from honeycrisp.models.finding import Contribution, Section
from honeycrisp.models.scan import ProbeCancelled, ProgressCallback
from honeycrisp.probes._base import Probe, ProbeContext, ProbeEnvironment
from honeycrisp.services.registry import CategoryRegistry

log = logging.getLogger(__name__)


@dataclass(slots=True)
class ScanOutcome:
    registry: CategoryRegistry
    sections: list[Section]


@dataclass(slots=True, frozen=True)
class _Task:
    index: int
    probe: Probe


def _skip_reason(probe: Probe, env: ProbeEnvironment) -> str | None:
    if probe.name in env.config.disabled_probes:
        return f"{probe.title} (disabled)"
    if probe.slow and env.config.quick:
        return f"{probe.title} (--quick mode)"
    return None


def execute_probe(probe: Probe, env: ProbeEnvironment) -> tuple[Section, list[Contribution]]:
    """Run one probe in isolation and return its section and pending contributions.

    A probe that times out or raises contributes nothing.
    """
    section = Section(name=probe.name, title=probe.title)
    timeout = env.config.probe_timeout_seconds
    deadline = time.monotonic() + timeout if timeout else None
    ctx = ProbeContext(section, env, deadline)
    start = time.perf_counter()
    try:
        probe.func(ctx)
    except ProbeCancelled:
        log.warning("probe %s timed out after %ss", probe.name, timeout)
        section.status = ProbeStatus.TIMED_OUT
        section.error = f"Timed out after {timeout:g}s; not counted" if timeout else "Cancelled"
        return section, []
    except Exception as exc:  # noqa: BLE001
        log.debug("probe %s failed", probe.name, exc_info=True)
        section.status = ProbeStatus.FAILED
        section.error = f"Probe failed: {exc}"
        return section, []
    finally:
        section.elapsed = time.perf_counter() - start
    log.debug("probe %s finished in %.2fs", probe.name, section.elapsed)
    return section, ctx.contributions


def run_probes(
    probes: list[Probe],
    env: ProbeEnvironment,
    *,
    registry: CategoryRegistry | None = None,
    progress_callback: ProgressCallback | None = None,
) -> ScanOutcome:
    """Run *probes* and fold their contributions into *registry*.

    With more than one worker the probes run on threads, but contributions
    are always committed in catalog order so totals and last-write-wins
    labels match a sequential run.
    """
    registry = registry if registry is not None else CategoryRegistry()
    total = len(probes)
    results: list[tuple[Section, list[Contribution]] | None] = [None] * total
    pending: list[_Task] = []

    for index, probe in enumerate(probes):
        reason = _skip_reason(probe, env)
        if reason is None:
            pending.append(_Task(index, probe))
        else:
            section = Section(name=probe.name, title=probe.title, status=ProbeStatus.SKIPPED)
            section.skipped.append(reason)
            results[index] = (section, [])

    done = total - len(pending)
    done_lock = threading.Lock()

    def run_task(task: _Task) -> None:
        nonlocal done
        if progress_callback is not None:
            with done_lock:
                finished = done
            progress_callback(task.probe.title, finished, total)
        results[task.index] = execute_probe(task.probe, env)
        with done_lock:
            done += 1

    workers = max(1, env.config.workers)
    if workers == 1 or len(pending) <= 1:
        for task in pending:
            run_task(task)
    else:
        q: queue.Queue[_Task | None] = queue.Queue()
        for task in pending:
            q.put(task)

        def run_worker() -> None:
            while True:
                task = q.get()
                try:
                    if task is None:
                        break
                    run_task(task)
                finally:
                    q.task_done()

        threads = [threading.Thread(target=run_worker, daemon=True) for _ in range(min(workers, len(pending)))]
        for thread in threads:
            thread.start()
        for _ in threads:
            q.put(None)
        q.join()
        for thread in threads:
            thread.join(timeout=0.3)

    sections: list[Section] = []
    for result in results:
        assert result is not None
        section, contributions = result
        registry.extend(contributions)
        sections.append(section)
    return ScanOutcome(registry=registry, sections=sections)

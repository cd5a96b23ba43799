from __future__ import annotations

import logging

from result import Err

from honeycrisp.models.enums import Safety
from honeycrisp.models.finding import BreakdownEntry
from honeycrisp.probes._base import ProbeContext

log = logging.getLogger(__name__)

TOP_DIRECTORIES = 20


def scan_time_machine(ctx: ProbeContext) -> None:
    if not ctx.has_tool("tmutil"):
        ctx.skip("Time Machine (tmutil unavailable)")
        return
    outcome = ctx.run_tool("tmutil", "listlocalsnapshots", "/")
    if isinstance(outcome, Err):
        log.debug("tmutil failed: %s", outcome.unwrap_err())
        ctx.note("No local Time Machine snapshots found.")
        return

    snapshots = [line.strip() for line in outcome.unwrap().splitlines() if line.startswith("com.")]
    if not snapshots:
        ctx.note("No local Time Machine snapshots found.")
        return
    # count-only: snapshot sizes are not exposed, so nothing is registered
    ctx.row("Local snapshots", None, 0, Safety.REVIEW, note=f"{len(snapshots)} found, managed by macOS")
    ctx.breakdown("Recent snapshots", [BreakdownEntry(label=snap, size_bytes=0) for snap in snapshots[:10]])
    ctx.note("To thin: sudo tmutil thinlocalsnapshots / <bytes> 1")


def scan_top_directories(ctx: ProbeContext) -> None:
    for heading, path in (("Home directory", ctx.home_path()), ("~/Library", ctx.home_path("Library"))):
        ctx.breakdown(
            heading,
            [
                BreakdownEntry(label=f"{entry.name}/", size_bytes=size)
                for entry, size in ctx.largest_children(path, TOP_DIRECTORIES)
            ],
        )

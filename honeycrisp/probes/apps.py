from __future__ import annotations

import logging

from result import Err

from honeycrisp.models.enums import NodeKind, Safety
from honeycrisp.models.finding import BreakdownEntry
from honeycrisp.probes._base import ProbeContext
from honeycrisp.services.formatting import format_bytes
from honeycrisp.services.fs import DirEntry
from honeycrisp.services.safety import age_in_days, correlate_support_dir, is_stale, parse_timestamp

log = logging.getLogger(__name__)

APP_SUPPORT_TOP = 15


def scan_app_support(ctx: ProbeContext) -> None:
    app_support = ctx.home_path("Library", "Application Support")
    if not ctx.exists(app_support):
        ctx.skip(app_support)
        return

    total = ctx.measure(app_support)
    ctx.row("Application Support (total)", app_support, total, Safety.REVIEW)

    entries: list[BreakdownEntry] = []
    orphaned = 0
    for entry, size in ctx.largest_children(app_support, APP_SUPPORT_TOP):
        correlation = correlate_support_dir(entry.name, ctx.apps)
        if correlation.orphaned:
            orphaned += 1
        entries.append(
            BreakdownEntry(
                label=entry.name,
                size_bytes=size,
                note=correlation.note,
                flagged=correlation.orphaned,
            )
        )
    ctx.breakdown(f"Top {APP_SUPPORT_TOP} largest subdirectories", entries)
    if orphaned:
        ctx.note(f"{orphaned} folders have no matching app (best-effort match, verify before removing)")
    ctx.add("Application Support", total, Safety.REVIEW)


def _system_app_dir(ctx: ProbeContext) -> str:
    # the first configured application directory is the system-wide one
    dirs = ctx.config.application_dirs
    return ctx.fs.expanduser(dirs[0]) if dirs else "/Applications"


_ENGLISH_LPROJ = frozenset({"en.lproj", "Base.lproj", "en_US.lproj", "English.lproj"})


def _is_foreign_lproj(entry: DirEntry) -> bool:
    return entry.name.endswith(".lproj") and entry.name not in _ENGLISH_LPROJ


def scan_language_packs(ctx: ProbeContext) -> None:
    total = 0
    count = 0
    for path in ctx.find(
        _system_app_dir(ctx),
        _is_foreign_lproj,
        kind=NodeKind.DIRECTORY,
        max_depth=ctx.config.language_pack_max_depth,
        prune=True,
    ):
        total += ctx.measure(path)
        count += 1

    if total > 0:
        ctx.row("Non-English language packs", None, total, Safety.SAFE, note=f"{count} .lproj bundles")
        ctx.note("Use Monolingual app (free) to safely remove")
    else:
        ctx.note("No significant language pack leftovers found.")
    ctx.add("Language Packs", total, Safety.SAFE)


def _last_used(ctx: ProbeContext, app_path: str) -> float | None:
    outcome = ctx.run_tool("mdls", "-name", "kMDItemLastUsedDate", "-raw", app_path)
    if isinstance(outcome, Err):
        log.debug("no Spotlight data for %s: %s", app_path, outcome.unwrap_err())
        return None
    raw = outcome.unwrap().strip()
    if raw == "(null)" or "could not find" in raw:
        return None
    return parse_timestamp(raw)


def scan_unused_apps(ctx: ProbeContext) -> None:
    if not ctx.has_tool("mdls"):
        ctx.skip("Unused app scan (Spotlight unavailable)")
        return

    cutoff = ctx.config.unused_app_days
    no_data = 0
    stale_sizes: list[int] = []
    for entry in ctx.children(_system_app_dir(ctx), NodeKind.DIRECTORY):
        if not entry.name.endswith(".app"):
            continue
        last_used = _last_used(ctx, entry.path)
        age = age_in_days(last_used, ctx.now)
        if age is None:
            no_data += 1
            continue
        if is_stale(last_used, ctx.now, cutoff):
            size = ctx.measure(entry.path)
            ctx.row(entry.name, entry.path, size, Safety.REVIEW, note=f"Last used {age} days ago")
            stale_sizes.append(size)

    if stale_sizes:
        total = sum(stale_sizes)
        ctx.note(f"{len(stale_sizes)} apps not opened in over {cutoff} days ({format_bytes(total)})")
    else:
        ctx.note("No unused apps detected (based on Spotlight data).")
    if no_data:
        ctx.note(f"{no_data} apps had no Spotlight usage data and were skipped")
    ctx.note("Use AppCleaner (free) for thorough app removal")

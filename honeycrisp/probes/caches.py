from __future__ import annotations

from honeycrisp.models.enums import Safety
from honeycrisp.models.finding import BreakdownEntry
from honeycrisp.probes._base import ProbeContext

CACHES = "System & App Caches"


def scan_caches(ctx: ProbeContext) -> None:
    user_caches = ctx.home_path("Library", "Caches")
    if ctx.exists(user_caches):
        size = ctx.measure(user_caches)
        ctx.row("User Caches", user_caches, size, Safety.SAFE)
        ctx.add(CACHES, size, Safety.SAFE)
        top = ctx.largest_children(user_caches, ctx.config.top_count)
        ctx.breakdown(
            f"Top {ctx.config.top_count} cache directories",
            [BreakdownEntry(label=entry.name, size_bytes=size) for entry, size in top],
        )
    else:
        ctx.skip(user_caches)

    # registered after the user caches so the category keeps the more cautious label
    system_caches = "/Library/Caches"
    if ctx.exists(system_caches):
        size = ctx.measure(system_caches)
        ctx.row("System Caches", system_caches, size, Safety.REVIEW)
        ctx.add(CACHES, size, Safety.REVIEW)
        ctx.note("Some files may require sudo to inspect")
    else:
        ctx.skip(system_caches)

    os_caches = "/System/Library/Caches"
    if ctx.exists(os_caches):
        ctx.row("macOS System Caches", os_caches, ctx.measure(os_caches), Safety.CAUTION)
        ctx.note("Managed by macOS - do not modify")


_LOG_DIRS: tuple[tuple[str, str | None, Safety], ...] = (
    ("User Logs", None, Safety.SAFE),
    ("System Logs", "/Library/Logs", Safety.SAFE),
    ("System Logs (var)", "/var/log", Safety.REVIEW),
)


def scan_logs(ctx: ProbeContext) -> None:
    total = 0
    for label, path, safety in _LOG_DIRS:
        target = path or ctx.home_path("Library", "Logs")
        if not ctx.exists(target):
            ctx.skip(target)
            continue
        size = ctx.measure(target)
        ctx.row(label, target, size, safety)
        if target == "/var/log":
            ctx.note("Full details may require sudo")
        total += size
    ctx.add("Logs", total, Safety.SAFE)


# /tmp is an alias of /private/tmp on macOS; only the first existing one is measured
_TEMP_ALIASES = ("/private/tmp", "/tmp")


def scan_temp(ctx: ProbeContext) -> None:
    total = 0
    temp_dir = next((p for p in _TEMP_ALIASES if ctx.exists(p)), None)
    if temp_dir is not None:
        size = ctx.measure(temp_dir)
        ctx.row("Temp files", temp_dir, size, Safety.REVIEW)
        total += size

    per_user = "/var/folders"
    if ctx.exists(per_user):
        size = ctx.measure(per_user)
        ctx.row("macOS per-user temp", per_user, size, Safety.CAUTION)
        ctx.note("Managed by macOS - report only")
        total += size

    ctx.add("Temporary Files", total, Safety.REVIEW)


_BROWSERS: tuple[tuple[str, tuple[tuple[str, ...], ...]], ...] = (
    ("Safari", (("com.apple.Safari",),)),
    ("Chrome", (("Google", "Chrome"),)),
    ("Firefox", (("Firefox",),)),
    ("Arc", (("Company.Arc",), ("com.thebrowser.Browser",), ("Company", "Arc"))),
    ("Edge", (("Microsoft Edge",),)),
)


def scan_browsers(ctx: ProbeContext) -> None:
    total = 0
    for browser, candidates in _BROWSERS:
        paths = [ctx.home_path("Library", "Caches", *parts) for parts in candidates]
        path = next((p for p in paths if ctx.exists(p)), None)
        if path is None:
            ctx.skip(f"{browser} cache")
            continue
        size = ctx.measure(path)
        ctx.row(f"{browser} cache", path, size, Safety.SAFE)
        total += size
    ctx.add("Browser Caches", total, Safety.SAFE)

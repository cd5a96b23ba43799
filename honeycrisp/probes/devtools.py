from __future__ import annotations

from result import Ok

from honeycrisp.models.enums import NodeKind, Safety
from honeycrisp.models.finding import BreakdownEntry
from honeycrisp.probes._base import ProbeContext
from honeycrisp.services.fs import DirEntry

# (label, path under ~/Library/Developer, safety, summary category, breakdown heading)
_XCODE_TARGETS: tuple[tuple[str, tuple[str, ...], Safety, str, str | None], ...] = (
    ("Xcode DerivedData", ("Xcode", "DerivedData"), Safety.SAFE, "Xcode DerivedData", None),
    ("Xcode Archives", ("Xcode", "Archives"), Safety.REVIEW, "Xcode Archives", None),
    ("iOS DeviceSupport", ("Xcode", "iOS DeviceSupport"), Safety.REVIEW, "Xcode DeviceSupport", "Versions"),
    ("Simulator Devices", ("CoreSimulator", "Devices"), Safety.REVIEW, "Simulator Devices", None),
    ("Simulator Caches", ("CoreSimulator", "Caches"), Safety.SAFE, "Simulator Caches", None),
    ("Simulator Runtimes", ("CoreSimulator", "Volumes"), Safety.REVIEW, "Simulator Runtimes", "Runtimes"),
)


def scan_xcode(ctx: ProbeContext) -> None:
    developer = ctx.home_path("Library", "Developer")
    if not (ctx.exists("/Applications/Xcode.app") or ctx.exists(f"{developer}/Xcode")):
        ctx.skip("Xcode (not installed)")
        return

    found = 0
    for label, parts, safety, category, heading in _XCODE_TARGETS:
        path = "/".join([developer, *parts])
        if not ctx.exists(path):
            continue
        size = ctx.measure(path)
        ctx.row(label, path, size, safety)
        ctx.add(category, size, safety)
        found += size
        if heading is not None:
            ctx.breakdown(
                heading,
                [BreakdownEntry(label=entry.name, size_bytes=sz) for entry, sz in ctx.largest_children(path)],
            )
    if found == 0:
        ctx.note("Xcode directories are clean.")


_NODE_CACHES: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("npm cache", (".npm", "_cacache")),
    ("yarn cache", (".yarn", "cache")),
    ("pnpm store", (".pnpm-store",)),
)


def _is_node_modules(entry: DirEntry) -> bool:
    return entry.name == "node_modules"


def scan_node(ctx: ProbeContext) -> None:
    cache_total = 0
    for label, parts in _NODE_CACHES:
        path = ctx.home_path(*parts)
        if ctx.exists(path):
            size = ctx.measure(path)
            ctx.row(label, path, size, Safety.SAFE)
            cache_total += size

    if ctx.config.quick:
        ctx.skip("node_modules scan (--quick mode)")
    else:
        found = ctx.find(
            ctx.home_path(),
            _is_node_modules,
            kind=NodeKind.DIRECTORY,
            max_depth=ctx.config.node_modules_max_depth,
            limit=ctx.config.node_modules_limit,
            prune=True,
        )
        if found:
            sized = sorted(((path, ctx.measure(path)) for path in found), key=lambda item: (-item[1], item[0]))
            ctx.breakdown(
                f"Top {ctx.config.top_count} node_modules by size",
                [
                    BreakdownEntry(label=f"{path.rsplit('/', 2)[-2]}/node_modules", size_bytes=size, path=path)
                    for path, size in sized[: ctx.config.top_count]
                ],
            )
            modules_total = sum(size for _, size in sized)
            ctx.row("node_modules (total)", None, modules_total, Safety.REVIEW, note=f"{len(found)} directories")
            ctx.add("node_modules", modules_total, Safety.REVIEW)
        else:
            ctx.skip("node_modules directories")

    # package manager caches only; node_modules is its own category
    ctx.add("Node/npm/yarn Caches", cache_total, Safety.SAFE)


_PYTHON_PATHS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("pip cache", (".cache", "pip")),
    ("Miniconda packages", ("miniconda3", "pkgs")),
    ("Anaconda packages", ("anaconda3", "pkgs")),
    ("pyenv", (".pyenv",)),
)


def scan_python(ctx: ProbeContext) -> None:
    total = 0
    for label, parts in _PYTHON_PATHS:
        path = ctx.home_path(*parts)
        if ctx.exists(path):
            size = ctx.measure(path)
            ctx.row(label, path, size, Safety.SAFE)
            total += size
    if total == 0:
        ctx.note("No Python caches found.")
    ctx.add("Python/pip/conda", total, Safety.SAFE)


def _brew_path(ctx: ProbeContext, flag: str) -> str | None:
    outcome = ctx.run_tool("brew", flag)
    if isinstance(outcome, Ok):
        path = outcome.unwrap().strip()
        return path or None
    return None


def scan_homebrew(ctx: ProbeContext) -> None:
    total = 0
    if ctx.has_tool("brew"):
        cache = _brew_path(ctx, "--cache")
        if cache is not None and ctx.exists(cache):
            total = ctx.measure(cache)
            ctx.row("Homebrew cache", cache, total, Safety.SAFE)
            ctx.note("Clean with: brew cleanup --prune=all")

        cellar = _brew_path(ctx, "--cellar")
        if cellar is not None and ctx.exists(cellar):
            ctx.breakdown(
                f"Top {ctx.config.top_count} formulae by size",
                [
                    BreakdownEntry(label=entry.name, size_bytes=size)
                    for entry, size in ctx.largest_children(cellar, ctx.config.top_count)
                ],
            )
    else:
        ctx.skip("Homebrew (not installed)")
    ctx.add("Homebrew Cache", total, Safety.SAFE)


def scan_docker(ctx: ProbeContext) -> None:
    total = 0
    docker_dir = ctx.home_path("Library", "Containers", "com.docker.docker")
    if ctx.exists(docker_dir):
        total = ctx.measure(docker_dir)
        ctx.row("Docker data", docker_dir, total, Safety.REVIEW)
        ctx.note("Run 'docker system df' for detailed breakdown")
        ctx.note("Run 'docker system prune' to clean unused data")
    elif ctx.has_tool("docker"):
        ctx.note("Docker is installed but data directory not in default location.")
        ctx.note("Run 'docker system df' for space usage")
    else:
        ctx.skip("Docker (not installed)")
    ctx.add("Docker", total, Safety.REVIEW)

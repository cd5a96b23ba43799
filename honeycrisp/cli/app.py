from __future__ import annotations

import logging
import platform
import shutil
import sys
import threading
import time
from dataclasses import dataclass, replace
from typing import Annotated

import typer
from rich.console import Console, Group
from rich.live import Live
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.spinner import Spinner
from rich.text import Text
from result import Err

from honeycrisp import __version__
from honeycrisp.config.defaults import default_config
from honeycrisp.config.loader import load_config, sample_config_json
from honeycrisp.config.schema import AppConfig
from honeycrisp.probes import ProbeEnvironment, default_probes
from honeycrisp.services.formatting import format_bytes
from honeycrisp.services.report import build_report
from honeycrisp.services.runner import ScanOutcome, run_probes
from honeycrisp.services.summary import render_next_steps, render_sections, render_summary

console = Console()
log = logging.getLogger("honeycrisp")


@dataclass(slots=True)
class _ScanProgress:
    current: str
    finished: int
    total: int
    start_time: float


def _configure_logging(verbose: bool) -> None:
    handler = RichHandler(console=Console(stderr=True), show_path=False, rich_tracebacks=True)
    log.handlers[:] = [handler]
    log.setLevel(logging.DEBUG if verbose else logging.WARNING)
    log.propagate = False


def _render_scan_panel(progress: _ScanProgress, workers: int) -> Panel:
    elapsed = time.perf_counter() - progress.start_time
    body = Group(
        Spinner("dots", text=f"Scanning {progress.current}...", style="bold #8abeb7"),
        Text.from_markup(
            f"[#b5bd68]Probes:[/] {progress.finished}/{progress.total}"
            + f"    [#f0c674]Workers:[/] {workers}"
            + f"    [#de935f]Elapsed:[/] {elapsed:.1f}s"
        ),
    )
    return Panel(body, title="[bold #81a2be]honeycrisp - Auditing...[/]", border_style="#373b41")


def _scan_with_progress(env: ProbeEnvironment, out: Console) -> ScanOutcome:
    probes = default_probes(env.config.large_file_threshold_mb)
    lock = threading.Lock()
    done = threading.Event()
    outcome: ScanOutcome | None = None
    failure: BaseException | None = None
    progress = _ScanProgress(current="", finished=0, total=len(probes), start_time=time.perf_counter())

    def on_progress(title: str, finished: int, total: int) -> None:
        with lock:
            progress.current = title
            progress.finished = finished
            progress.total = total

    def scan_worker() -> None:
        nonlocal outcome, failure
        try:
            outcome = run_probes(probes, env, progress_callback=on_progress)
        except BaseException as exc:  # noqa: BLE001
            failure = exc
        finally:
            done.set()

    thread = threading.Thread(target=scan_worker, daemon=True)
    thread.start()
    with Live(_render_scan_panel(progress, env.config.workers), console=out, refresh_per_second=12, transient=True) as live:
        while not done.is_set():
            with lock:
                snapshot = replace(progress)
            live.update(_render_scan_panel(snapshot, env.config.workers))
            time.sleep(0.08)
    thread.join()
    if failure is not None:
        raise failure
    assert outcome is not None
    return outcome


def _print_banner(out: Console) -> None:
    out.print()
    out.print("[bold green]  H O N E Y C R I S P[/bold green]")
    out.print(f"[dim]  Mac Disk Audit Tool v{__version__}[/dim]")
    out.print()
    out.print("  [cyan]This tool is [bold]READ-ONLY[/bold]: it will [bold]never[/bold] delete, move, or modify any file.[/cyan]")
    out.print("  [dim]Tip: open any path in Finder with:  open <path>[/dim]")
    out.print()


def _print_overview(out: Console, config: AppConfig) -> None:
    out.rule("[bold blue]SYSTEM OVERVIEW[/bold blue]", align="left")
    mac_version = platform.mac_ver()[0]
    out.print(f"  [bold]OS[/bold]           {escape(f'macOS {mac_version}' if mac_version else platform.platform())}")
    out.print(f"  [bold]Hardware[/bold]     {escape(platform.machine() or 'Unknown')}")
    try:
        usage = shutil.disk_usage("/")
    except OSError as exc:
        log.debug("disk usage unavailable: %s", exc)
    else:
        pct = usage.used * 100 // usage.total if usage.total else 0
        out.print(f"  [bold]Disk Total[/bold]   {format_bytes(usage.total)}")
        out.print(f"  [bold]Disk Used[/bold]    {format_bytes(usage.used)} ({pct}% used)")
        out.print(f"  [bold]Disk Free[/bold]    {format_bytes(usage.free)}")
    if config.quick:
        out.print()
        out.print("  [yellow]Quick mode enabled -- skipping deep scans[/yellow]")
    out.print()


def run(
    quick: Annotated[bool, typer.Option("--quick", "-q", help="Skip slow deep scans (node_modules, large file finder).")] = False,
    no_color: Annotated[bool, typer.Option("--no-color", help="Disable colorized output.")] = False,
    threshold: Annotated[int | None, typer.Option("--threshold", "-t", help="Large file threshold in MB (default: 500).")] = None,
    output: Annotated[str | None, typer.Option("--output", "-o", help="Also write the report to a file.")] = None,
    workers: Annotated[int | None, typer.Option("--workers", "-w", help="Run probes on this many threads.")] = None,
    timeout: Annotated[float | None, typer.Option("--timeout", help="Per-probe timeout in seconds.")] = None,
    skip: Annotated[list[str] | None, typer.Option("--skip", help="Probe name to skip (repeatable).")] = None,
    list_probes: Annotated[bool, typer.Option("--list-probes", help="List probe names and exit.")] = False,
    sample_config: Annotated[bool, typer.Option("--sample-config", help="Print sample config JSON.")] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log absorbed errors.")] = False,
    version: Annotated[bool, typer.Option("--version", help="Show version.")] = False,
) -> None:
    """A read-only disk audit that estimates how much space you could reclaim."""
    if version:
        console.print(f"honeycrisp v{__version__}")
        raise typer.Exit(0)

    if sample_config:
        console.print(sample_config_json())
        raise typer.Exit(0)

    if list_probes:
        for probe in default_probes():
            console.print(f"{probe.name:<16} {escape(probe.title)}{'  [dim](slow)[/dim]' if probe.slow else ''}")
        raise typer.Exit(0)

    if sys.platform == "win32":
        console.print("[red]Windows is not supported.[/]")
        raise typer.Exit(1)

    _configure_logging(verbose)

    config_result = load_config()
    if isinstance(config_result, Err):
        console.print(f"[yellow]{escape(config_result.unwrap_err())} Using defaults.[/]")
        config = default_config()
    else:
        config = config_result.unwrap()

    known = {probe.name for probe in default_probes()}
    unknown = sorted(set(skip or []) - known)
    if unknown:
        console.print(f"[red]Unknown probe(s): {escape(', '.join(unknown))}. Use --list-probes.[/]")
        raise typer.Exit(1)

    overrides: dict[str, object] = {}
    if quick:
        overrides["quick"] = True
    if threshold is not None:
        if threshold < 1:
            console.print("[red]--threshold must be at least 1 MB.[/]")
            raise typer.Exit(1)
        overrides["large_file_threshold_mb"] = threshold
    if workers is not None:
        overrides["workers"] = max(1, workers)
    if timeout is not None:
        overrides["probe_timeout_seconds"] = timeout if timeout > 0 else None
    if skip:
        overrides["disabled_probes"] = [*config.disabled_probes, *skip]
    if overrides:
        config = replace(config, **overrides)

    out = Console(no_color=no_color or None, record=output is not None)

    _print_banner(out)
    _print_overview(out, config)

    # progress goes to the plain console so it never lands in the recorded report
    outcome = _scan_with_progress(ProbeEnvironment.default(config), console)
    render_sections(out, outcome.sections)

    out.print()
    render_summary(out, build_report(outcome.registry))
    out.print()
    render_next_steps(out)
    out.print()
    out.print(f"  [dim]honeycrisp v{__version__} -- scan complete.[/dim]")
    out.print("  [dim]Remember: this tool only reports. No files were modified.[/dim]")

    if output is not None:
        try:
            out.save_text(output)
        except OSError as exc:
            console.print(f"[red]Could not write {escape(output)}: {escape(str(exc))}[/]")
            raise typer.Exit(1)


def cli() -> None:
    typer.run(run)


if __name__ == "__main__":
    cli()

from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from honeycrisp.models.enums import ProbeStatus, Safety
from honeycrisp.models.finding import Breakdown, Section
from honeycrisp.models.report import SummaryReport
from honeycrisp.services.formatting import format_bytes, relative_bar

SAFETY_STYLES: dict[Safety, str] = {
    Safety.SAFE: "green",
    Safety.REVIEW: "yellow",
    Safety.CAUTION: "red",
}

NEXT_STEPS: tuple[tuple[str, str], ...] = (
    ("Caches", "Safe to delete manually or via System Settings > General > Storage. Apps rebuild caches as needed."),
    ("iOS Backups", "Finder > your device > Manage Backups, or browse ~/Library/Application Support/MobileSync/Backup"),
    ("Xcode DerivedData", "Xcode > Settings > Locations > Derived Data, or remove ~/Library/Developer/Xcode/DerivedData"),
    ("node_modules", "Delete and regenerate with 'npm install' in each project."),
    ("Homebrew", "brew cleanup --prune=all"),
    ("Trash", "Finder > Empty Trash"),
    ("Simulator Runtimes", "xcrun simctl delete unavailable, or Xcode > Settings > Platforms"),
    ("Language Packs", "Use Monolingual (free, open source) to remove unused language files."),
    ("Large Files", "Move to external storage or delete if unneeded."),
    ("Old/Unused Apps", "Use AppCleaner (free) for thorough removal including support files."),
    ("Docker", "docker system prune removes unused images, containers, and build cache."),
    ("Disk Images & Installers", "Delete .dmg/.pkg/.iso files once installed."),
)


def safety_markup(safety: Safety) -> str:
    style = SAFETY_STYLES[safety]
    return f"[{style}]{safety.value}[/{style}]"


def _breakdown_table(block: Breakdown) -> Table:
    table = Table(title=block.heading, title_justify="left", show_header=False, box=None, padding=(0, 2))
    table.add_column("Item")
    table.add_column("Size", justify="right")
    table.add_column("Detail", style="dim")
    for entry in block.entries:
        label = escape(entry.label)
        detail = escape(entry.note or entry.path or "")
        if entry.flagged:
            table.add_row(f"[yellow]{label}[/yellow]", f"[yellow]{format_bytes(entry.size_bytes)}[/yellow]", f"[yellow]! {detail}[/yellow]")
        else:
            table.add_row(label, format_bytes(entry.size_bytes) if entry.size_bytes else "", detail)
    return table


def render_section(console: Console, section: Section) -> None:
    console.rule(f"[bold blue]{escape(section.title)}[/bold blue]", align="left")
    if section.status is ProbeStatus.SKIPPED:
        for what in section.skipped:
            console.print(f"  [dim]- {escape(what)} -- skipping[/dim]")
        return
    if section.error is not None:
        console.print(f"  [red]! {escape(section.error)}[/red]")

    if section.findings:
        table = Table(show_header=False, box=None, padding=(0, 2))
        table.add_column("Safety")
        table.add_column("Label")
        table.add_column("Size", justify="right")
        table.add_column("Path", style="dim")
        for finding in section.findings:
            size = format_bytes(finding.size_bytes) if finding.path is not None or finding.size_bytes else ""
            table.add_row(
                f"[{SAFETY_STYLES[finding.safety]}]\\[{finding.safety.value.upper()}][/]",
                escape(finding.label),
                size,
                escape(finding.note or finding.path or ""),
            )
        console.print(table)

    for block in section.breakdowns:
        if block.entries:
            console.print(_breakdown_table(block))
    for what in section.skipped:
        console.print(f"  [dim]- {escape(what)} -- not found, skipping[/dim]")
    for note in section.notes:
        console.print(f"    [dim]> {escape(note)}[/dim]")


def render_sections(console: Console, sections: list[Section]) -> None:
    for section in sections:
        render_section(console, section)
        console.print()


def render_summary(console: Console, report: SummaryReport) -> None:
    table = Table(title="HONEYCRISP SUMMARY", header_style="bold cyan", title_style="bold green")
    table.add_column("Category")
    table.add_column("Found", justify="right")
    table.add_column("Safety")
    table.add_column("Share")
    for row in report.rows:
        table.add_row(
            escape(row.category),
            row.human_size,
            safety_markup(row.safety),
            relative_bar(row.size_bytes, report.grand_total_bytes),
        )
    table.add_section()
    table.add_row("[bold]TOTAL POTENTIAL SAVINGS[/bold]", f"[bold]{report.grand_total_human}[/bold]", "", "")
    console.print(table)


def render_next_steps(console: Console) -> None:
    table = Table(title="WHAT TO DO NEXT", title_style="bold cyan", show_header=False, box=None, padding=(0, 2))
    table.add_column("Topic", style="bold")
    table.add_column("Advice")
    for topic, advice in NEXT_STEPS:
        table.add_row(topic, escape(advice))
    console.print(table)

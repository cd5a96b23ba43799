from __future__ import annotations

from honeycrisp.probes._base import Probe, ProbeContext, ProbeEnvironment
from honeycrisp.probes.apps import scan_app_support, scan_language_packs, scan_unused_apps
from honeycrisp.probes.caches import scan_browsers, scan_caches, scan_logs, scan_temp
from honeycrisp.probes.devtools import scan_docker, scan_homebrew, scan_node, scan_python, scan_xcode
from honeycrisp.probes.media import (
    scan_downloads,
    scan_installers,
    scan_ios_backups,
    scan_large_files,
    scan_mail,
    scan_photos,
    scan_podcasts_music,
    scan_trash,
)
from honeycrisp.probes.system import scan_time_machine, scan_top_directories


def default_probes(large_file_threshold_mb: int = 500) -> list[Probe]:
    """The full audit, in the order sections are reported."""
    return [
        Probe("caches", "System & App Caches", scan_caches),
        Probe("logs", "Logs", scan_logs),
        Probe("temp", "Temporary Files", scan_temp),
        Probe("app_support", "Application Support", scan_app_support),
        Probe("browsers", "Browser Caches", scan_browsers),
        Probe("ios_backups", "iOS / iPhone Backups", scan_ios_backups),
        Probe("xcode", "Xcode & Developer Tools", scan_xcode),
        Probe("node", "Node / npm / Yarn / pnpm", scan_node),
        Probe("python", "Python / pip / conda", scan_python),
        Probe("homebrew", "Homebrew", scan_homebrew),
        Probe("docker", "Docker", scan_docker),
        Probe("trash", "Trash", scan_trash),
        Probe("installers", "Disk Images & Installers", scan_installers),
        Probe("mail", "Mail", scan_mail),
        Probe("photos", "Photos & Media", scan_photos),
        Probe("downloads", "Downloads - Old & Large Files", scan_downloads),
        Probe("language_packs", "Language Pack Leftovers", scan_language_packs, slow=True),
        Probe("time_machine", "Time Machine Local Snapshots", scan_time_machine),
        Probe("podcasts_music", "Podcasts & Music", scan_podcasts_music),
        Probe("unused_apps", "Unused Applications", scan_unused_apps, slow=True),
        Probe("large_files", f"Large File Finder (>{large_file_threshold_mb}MB)", scan_large_files, slow=True),
        Probe("top_directories", "Top 20 Largest Directories", scan_top_directories),
    ]


__all__ = [
    "Probe",
    "ProbeContext",
    "ProbeEnvironment",
    "default_probes",
]

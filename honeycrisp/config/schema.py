from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

MIB = 1024 * 1024


@dataclass(slots=True)
class AppConfig:
    large_file_threshold_mb: int = 500
    quick: bool = False
    workers: int = 1
    probe_timeout_seconds: float | None = None
    stale_backup_days: int = 180
    stale_download_days: int = 365
    unused_app_days: int = 180
    node_modules_max_depth: int = 6
    node_modules_limit: int = 100
    large_file_max_depth: int = 8
    large_file_limit: int = 50
    media_scan_depth: int = 2
    installer_scan_depth: int = 3
    photo_library_scan_depth: int = 4
    language_pack_max_depth: int = 8
    top_count: int = 10
    application_dirs: list[str] = field(default_factory=list)
    system_app_support: list[str] = field(default_factory=list)
    disabled_probes: list[str] = field(default_factory=list)

    @property
    def large_file_threshold_bytes(self) -> int:
        return self.large_file_threshold_mb * MIB

    def to_dict(self) -> dict[str, Any]:
        return {
            "largeFileThresholdMb": self.large_file_threshold_mb,
            "quick": self.quick,
            "workers": self.workers,
            "probeTimeoutSeconds": self.probe_timeout_seconds,
            "staleBackupDays": self.stale_backup_days,
            "staleDownloadDays": self.stale_download_days,
            "unusedAppDays": self.unused_app_days,
            "nodeModulesMaxDepth": self.node_modules_max_depth,
            "nodeModulesLimit": self.node_modules_limit,
            "largeFileMaxDepth": self.large_file_max_depth,
            "largeFileLimit": self.large_file_limit,
            "mediaScanDepth": self.media_scan_depth,
            "installerScanDepth": self.installer_scan_depth,
            "photoLibraryScanDepth": self.photo_library_scan_depth,
            "languagePackMaxDepth": self.language_pack_max_depth,
            "topCount": self.top_count,
            "applicationDirs": self.application_dirs,
            "systemAppSupport": self.system_app_support,
            "disabledProbes": self.disabled_probes,
        }


def _timeout(value: Any) -> float | None:
    if value is None:
        return None
    seconds = float(value)
    return seconds if seconds > 0 else None


def from_dict(data: dict[str, Any], defaults: AppConfig) -> AppConfig:
    def depth(key: str, default: int) -> int:
        return max(1, int(data.get(key, default)))

    return AppConfig(
        large_file_threshold_mb=max(1, int(data.get("largeFileThresholdMb", defaults.large_file_threshold_mb))),
        quick=bool(data.get("quick", defaults.quick)),
        workers=max(1, int(data.get("workers", defaults.workers))),
        probe_timeout_seconds=_timeout(data.get("probeTimeoutSeconds", defaults.probe_timeout_seconds)),
        stale_backup_days=max(0, int(data.get("staleBackupDays", defaults.stale_backup_days))),
        stale_download_days=max(0, int(data.get("staleDownloadDays", defaults.stale_download_days))),
        unused_app_days=max(0, int(data.get("unusedAppDays", defaults.unused_app_days))),
        node_modules_max_depth=depth("nodeModulesMaxDepth", defaults.node_modules_max_depth),
        node_modules_limit=max(1, int(data.get("nodeModulesLimit", defaults.node_modules_limit))),
        large_file_max_depth=depth("largeFileMaxDepth", defaults.large_file_max_depth),
        large_file_limit=max(1, int(data.get("largeFileLimit", defaults.large_file_limit))),
        media_scan_depth=depth("mediaScanDepth", defaults.media_scan_depth),
        installer_scan_depth=depth("installerScanDepth", defaults.installer_scan_depth),
        photo_library_scan_depth=depth("photoLibraryScanDepth", defaults.photo_library_scan_depth),
        language_pack_max_depth=depth("languagePackMaxDepth", defaults.language_pack_max_depth),
        top_count=max(1, int(data.get("topCount", defaults.top_count))),
        application_dirs=[str(x) for x in data.get("applicationDirs", defaults.application_dirs)],
        system_app_support=[str(x) for x in data.get("systemAppSupport", defaults.system_app_support)],
        disabled_probes=[str(x) for x in data.get("disabledProbes", defaults.disabled_probes)],
    )

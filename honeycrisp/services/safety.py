from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from fnmatch import fnmatchcase
from typing import Protocol

from honeycrisp.models.enums import NodeKind, Safety
from honeycrisp.services.fs import DEFAULT_FS, FileSystem
from honeycrisp.services.walk import list_children

SECONDS_PER_DAY = 86400

# Application Support entries owned by macOS itself, never third-party leftovers.
SYSTEM_APP_SUPPORT: tuple[str, ...] = (
    "AddressBook",
    "Caches",
    "CallHistoryDB",
    "CallHistoryTransactions",
    "CloudDocs",
    "CrashReporter",
    "FileProvider",
    "Knowledge",
    "SyncServices",
    "icdd",
    "tts",
    "com.apple.*",
    "Apple",
    "FaceTime",
    "iCloud*",
    "MobileSync",
    "ScreenTimeAgent",
    "StatusKit*",
    "Dock",
    "Chromium",
    "ATS",
    "SpeechSynthesizer",
)

APP_NOT_FOUND = "App not found in /Applications"

_SPOTLIGHT_FORMATS = ("%Y-%m-%d %H:%M:%S %z", "%Y-%m-%d %H:%M:%S")


# --- age-based staleness ---


def age_in_days(timestamp: float | None, now: float) -> int | None:
    """Whole days between *timestamp* and *now*; None if unusable."""
    if timestamp is None or not math.isfinite(timestamp) or timestamp <= 0:
        return None
    return int((now - timestamp) // SECONDS_PER_DAY)


def classify_age(age_days: int, cutoff_days: int) -> Safety:
    """Safe only when strictly older than the cutoff."""
    return Safety.SAFE if age_days > cutoff_days else Safety.REVIEW


def classify_timestamp(timestamp: float | None, now: float, cutoff_days: int) -> Safety | None:
    age = age_in_days(timestamp, now)
    if age is None:
        return None
    return classify_age(age, cutoff_days)


def is_stale(timestamp: float | None, now: float, cutoff_days: int) -> bool:
    return classify_timestamp(timestamp, now, cutoff_days) is Safety.SAFE


def parse_timestamp(raw: str | None) -> float | None:
    """Parse a Spotlight date such as ``2023-01-05 10:20:30 +0000``."""
    if not raw:
        return None
    text = raw.strip()
    for fmt in _SPOTLIGHT_FORMATS:
        try:
            return datetime.strptime(text, fmt).timestamp()
        except ValueError:
            continue
    return None


# --- installed-application correlation ---


class AppPresence(Protocol):
    def exists(self, name: str) -> bool: ...


class InstalledApps:
    """Best-effort lookup of whether an application is installed.

    Matching is fuzzy: renamed apps or vendor IDs that differ from the
    display name will read as missing.
    """

    def __init__(
        self,
        app_dirs: list[str],
        *,
        fs: FileSystem = DEFAULT_FS,
        system_allowlist: tuple[str, ...] = SYSTEM_APP_SUPPORT,
    ) -> None:
        self._app_dirs = [fs.expanduser(d) for d in app_dirs]
        self._fs = fs
        self._allowlist = system_allowlist
        self._listing: list[str] | None = None

    def is_system(self, name: str) -> bool:
        return any(fnmatchcase(name, pattern) for pattern in self._allowlist)

    def _names(self) -> list[str]:
        if self._listing is None:
            self._listing = [
                entry.name.lower()
                for app_dir in self._app_dirs
                for entry in list_children(app_dir, fs=self._fs, kind=NodeKind.DIRECTORY)
            ]
        return self._listing

    def exists(self, name: str) -> bool:
        if self.is_system(name):
            return True
        if not name:
            return False
        for app_dir in self._app_dirs:
            if self._fs.is_dir(f"{app_dir}/{name}.app") or self._fs.is_dir(f"{app_dir}/{name}"):
                return True
        needle = name.lower()
        return any(needle in entry for entry in self._names())


@dataclass(slots=True, frozen=True)
class Correlation:
    safety: Safety
    orphaned: bool
    note: str = ""


def correlate_support_dir(name: str, apps: AppPresence) -> Correlation:
    if apps.exists(name):
        return Correlation(safety=Safety.REVIEW, orphaned=False)
    return Correlation(safety=Safety.REVIEW, orphaned=True, note=APP_NOT_FOUND)

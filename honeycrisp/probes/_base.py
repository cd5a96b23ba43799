from __future__ import annotations

import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from result import Result

from honeycrisp.config.schema import AppConfig
from honeycrisp.models.enums import NodeKind, Safety
from honeycrisp.models.finding import Breakdown, BreakdownEntry, Contribution, Finding, Section
from honeycrisp.models.scan import ProbeCancelled
from honeycrisp.services import sizing, walk
from honeycrisp.services.fs import DEFAULT_FS, DirEntry, FileSystem
from honeycrisp.services.safety import SYSTEM_APP_SUPPORT, AppPresence, InstalledApps
from honeycrisp.services.tools import DEFAULT_TOOLS, ToolRunner


@dataclass(slots=True)
class ProbeEnvironment:
    """Collaborators shared by every probe in one run."""

    config: AppConfig
    home: str
    fs: FileSystem = DEFAULT_FS
    tools: ToolRunner = DEFAULT_TOOLS
    apps: AppPresence | None = None
    now: float = field(default_factory=time.time)
    volumes_root: str = "/Volumes"

    def __post_init__(self) -> None:
        if self.apps is None:
            allowlist = tuple(self.config.system_app_support) or SYSTEM_APP_SUPPORT
            self.apps = InstalledApps(self.config.application_dirs, fs=self.fs, system_allowlist=allowlist)

    @classmethod
    def default(cls, config: AppConfig) -> ProbeEnvironment:
        return cls(config=config, home=str(Path.home()))


class ProbeContext:
    """What a probe reports through.

    Rows and notes go to the probe's ``Section`` for display; ``add`` calls
    are buffered and committed to the registry by the runner once the probe
    finishes, so a cancelled probe leaves no partial totals behind.
    """

    def __init__(self, section: Section, env: ProbeEnvironment, deadline: float | None = None) -> None:
        self.section = section
        self.env = env
        self._deadline = deadline
        self._contributions: list[Contribution] = []

    @property
    def config(self) -> AppConfig:
        return self.env.config

    @property
    def fs(self) -> FileSystem:
        return self.env.fs

    @property
    def now(self) -> float:
        return self.env.now

    @property
    def apps(self) -> AppPresence:
        assert self.env.apps is not None
        return self.env.apps

    @property
    def contributions(self) -> list[Contribution]:
        return list(self._contributions)

    # --- cancellation ---

    def cancelled(self) -> bool:
        return self._deadline is not None and time.monotonic() >= self._deadline

    def check_cancelled(self) -> None:
        if self.cancelled():
            raise ProbeCancelled(self.section.name)

    # --- filesystem ---

    def home_path(self, *parts: str) -> str:
        return "/".join([self.env.home.rstrip("/"), *parts])

    def exists(self, path: str) -> bool:
        return self.fs.exists(path)

    def measure(self, path: str) -> int:
        return sizing.measure(path, fs=self.fs, cancel_check=self.cancelled)

    def file_size(self, path: str) -> int:
        return sizing.file_size(path, fs=self.fs)

    def children(self, path: str, kind: NodeKind | None = None) -> list[DirEntry]:
        self.check_cancelled()
        return walk.list_children(path, fs=self.fs, kind=kind)

    def find(
        self,
        root: str,
        match: walk.EntryPredicate,
        *,
        kind: NodeKind | None = None,
        max_depth: int | None = None,
        limit: int | None = None,
        prune: bool = False,
        exclude: walk.EntryPredicate | None = None,
    ) -> list[str]:
        return walk.find(
            root,
            match,
            fs=self.fs,
            kind=kind,
            max_depth=max_depth,
            limit=limit,
            prune=prune,
            exclude=exclude,
            cancel_check=self.cancelled,
        )

    def largest_children(self, path: str, limit: int | None = None) -> list[tuple[DirEntry, int]]:
        """Measure each subdirectory of *path*, largest first."""
        sized = [(entry, self.measure(entry.path)) for entry in self.children(path, NodeKind.DIRECTORY)]
        sized.sort(key=lambda item: (-item[1], item[0].name))
        return sized[:limit] if limit is not None else sized

    # --- external tools ---

    def has_tool(self, tool: str) -> bool:
        return self.env.tools.available(tool)

    def run_tool(self, *args: str) -> Result[str, str]:
        self.check_cancelled()
        return self.env.tools.run(list(args))

    # --- reporting ---

    def emit(self, finding: Finding) -> Finding:
        self.section.findings.append(finding)
        return finding

    def row(self, label: str, path: str | None, size_bytes: int, safety: Safety, note: str = "") -> Finding:
        return self.emit(Finding(label=label, path=path, size_bytes=size_bytes, safety=safety, note=note))

    def breakdown(self, heading: str, entries: list[BreakdownEntry] | None = None) -> Breakdown:
        block = Breakdown(heading=heading, entries=list(entries or []))
        self.section.breakdowns.append(block)
        return block

    def note(self, text: str) -> None:
        self.section.notes.append(text)

    def skip(self, what: str) -> None:
        self.section.skipped.append(what)

    def add(self, category: str, size_bytes: int, safety: Safety) -> None:
        self._contributions.append(Contribution(category=category, size_bytes=max(0, size_bytes), safety=safety))


ProbeFunc = Callable[[ProbeContext], None]


@dataclass(slots=True, frozen=True)
class Probe:
    name: str
    title: str
    func: ProbeFunc
    slow: bool = False

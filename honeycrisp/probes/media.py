from __future__ import annotations

import logging
from datetime import datetime

from honeycrisp.models.enums import NodeKind, Safety
from honeycrisp.models.finding import BreakdownEntry
from honeycrisp.probes._base import ProbeContext
from honeycrisp.services.fs import DirEntry, StatResult
from honeycrisp.services.safety import age_in_days, classify_age, is_stale
from honeycrisp.services.walk import EntryPredicate

log = logging.getLogger(__name__)

_INSTALLER_SUFFIXES = (".dmg", ".pkg", ".iso")
_VIDEO_SUFFIXES = (".mp4", ".mov", ".avi", ".mkv")
PHOTOS_LIBRARY = "Photos Library.photoslibrary"


def _date(timestamp: float) -> str:
    if timestamp <= 0:
        return "unknown"
    return datetime.fromtimestamp(timestamp).strftime("%Y-%m-%d")


def _has_suffix(suffixes: tuple[str, ...]) -> EntryPredicate:
    def match(entry: DirEntry) -> bool:
        return entry.name.lower().endswith(suffixes)

    return match


def scan_ios_backups(ctx: ProbeContext) -> None:
    backup_dir = ctx.home_path("Library", "Application Support", "MobileSync", "Backup")
    total = 0
    if ctx.exists(backup_dir):
        cutoff = ctx.config.stale_backup_days
        for entry in ctx.children(backup_dir, NodeKind.DIRECTORY):
            size = ctx.measure(entry.path)
            mtime = entry.stat.mtime if entry.stat is not None else 0.0
            age = age_in_days(mtime, ctx.now)
            safety = classify_age(age, cutoff) if age is not None else Safety.REVIEW
            note = _date(mtime)
            if safety is Safety.SAFE:
                note += f" ({age} days old, likely safe to remove)"
            ctx.row(f"Backup {entry.name[:12]}...", entry.path, size, safety, note=note)
            total += size
        if total == 0:
            ctx.note("No backups found.")
    else:
        ctx.skip("iOS Backups")
    ctx.add("iOS Backups", total, Safety.REVIEW)


def scan_trash(ctx: ProbeContext) -> None:
    total = 0
    trash = ctx.home_path(".Trash")
    if ctx.exists(trash):
        size = ctx.measure(trash)
        items = len(ctx.children(trash))
        ctx.row(f"Trash ({items} items)", trash, size, Safety.SAFE)
        total += size

    for volume in ctx.children(ctx.env.volumes_root, NodeKind.DIRECTORY):
        trashes = f"{volume.path}/.Trashes"
        if not ctx.exists(trashes):
            continue
        size = ctx.measure(trashes)
        if size > 0:
            ctx.row(f"Trash on {volume.name}", trashes, size, Safety.SAFE)
            total += size
    ctx.add("Trash", total, Safety.SAFE)


def scan_installers(ctx: ProbeContext) -> None:
    total = 0
    for folder in ("Downloads", "Desktop", "Documents"):
        root = ctx.home_path(folder)
        if not ctx.exists(root):
            continue
        found = ctx.find(
            root,
            _has_suffix(_INSTALLER_SUFFIXES),
            kind=NodeKind.FILE,
            max_depth=ctx.config.installer_scan_depth,
        )
        if not found:
            continue
        entries: list[BreakdownEntry] = []
        for path in found:
            size = ctx.file_size(path)
            entries.append(BreakdownEntry(label=path.rsplit("/", 1)[-1], size_bytes=size, path=path))
            total += size
        ctx.breakdown(f"In {folder}", entries)
    if total == 0:
        ctx.note("No .dmg, .pkg, or .iso files found.")
    ctx.add("Disk Images/Installers", total, Safety.REVIEW)


def scan_mail(ctx: ProbeContext) -> None:
    total = 0
    mail_dir = ctx.home_path("Library", "Mail")
    if ctx.exists(mail_dir):
        size = ctx.measure(mail_dir)
        ctx.row("Mail data", mail_dir, size, Safety.REVIEW)
        ctx.breakdown(
            "Top-level breakdown",
            [
                BreakdownEntry(label=entry.name, size_bytes=sz)
                for entry, sz in ctx.largest_children(mail_dir, ctx.config.top_count)
            ],
        )
        total += size

    container = ctx.home_path("Library", "Containers", "com.apple.mail")
    if ctx.exists(container):
        size = ctx.measure(container)
        ctx.row("Mail container/attachments", container, size, Safety.REVIEW)
        total += size

    if total == 0:
        ctx.note("No Mail data found.")
    ctx.add("Mail", total, Safety.REVIEW)


def scan_photos(ctx: ProbeContext) -> None:
    total = 0
    main_library = ctx.home_path("Pictures", PHOTOS_LIBRARY)
    if ctx.exists(main_library):
        size = ctx.measure(main_library)
        ctx.row("Photos Library", main_library, size, Safety.CAUTION)
        ctx.note("Size depends on whether originals or optimized storage is used")
        total += size

    others = ctx.find(
        ctx.home_path(),
        lambda entry: entry.name.endswith(".photoslibrary"),
        max_depth=ctx.config.photo_library_scan_depth,
        prune=True,
        exclude=lambda entry: entry.path == main_library,
    )
    for library in others:
        size = ctx.measure(library)
        ctx.row("Photo Library", library, size, Safety.REVIEW)
        total += size

    videos: list[BreakdownEntry] = []
    for folder in ("Downloads", "Desktop"):
        root = ctx.home_path(folder)
        if not ctx.exists(root):
            continue
        for path in ctx.find(root, _has_suffix(_VIDEO_SUFFIXES), kind=NodeKind.FILE, max_depth=ctx.config.media_scan_depth):
            size = ctx.file_size(path)
            videos.append(BreakdownEntry(label=path.rsplit("/", 1)[-1], size_bytes=size, path=path))
            total += size
    ctx.breakdown("Video files in Downloads & Desktop", videos)
    ctx.add("Photos & Media", total, Safety.CAUTION)


def scan_downloads(ctx: ProbeContext) -> None:
    total = 0
    downloads = ctx.home_path("Downloads")
    if ctx.exists(downloads):
        files = [(entry.name, entry.stat) for entry in ctx.children(downloads, NodeKind.FILE) if entry.stat is not None]
        largest = sorted(files, key=lambda item: (-item[1].size, item[0]))[:20]
        ctx.breakdown(
            "Top 20 largest files",
            [BreakdownEntry(label=name, size_bytes=st.size, note=_date(st.mtime)) for name, st in largest],
        )

        # downloads are read, not written, when used: staleness goes by access time
        cutoff = ctx.config.stale_download_days
        old = [st for _, st in files if is_stale(st.atime, ctx.now, cutoff)]
        old_total = sum(st.size for st in old)
        if old and old_total > 0:
            word = "file" if len(old) == 1 else "files"
            ctx.row(f"Old Downloads ({len(old)} {word})", downloads, old_total, Safety.REVIEW, note=f"Not accessed in over {cutoff} days")
            total = old_total
        else:
            ctx.note(f"No downloads unused for over {cutoff} days.")
    else:
        ctx.skip(downloads)
    ctx.add("Old Downloads", total, Safety.REVIEW)


def scan_podcasts_music(ctx: ProbeContext) -> None:
    total = 0
    containers = ctx.home_path("Library", "Group Containers")
    for entry in ctx.children(containers):
        if "podcasts" not in entry.name:
            continue
        size = ctx.measure(entry.path)
        ctx.row("Podcasts", entry.path, size, Safety.SAFE)
        total += size

    for folder in ("iTunes", "Music"):
        path = ctx.home_path("Music", folder)
        if ctx.exists(path):
            size = ctx.measure(path)
            ctx.row(f"{folder} library", path, size, Safety.REVIEW)
            total += size

    if total == 0:
        ctx.note("No significant podcast/music data found.")
    ctx.add("Podcasts & Music", total, Safety.REVIEW)


_LARGE_FILE_EXCLUDES = (".photoslibrary", ".Trash")


def _excluded_from_large_files(entry: DirEntry) -> bool:
    return entry.name.endswith(_LARGE_FILE_EXCLUDES) or entry.name.startswith("Time Machine")


def scan_large_files(ctx: ProbeContext) -> None:
    threshold = ctx.config.large_file_threshold_bytes
    found = ctx.find(
        ctx.home_path(),
        lambda entry: entry.stat is not None and entry.stat.size > threshold,
        kind=NodeKind.FILE,
        max_depth=ctx.config.large_file_max_depth,
        limit=ctx.config.large_file_limit,
        exclude=_excluded_from_large_files,
    )
    sized: list[tuple[str, StatResult]] = []
    for path in found:
        try:
            sized.append((path, ctx.fs.stat(path)))
        except OSError as exc:
            log.debug("large file vanished during scan: %s: %s", path, exc)
    sized.sort(key=lambda item: (-item[1].size, item[0]))
    home = ctx.home_path()
    for path, st in sized[:20]:
        display = "~" + path[len(home) :] if path.startswith(home + "/") else path
        ctx.row(display, path, st.size, Safety.REVIEW, note=_date(st.mtime))
    if not found:
        ctx.note(f"No files over {ctx.config.large_file_threshold_mb}MB found.")
    ctx.add(f"Large Files (>{ctx.config.large_file_threshold_mb}MB)", sum(st.size for _, st in sized), Safety.REVIEW)

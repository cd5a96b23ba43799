from __future__ import annotations

import logging

from honeycrisp.models.scan import CancelCheck, ProbeCancelled
from honeycrisp.services.fs import DEFAULT_FS, FileSystem, StatResult

log = logging.getLogger(__name__)


def _entry_bytes(st: StatResult, apparent: bool) -> int:
    if apparent:
        # logical size counts file contents only
        return 0 if st.is_dir else st.size
    return st.disk_usage


def measure(
    path: str,
    *,
    fs: FileSystem = DEFAULT_FS,
    apparent: bool = False,
    cancel_check: CancelCheck | None = None,
) -> int:
    """Return the footprint of *path* in bytes, or 0 when it cannot be read.

    Symlinks are never followed, so an alias is charged only for the link
    itself. Hard links are counted once per ``(device, inode)``. A directory
    that cannot be listed measures 0; an unreadable subdirectory contributes
    only its own entry. Raises ``ProbeCancelled`` only when *cancel_check*
    fires.
    """
    try:
        root = fs.stat(path)
    except OSError as exc:
        log.debug("measure: cannot stat %s: %s", path, exc)
        return 0

    if not root.is_dir:
        return max(0, _entry_bytes(root, apparent))

    seen: set[tuple[int, int]] = set()
    total = 0
    stack: list[str] = [path]
    while stack:
        if cancel_check is not None and cancel_check():
            raise ProbeCancelled(path)
        current = stack.pop()
        try:
            for entry in fs.scandir(current):
                st = entry.stat
                if st is None:
                    continue
                if st.inode and not st.is_dir:
                    key = (st.device, st.inode)
                    if key in seen:
                        continue
                    seen.add(key)
                total += _entry_bytes(st, apparent)
                if st.is_dir and not st.is_symlink:
                    stack.append(entry.path)
        except OSError as exc:
            log.debug("measure: cannot list %s: %s", current, exc)
            if current == path:
                return 0
    return max(0, total + _entry_bytes(root, apparent))


def file_size(path: str, *, fs: FileSystem = DEFAULT_FS) -> int:
    """Apparent size of a single file from metadata, 0 on any failure."""
    try:
        return max(0, fs.stat(path).size)
    except OSError:
        return 0

from __future__ import annotations

import logging
from typing import Callable

from honeycrisp.models.enums import NodeKind
from honeycrisp.models.scan import CancelCheck, ProbeCancelled
from honeycrisp.services.fs import DEFAULT_FS, DirEntry, FileSystem

log = logging.getLogger(__name__)

EntryPredicate = Callable[[DirEntry], bool]


def _kind_matches(entry: DirEntry, kind: NodeKind | None) -> bool:
    st = entry.stat
    if st is None or st.is_symlink:
        return False
    if kind is None:
        return True
    return st.is_dir is (kind is NodeKind.DIRECTORY)


def list_children(path: str, *, fs: FileSystem = DEFAULT_FS, kind: NodeKind | None = None) -> list[DirEntry]:
    """Immediate children of *path* sorted by name; empty when unreadable."""
    try:
        entries = list(fs.scandir(path))
    except OSError as exc:
        log.debug("list_children: cannot list %s: %s", path, exc)
        return []
    return sorted((e for e in entries if _kind_matches(e, kind)), key=lambda e: e.name)


def find(
    root: str,
    match: EntryPredicate,
    *,
    fs: FileSystem = DEFAULT_FS,
    kind: NodeKind | None = None,
    max_depth: int | None = None,
    limit: int | None = None,
    prune: bool = False,
    exclude: EntryPredicate | None = None,
    cancel_check: CancelCheck | None = None,
) -> list[str]:
    """Depth-first search below *root*, similar to ``find -maxdepth``.

    The root's children are at depth 1. Excluded entries are skipped with
    their subtree; with *prune* a matched directory is not descended into.
    At most *limit* paths are returned, in name-sorted traversal order.
    """
    found: list[str] = []
    stack: list[tuple[str, int]] = [(root, 0)]
    while stack:
        if cancel_check is not None and cancel_check():
            raise ProbeCancelled(root)
        current, depth = stack.pop()
        children = list_children(current, fs=fs)
        descend: list[str] = []
        for entry in children:
            st = entry.stat
            if st is None:
                continue
            if exclude is not None and exclude(entry):
                continue
            matched = _kind_matches(entry, kind) and match(entry)
            if matched:
                found.append(entry.path)
                if limit is not None and len(found) >= limit:
                    return found
            is_walkable = st.is_dir and not st.is_symlink
            if is_walkable and not (matched and prune) and (max_depth is None or depth + 1 < max_depth):
                descend.append(entry.path)
        # reversed so the stack pops children in name order
        for child in reversed(descend):
            stack.append((child, depth + 1))
    return found

from __future__ import annotations

from dataclasses import dataclass
from pathlib import PurePosixPath

from honeycrisp.services.fs import DirEntry, StatResult


@dataclass
class _MockEntry:
    is_dir: bool
    size: int
    content: str
    disk_usage: int = 0
    mtime: float = 0.0
    atime: float = 0.0
    is_symlink: bool = False
    unreadable: bool = False
    inode: int = 0


class MemoryFileSystem:
    def __init__(self, home: str = "/mock/home") -> None:
        self.home = home
        self._entries: dict[str, _MockEntry] = {}

    def _ensure_parents(self, key: str) -> None:
        for parent in reversed(PurePosixPath(key).parents):
            pk = str(parent)
            if pk not in self._entries:
                self._entries[pk] = _MockEntry(is_dir=True, size=0, content="")

    def add_dir(
        self, path: str, mtime: float = 0.0, unreadable: bool = False, disk_usage: int = 0
    ) -> MemoryFileSystem:
        key = self._normalize(path)
        self._ensure_parents(key)
        self._entries[key] = _MockEntry(
            is_dir=True, size=0, content="", disk_usage=disk_usage, mtime=mtime, unreadable=unreadable
        )
        return self

    def add_file(
        self,
        path: str,
        size: int = 0,
        content: str = "",
        disk_usage: int | None = None,
        mtime: float = 0.0,
        atime: float = 0.0,
        inode: int = 0,
    ) -> MemoryFileSystem:
        key = self._normalize(path)
        self._ensure_parents(key)
        self._entries[key] = _MockEntry(
            is_dir=False,
            size=size,
            content=content,
            disk_usage=disk_usage if disk_usage is not None else size,
            mtime=mtime,
            atime=atime,
            inode=inode,
        )
        return self

    def add_symlink(self, path: str) -> MemoryFileSystem:
        key = self._normalize(path)
        self._ensure_parents(key)
        self._entries[key] = _MockEntry(is_dir=False, size=0, content="", is_symlink=True)
        return self

    def expanduser(self, path: str) -> str:
        return path.replace("~", self.home, 1) if path.startswith("~") else path

    def exists(self, path: str) -> bool:
        return self._normalize(path) in self._entries

    def is_dir(self, path: str) -> bool:
        entry = self._entries.get(self._normalize(path))
        return entry is not None and entry.is_dir

    @staticmethod
    def _stat_of(entry: _MockEntry) -> StatResult:
        return StatResult(
            size=entry.size,
            is_dir=entry.is_dir,
            disk_usage=entry.disk_usage,
            mtime=entry.mtime,
            atime=entry.atime,
            is_symlink=entry.is_symlink,
            inode=entry.inode,
            device=1 if entry.inode else 0,
        )

    def stat(self, path: str) -> StatResult:
        key = self._normalize(path)
        entry = self._entries.get(key)
        if entry is None:
            raise OSError(f"No such file or directory: '{key}'")
        return self._stat_of(entry)

    def read_text(self, path: str, encoding: str = "utf-8") -> str:
        key = self._normalize(path)
        entry = self._entries.get(key)
        if entry is None:
            raise OSError(f"No such file or directory: '{key}'")
        return entry.content

    def scandir(self, path: str) -> list[DirEntry]:
        key = self._normalize(path)
        entry = self._entries.get(key)
        if entry is None:
            raise OSError(f"No such file or directory: '{key}'")
        if entry.unreadable:
            raise PermissionError(f"Permission denied: '{key}'")
        prefix = key.rstrip("/") + "/"
        result: list[DirEntry] = []
        seen: set[str] = set()
        for p in self._entries:
            if not p.startswith(prefix) or p == prefix.rstrip("/"):
                continue
            child_name = p[len(prefix) :].split("/", 1)[0]
            child_path = prefix + child_name
            if child_path not in seen:
                seen.add(child_path)
                child_entry = self._entries.get(child_path)
                st = self._stat_of(child_entry) if child_entry is not None else None
                result.append(DirEntry(path=child_path, name=child_name, stat=st))
        return result

    @staticmethod
    def _normalize(path: str) -> str:
        return path.rstrip("/") or "/"

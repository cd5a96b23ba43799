from __future__ import annotations

import os
import tempfile

import pytest

from honeycrisp.models.scan import ProbeCancelled
from honeycrisp.services.sizing import file_size, measure
from tests.fs_mock import MemoryFileSystem


def test_measure_directory_tree() -> None:
    fs = (
        MemoryFileSystem()
        .add_file("/data/a.bin", size=100, disk_usage=4096)
        .add_file("/data/sub/b.bin", size=200, disk_usage=4096)
        .add_file("/data/sub/deeper/c.bin", size=300, disk_usage=4096)
    )

    assert measure("/data", fs=fs) == 3 * 4096
    assert measure("/data", fs=fs, apparent=True) == 600


def test_missing_path_is_zero() -> None:
    assert measure("/nope", fs=MemoryFileSystem()) == 0
    assert file_size("/nope", fs=MemoryFileSystem()) == 0


def test_unreadable_root_is_zero() -> None:
    fs = MemoryFileSystem().add_dir("/locked", unreadable=True, disk_usage=4096)
    fs.add_file("/locked/inside.bin", size=10_000)

    assert measure("/locked", fs=fs) == 0
    assert measure("/locked", fs=fs, apparent=True) == 0


def test_partial_measurement_counts_readable_parts() -> None:
    fs = MemoryFileSystem().add_dir("/data", disk_usage=4096).add_file("/data/ok.bin", size=10)
    fs.add_dir("/data/private", unreadable=True, disk_usage=4096)
    fs.add_file("/data/private/secret.bin", size=1000)

    assert measure("/data", fs=fs) == 4096 + 10 + 4096


def test_symlinks_are_not_followed() -> None:
    fs = MemoryFileSystem().add_file("/data/real.bin", size=10).add_symlink("/data/alias")
    fs.add_file("/elsewhere/huge.bin", size=10_000)

    assert measure("/data", fs=fs) == 10


def test_hard_links_counted_once() -> None:
    fs = (
        MemoryFileSystem()
        .add_file("/data/one.bin", size=50, inode=7)
        .add_file("/data/two.bin", size=50, inode=7)
        .add_file("/data/three.bin", size=5, inode=8)
    )

    assert measure("/data", fs=fs) == 55


def test_single_file() -> None:
    fs = MemoryFileSystem().add_file("/f.iso", size=123, disk_usage=4096)

    assert measure("/f.iso", fs=fs) == 4096
    assert file_size("/f.iso", fs=fs) == 123


def test_cancel_check_raises() -> None:
    fs = MemoryFileSystem().add_file("/d/a/b.bin", size=1)

    with pytest.raises(ProbeCancelled):
        measure("/d", fs=fs, cancel_check=lambda: True)


def test_real_symlink_loop_terminates() -> None:
    with tempfile.TemporaryDirectory() as tmpdir:
        os.makedirs(os.path.join(tmpdir, "sub"))
        with open(os.path.join(tmpdir, "sub", "a.txt"), "wb") as f:
            f.write(b"x" * 100)
        os.symlink(tmpdir, os.path.join(tmpdir, "sub", "loop"))
        os.symlink(os.path.join(tmpdir, "sub"), os.path.join(tmpdir, "alias"))

        assert measure(tmpdir, apparent=True) == 100 + _link_sizes(tmpdir)


def test_real_symlinked_root_is_not_followed() -> None:
    with tempfile.TemporaryDirectory() as tmpdir:
        target = os.path.join(tmpdir, "target")
        os.makedirs(target)
        with open(os.path.join(target, "a.txt"), "wb") as f:
            f.write(b"x" * 5000)
        alias = os.path.join(tmpdir, "alias")
        os.symlink(target, alias)

        assert measure(alias, apparent=True) == os.lstat(alias).st_size
        assert measure(target, apparent=True) == 5000


def _link_sizes(root: str) -> int:
    total = 0
    for dirpath, dirnames, filenames in os.walk(root):
        for name in dirnames + filenames:
            path = os.path.join(dirpath, name)
            if os.path.islink(path):
                total += os.lstat(path).st_size
    return total


@pytest.mark.skipif(os.geteuid() == 0, reason="root can list any directory")
def test_real_unreadable_directory_is_zero() -> None:
    with tempfile.TemporaryDirectory() as tmpdir:
        locked = os.path.join(tmpdir, "locked")
        os.makedirs(locked)
        with open(os.path.join(locked, "a.bin"), "wb") as f:
            f.write(b"x" * 10_000)
        os.chmod(locked, 0o000)
        try:
            assert measure(locked) == 0
        finally:
            os.chmod(locked, 0o700)


def test_measure_has_no_depth_cap() -> None:
    deep = "/d/" + "/".join(f"level{i}" for i in range(30)) + "/deep.bin"
    fs = MemoryFileSystem().add_file("/d/top.bin", size=1).add_file(deep, size=100)

    assert measure("/d", fs=fs) == 101

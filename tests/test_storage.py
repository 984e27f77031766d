import os
import stat
import sys
from pathlib import Path

import pytest

from easypdf.infra.storage import LocalStorage


def test_local_storage_save_and_delete(tmp_path: Path) -> None:
    storage = LocalStorage()
    target = tmp_path / "out.pdf"

    written = storage.save(target, b"first-content")
    assert Path(written) == target
    assert target.read_bytes() == b"first-content"

    storage.delete(target)
    assert not target.exists()

    # deleting again is a no-op
    storage.delete(target)


def test_save_overwrites_instead_of_appending(tmp_path: Path) -> None:
    storage = LocalStorage()
    target = tmp_path / "out.pdf"

    storage.save(target, b"a much longer first payload")
    storage.save(target, b"short")

    assert target.read_bytes() == b"short"
    assert sorted(p.name for p in tmp_path.iterdir()) == ["out.pdf"]


def test_missing_parent_directory_fails_without_output(tmp_path: Path) -> None:
    storage = LocalStorage(create_dirs=False)
    target = tmp_path / "missing" / "out.pdf"

    with pytest.raises(OSError):
        storage.save(target, b"data")

    assert not target.exists()
    assert list(tmp_path.iterdir()) == []


def test_create_dirs_makes_parent_directories(tmp_path: Path) -> None:
    storage = LocalStorage(create_dirs=True)
    target = tmp_path / "a" / "b" / "out.pdf"

    storage.save(target, b"data")

    assert target.read_bytes() == b"data"


@pytest.fixture
def umask_022():
    previous = os.umask(0o022)
    yield
    os.umask(previous)


@pytest.mark.skipif(sys.platform == "win32", reason="POSIX file modes")
def test_new_file_gets_default_mode(tmp_path: Path, umask_022) -> None:
    target = tmp_path / "out.pdf"

    LocalStorage().save(target, b"x")

    assert stat.S_IMODE(target.stat().st_mode) == 0o644


@pytest.mark.skipif(sys.platform == "win32", reason="POSIX file modes")
def test_overwrite_keeps_existing_mode(tmp_path: Path, umask_022) -> None:
    target = tmp_path / "out.pdf"
    target.write_bytes(b"old")
    target.chmod(0o640)

    LocalStorage().save(target, b"new")

    assert target.read_bytes() == b"new"
    assert stat.S_IMODE(target.stat().st_mode) == 0o640


def test_failed_replace_leaves_no_temporary_file(tmp_path: Path, monkeypatch) -> None:
    storage = LocalStorage()
    target = tmp_path / "out.pdf"

    def fail_replace(src, dst):
        raise PermissionError("target is locked")

    monkeypatch.setattr("easypdf.infra.storage.os.replace", fail_replace)

    with pytest.raises(PermissionError):
        storage.save(target, b"data")

    assert list(tmp_path.iterdir()) == []

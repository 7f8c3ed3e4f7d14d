import os
import stat

import pytest

from gitscrape.errors import TargetDirectoryError
from gitscrape.materializer import materialize, safe_target
from gitscrape.walker import ManifestEntry, ObjectLoader


def test_materialize_writes_files_and_directories(store, tmp_path):
    a = store.blob(b"alpha\n")
    b = store.blob(b"bravo\n")
    entries = [ManifestEntry(a, "a.txt", "100644"), ManifestEntry(b, "dir/sub/b.txt", "100644")]

    written = materialize(entries, tmp_path, ObjectLoader(store))

    assert (tmp_path / "a.txt").read_bytes() == b"alpha\n"
    assert (tmp_path / "dir" / "sub" / "b.txt").read_bytes() == b"bravo\n"
    assert written == [(tmp_path / "a.txt").resolve(), (tmp_path / "dir" / "sub" / "b.txt").resolve()]


def test_materialize_overwrites_and_tolerates_existing_dirs(store, tmp_path):
    (tmp_path / "dir").mkdir()
    (tmp_path / "dir" / "b.txt").write_bytes(b"old contents")
    b = store.blob(b"new")

    materialize([ManifestEntry(b, "dir/b.txt", "100644")], tmp_path, ObjectLoader(store))
    materialize([ManifestEntry(b, "dir/b.txt", "100644")], tmp_path, ObjectLoader(store))

    assert (tmp_path / "dir" / "b.txt").read_bytes() == b"new"


def test_materialize_refetches_blob_content(store, tmp_path):
    a = store.blob(b"alpha")
    materialize([ManifestEntry(a, "a.txt", "100644")], tmp_path, ObjectLoader(store))
    assert store.requested == ["objects/" + a[:2] + "/" + a[2:]]


def test_missing_target_directory(store, tmp_path):
    with pytest.raises(TargetDirectoryError, match="does not exist"):
        materialize([], tmp_path / "nope", ObjectLoader(store))


def test_target_that_is_a_file(store, tmp_path):
    target = tmp_path / "file"
    target.write_text("x")
    with pytest.raises(OSError):
        materialize([], target, ObjectLoader(store))


def test_missing_blob_is_skipped(store, tmp_path):
    present = store.blob(b"here")
    entries = [ManifestEntry("3" * 40, "gone.txt", "100644"), ManifestEntry(present, "here.txt", "100644")]

    written = materialize(entries, tmp_path, ObjectLoader(store))

    assert not (tmp_path / "gone.txt").exists()
    assert written == [(tmp_path / "here.txt").resolve()]


@pytest.mark.parametrize("path", ["../escape.txt", "/etc/passwd", "a/../../b", "a//b", "./a", "a\\b.txt", "..\\escape.txt"])
def test_paths_outside_target_are_refused(store, tmp_path, path):
    target = tmp_path / "out"
    target.mkdir()
    blob = store.blob(b"evil")

    written = materialize([ManifestEntry(blob, path, "100644")], target, ObjectLoader(store))

    assert written == []
    assert not (tmp_path / "escape.txt").exists()


def test_backslash_names_are_not_turned_into_directories(store, tmp_path):
    blob = store.blob(b"x")
    written = materialize([ManifestEntry(blob, "a\\b.txt", "100644")], tmp_path, ObjectLoader(store))
    assert written == []
    assert not (tmp_path / "a").exists()


def test_safe_target_accepts_nested_paths(tmp_path):
    root = tmp_path.resolve()
    assert safe_target(root, "a/b/c.txt") == root / "a" / "b" / "c.txt"


@pytest.mark.skipif(os.name == "nt", reason="POSIX permission bits")
def test_mode_bits_are_applied_only_when_asked(store, tmp_path):
    script = store.blob(b"#!/bin/sh\n")
    entries = [ManifestEntry(script, "run.sh", "100755")]

    materialize(entries, tmp_path, ObjectLoader(store))
    assert not os.stat(tmp_path / "run.sh").st_mode & stat.S_IXUSR

    materialize(entries, tmp_path, ObjectLoader(store), apply_modes=True)
    assert os.stat(tmp_path / "run.sh").st_mode & stat.S_IXUSR

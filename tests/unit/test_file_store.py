"""
Unit tests for the file store and its write lock.
"""

import threading

import pytest

from fileserver.core.file_store import FileStore


class TestResolve:

    def test_root_maps_to_index(self, store, document_root):
        assert store.resolve("/") == document_root / "index.html"

    def test_nested_resource(self, store, document_root):
        assert store.resolve("/img/a.png") == document_root / "img" / "a.png"

    def test_resource_is_joined_verbatim(self, store, document_root):
        assert store.resolve("/my%20file.txt") == document_root / "my%20file.txt"

    def test_doubled_slashes_are_collapsed(self, store, document_root):
        assert store.resolve("//a//b") == document_root / "a" / "b"


class TestStore:

    def test_creates_missing_parents(self, store, document_root):
        path = store.resolve("/x/y/z.txt")

        store.store(path, b"deep")

        assert (document_root / "x" / "y" / "z.txt").read_bytes() == b"deep"

    def test_truncates_existing_file(self, store, document_root):
        path = document_root / "a.txt"
        path.write_bytes(b"a much longer original body")

        store.store(path, b"short")

        assert path.read_bytes() == b"short"

    def test_empty_body_creates_empty_file(self, store, document_root):
        path = document_root / "empty"

        store.store(path, b"")

        assert path.is_file()
        assert path.read_bytes() == b""

    def test_exclusive_refuses_existing_file(self, store, document_root):
        path = document_root / "a.txt"
        path.write_bytes(b"keep")

        with pytest.raises(FileExistsError):
            store.store(path, b"new", exclusive=True)

        assert path.read_bytes() == b"keep"

    def test_lock_released_after_failure(self, store, document_root):
        (document_root / "file").write_bytes(b"")

        with pytest.raises(OSError):
            store.store(store.resolve("/file/child.txt"), b"x")

        assert not store._write_lock.locked()
        store.store(document_root / "ok.txt", b"ok")
        assert (document_root / "ok.txt").read_bytes() == b"ok"


class TestRemove:

    def test_removes_regular_file(self, store, document_root):
        path = document_root / "a.txt"
        path.write_bytes(b"x")

        assert store.remove(path) is True
        assert not path.exists()

    def test_missing_file(self, store, document_root):
        assert store.remove(document_root / "nope") is False

    def test_directory_is_not_removed(self, store, document_root):
        (document_root / "dir").mkdir()

        assert store.remove(document_root / "dir") is False
        assert (document_root / "dir").is_dir()


class TestConcurrency:

    def test_writes_wait_for_the_lock(self, store, document_root):
        target = document_root / "a.txt"
        target.write_bytes(b"old")
        victim = document_root / "victim.txt"
        victim.write_bytes(b"x")

        writer = threading.Thread(target=store.store, args=(target, b"new"))
        remover = threading.Thread(target=store.remove, args=(victim,))

        with store._write_lock:
            writer.start()
            remover.start()
            writer.join(timeout=0.3)
            remover.join(timeout=0.3)

            assert writer.is_alive()
            assert remover.is_alive()
            assert target.read_bytes() == b"old"
            assert victim.exists()

        writer.join(timeout=5.0)
        remover.join(timeout=5.0)

        assert not writer.is_alive()
        assert not remover.is_alive()
        assert target.read_bytes() == b"new"
        assert not victim.exists()

    def test_distinct_paths(self, store, document_root):
        bodies = {f"/f{i}.bin": bytes([i]) * 50_000 for i in range(20)}

        threads = [
            threading.Thread(target=store.store, args=(store.resolve(r), body))
            for r, body in bodies.items()
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        for resource, body in bodies.items():
            assert store.resolve(resource).read_bytes() == body

    def test_same_path_never_interleaves(self, store):
        path = store.resolve("/shared.bin")
        bodies = [bytes([i]) * 200_000 for i in range(10)]

        threads = [threading.Thread(target=store.store, args=(path, b)) for b in bodies]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert path.read_bytes() in bodies


def test_accepts_string_root(tmp_path):
    store = FileStore(str(tmp_path))

    assert store.resolve("/a") == tmp_path / "a"

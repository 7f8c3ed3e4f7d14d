import hashlib
import logging
import zlib

import pytest

from gitscrape.fetcher import Found, Missing, TransportError
from gitscrape.objects import object_path

BLOB_MODE = "100644"
TREE_MODE = "40000"


class ObjectStore:
    """In-memory `.git` directory served through the fetcher interface."""

    def __init__(self):
        self.files = {}
        self.errors = {}
        self.requested = []

    def add_object(self, object_type: str, payload: bytes) -> str:
        store = f"{object_type} {len(payload)}\x00".encode() + payload
        hash = hashlib.sha1(store).hexdigest()
        self.files[object_path(hash)] = zlib.compress(store)
        return hash

    def blob(self, content: bytes) -> str:
        return self.add_object("blob", content)

    def tree(self, entries) -> str:
        """``entries`` is a list of ``(mode, name, hash)`` in the order to write them."""
        payload = b"".join(
            mode.encode() + b" " + name.encode() + b"\x00" + bytes.fromhex(hash)
            for mode, name, hash in entries
        )
        return self.add_object("tree", payload)

    def commit(self, tree_hash: str, message: str = "initial commit") -> str:
        lines = [
            f"tree {tree_hash}",
            "author tester <tester@example.com> 0 +0000",
            "committer tester <tester@example.com> 0 +0000",
            "",
            message,
        ]
        return self.add_object("commit", "\n".join(lines).encode())

    def set_head(self, commit_hash: str, ref: str = "refs/heads/main"):
        self.files["HEAD"] = f"ref: {ref}\n".encode()
        self.files[ref] = f"{commit_hash}\n".encode()

    def break_object(self, hash: str, detail: str = "ConnectionError: boom"):
        self.errors[object_path(hash)] = detail

    def fetch(self, path: str):
        self.requested.append(path)
        if path in self.errors:
            return TransportError(self.errors[path])
        if path in self.files:
            return Found(self.files[path])
        return Missing()

    def fetch_bytes(self, path: str):
        result = self.fetch(path)
        if isinstance(result, Found):
            return result.data
        return None


@pytest.fixture
def store() -> ObjectStore:
    return ObjectStore()


@pytest.fixture
def sample_repo(store):
    """commit -> tree -> {a.txt, dir/ -> b.txt}"""
    blob_a = store.blob(b"alpha\n")
    blob_b = store.blob(b"bravo\n")
    subtree = store.tree([(BLOB_MODE, "b.txt", blob_b)])
    root = store.tree([(BLOB_MODE, "a.txt", blob_a), (TREE_MODE, "dir", subtree)])
    commit = store.commit(root)
    store.set_head(commit)
    return {"commit": commit, "root": root, "subtree": subtree, "a": blob_a, "b": blob_b}


@pytest.fixture(autouse=True)
def reset_gitscrape_logger():
    yield
    logger = logging.getLogger("gitscrape")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)

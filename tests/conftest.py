from collections.abc import Iterator
from threading import RLock
from typing import Any

import pytest
from kazoo.exceptions import NoNodeError, NodeExistsError, NotEmptyError

from job_ledger.config import get_settings
from job_ledger.store import get_client


class FakeZooKeeper:
    """In-memory stand-in for the KazooClient calls the ledger makes.

    Safe to share across threads, like a real client.
    """

    def __init__(self) -> None:
        self.nodes: dict[str, bytes | None] = {"/": b""}
        self.acls: dict[str, Any] = {}
        self._sequences: dict[str, int] = {}
        self._lock = RLock()
        self.fail_on: dict[str, Exception] = {}

    def _maybe_fail(self, operation: str) -> None:
        error = self.fail_on.get(operation)
        if error is not None:
            raise error

    @staticmethod
    def _parent(path: str) -> str:
        parent = path.rsplit("/", 1)[0]
        return parent or "/"

    def _children(self, path: str) -> list[str]:
        prefix = path.rstrip("/") + "/"
        return [
            existing[len(prefix):]
            for existing in self.nodes
            if existing.startswith(prefix) and "/" not in existing[len(prefix):] and existing != "/"
        ]

    def create(
        self,
        path: str,
        value: bytes | None = b"",
        acl: Any = None,
        ephemeral: bool = False,
        sequence: bool = False,
        makepath: bool = False,
    ) -> str:
        self._maybe_fail("create")
        with self._lock:
            if sequence:
                parent = self._parent(path)
                counter = self._sequences.get(parent, 0)
                self._sequences[parent] = counter + 1
                path = f"{path}{counter:010d}"

            parent = self._parent(path)
            if parent not in self.nodes:
                if not makepath:
                    raise NoNodeError()
                self.create(parent, acl=acl, makepath=True)
            if path in self.nodes:
                raise NodeExistsError()

            self.nodes[path] = value
            self.acls[path] = acl
            return path

    def delete(self, path: str, version: int = -1, recursive: bool = False) -> bool:
        self._maybe_fail("delete")
        with self._lock:
            if path not in self.nodes:
                raise NoNodeError()
            if self._children(path):
                raise NotEmptyError()
            del self.nodes[path]
            return True

    def get(self, path: str, watch: Any = None) -> tuple[bytes | None, None]:
        self._maybe_fail("get")
        with self._lock:
            if path not in self.nodes:
                raise NoNodeError()
            return self.nodes[path], None

    def get_children(self, path: str, watch: Any = None) -> list[str]:
        self._maybe_fail("get_children")
        with self._lock:
            if path not in self.nodes:
                raise NoNodeError()
            return self._children(path)


@pytest.fixture(autouse=True)
def reset_ledger_caches() -> Iterator[None]:
    get_settings.cache_clear()
    get_client.cache_clear()
    yield
    get_settings.cache_clear()
    get_client.cache_clear()


@pytest.fixture
def zk() -> FakeZooKeeper:
    return FakeZooKeeper()


@pytest.fixture
def tracking_root() -> str:
    return "/templeton/tracking"

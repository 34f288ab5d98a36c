from __future__ import annotations

from collections.abc import Sequence
from functools import lru_cache
import logging
from typing import Any, Protocol

from kazoo.client import KazooClient
from kazoo.exceptions import KazooException
from kazoo.handlers.threading import KazooTimeoutError

from job_ledger.config import get_settings
from job_ledger.errors import TrackingError

logger = logging.getLogger(__name__)

store_errors: tuple[type[Exception], ...] = (KazooException, KazooTimeoutError)


class CoordinationStore(Protocol):
    def create(
        self,
        path: str,
        value: bytes = b"",
        acl: Sequence[Any] | None = None,
        ephemeral: bool = False,
        sequence: bool = False,
        makepath: bool = False,
    ) -> str: ...

    def delete(self, path: str, version: int = -1, recursive: bool = False) -> Any: ...

    def get(self, path: str, watch: Any = None) -> tuple[bytes, Any]: ...

    def get_children(self, path: str, watch: Any = None) -> list[str]: ...


@lru_cache
def get_client() -> KazooClient:
    settings = get_settings()
    client = KazooClient(hosts=settings.zk_hosts, timeout=settings.zk_timeout_seconds)
    try:
        client.start(timeout=settings.zk_connect_timeout_seconds)
    except store_errors as exc:
        client.close()
        raise TrackingError(f"Unable to connect to ZooKeeper hosts={settings.zk_hosts}") from exc

    logger.debug("zookeeper client started hosts=%s", settings.zk_hosts)
    return client


def close_client() -> None:
    if get_client.cache_info().currsize == 0:
        return

    client = get_client()
    get_client.cache_clear()
    client.stop()
    client.close()

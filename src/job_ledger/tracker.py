"""Ordered ledger of submitted jobs kept in ZooKeeper.

Each submitted job gets one persistent sequential znode under the tracking
root::

    /templeton-hadoop/created/0000000000  -> b"job_1"
    /templeton-hadoop/created/0000000001  -> b"job_2"

The sequence suffix is allocated by ZooKeeper, so it reflects the order in
which the store committed the creates. A cleanup process lists the children,
resolves each one to its job id and purges the oldest jobs.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
import re
from typing import Iterable

from kazoo.exceptions import NodeExistsError, NoNodeError
from kazoo.security import OPEN_ACL_UNSAFE

from job_ledger.config import Settings
from job_ledger.errors import TrackingError, TrackingNodeDeletedError
from job_ledger.store import CoordinationStore, store_errors

logger = logging.getLogger(__name__)


def make_tracking_znode(tracking_root: str) -> str:
    """Path handed to the store for a new sequential child."""
    return tracking_root + "/"


def make_tracking_job_znode(tracking_root: str, node: str) -> str:
    """Path of an existing tracking node."""
    return tracking_root + "/" + node


def sequence_number(node: str) -> int | None:
    match = re.search(r"(\d+)$", node)
    if match is None:
        return None
    return int(match.group(1))


def sort_by_sequence(nodes: Iterable[str]) -> list[str]:
    def _key(node: str) -> tuple[int, int, str]:
        sequence = sequence_number(node)
        if sequence is None:
            return (1, 0, node)
        return (0, sequence, node)

    return sorted(nodes, key=_key)


class PendingTracker:
    """A job that has not been registered in the ledger yet."""

    def __init__(self, job_id: str, client: CoordinationStore, tracking_root: str) -> None:
        if not job_id:
            raise ValueError("job_id must not be empty")
        self.job_id = job_id
        self._client = client
        self._tracking_root = tracking_root

    @classmethod
    def for_job(cls, job_id: str, client: CoordinationStore, settings: Settings) -> PendingTracker:
        return cls(job_id, client, settings.tracking_root)

    def _ensure_root(self) -> None:
        try:
            self._client.create(self._tracking_root, acl=OPEN_ACL_UNSAFE, makepath=True)
        except NodeExistsError:
            pass
        except store_errors as exc:
            raise TrackingError(
                f"Unable to create parent nodes path={self._tracking_root}"
            ) from exc

    def create(self) -> JobStateTracker:
        """Register the job and return the handle of its tracking node.

        Every call creates a new sequential node, so calling this twice
        leaves two entries for the same job.
        """
        self._ensure_root()

        path = make_tracking_znode(self._tracking_root)
        try:
            created_path = self._client.create(
                path,
                self.job_id.encode("utf-8"),
                acl=OPEN_ACL_UNSAFE,
                sequence=True,
            )
        except store_errors as exc:
            raise TrackingError(f"Unable to create {path}") from exc

        node = created_path.rsplit("/", 1)[-1]
        logger.debug("tracking node created job_id=%s path=%s", self.job_id, created_path)
        return JobStateTracker(node, self._client, self._tracking_root)

    def __repr__(self) -> str:
        return f"PendingTracker(job_id={self.job_id!r}, tracking_root={self._tracking_root!r})"


class JobStateTracker:
    """An existing tracking node, identified by its sequential name."""

    def __init__(self, node: str, client: CoordinationStore, tracking_root: str) -> None:
        if not node or "/" in node:
            raise ValueError(f"invalid tracking node name: {node!r}")
        self.node = node
        self._client = client
        self._tracking_root = tracking_root

    @classmethod
    def from_node(cls, node: str, client: CoordinationStore, settings: Settings) -> JobStateTracker:
        return cls(node, client, settings.tracking_root)

    @property
    def path(self) -> str:
        return make_tracking_job_znode(self._tracking_root, self.node)

    @property
    def sequence(self) -> int | None:
        return sequence_number(self.node)

    def delete(self) -> None:
        """Remove the tracking node.

        Failures are logged and dropped: cleanup processes may race to delete
        the same node, so a missing node is expected.
        """
        path = self.path
        try:
            self._client.delete(path)
        except store_errors as exc:
            logger.info("tracking node delete failed path=%s error=%r", path, exc)

    def get_job_id(self) -> str:
        path = self.path
        try:
            data, _ = self._client.get(path)
        except NoNodeError as exc:
            raise TrackingNodeDeletedError(self.node) from exc
        except store_errors as exc:
            raise TrackingError(f"Unable to read {path}") from exc

        if data is None:
            raise TrackingError(f"Unable to decode {path}: node has no payload")
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise TrackingError(f"Unable to decode {path}") from exc

    def __repr__(self) -> str:
        return f"JobStateTracker(node={self.node!r}, tracking_root={self._tracking_root!r})"


def _list_children(client: CoordinationStore, tracking_root: str) -> list[str]:
    try:
        children = client.get_children(tracking_root)
    except store_errors as exc:
        raise TrackingError(f"Can't get tracking children path={tracking_root}") from exc
    return list(children)


def get_tracking_jobs(settings: Settings, client: CoordinationStore) -> list[str]:
    """Names of all live tracking nodes, in the order the store reports them."""
    return _list_children(client, settings.tracking_root)


@dataclass(frozen=True)
class TrackingLedger:
    client: CoordinationStore
    tracking_root: str

    @classmethod
    def from_settings(cls, settings: Settings, client: CoordinationStore) -> TrackingLedger:
        return cls(client=client, tracking_root=settings.tracking_root)

    def track(self, job_id: str) -> PendingTracker:
        return PendingTracker(job_id, self.client, self.tracking_root)

    def tracker(self, node: str) -> JobStateTracker:
        return JobStateTracker(node, self.client, self.tracking_root)

    def list_nodes(self) -> list[str]:
        return _list_children(self.client, self.tracking_root)

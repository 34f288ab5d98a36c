from __future__ import annotations


class TrackingError(OSError):
    pass


class TrackingNodeDeletedError(TrackingError):
    def __init__(self, node: str) -> None:
        super().__init__(f"Node already deleted {node}")
        self.node = node

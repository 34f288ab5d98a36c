from dataclasses import dataclass
from functools import lru_cache
import os

TRACKING_DIR = "/created"


def _to_float(value: str | None, *, default: float, minimum: float) -> float:
    if value is None:
        return default
    parsed = float(value)
    return max(minimum, parsed)


@dataclass(frozen=True)
class Settings:
    zk_hosts: str
    storage_root: str
    zk_timeout_seconds: float
    zk_connect_timeout_seconds: float
    log_level: str

    @property
    def tracking_root(self) -> str:
        return self.storage_root.rstrip("/") + TRACKING_DIR


@lru_cache
def get_settings() -> Settings:
    return Settings(
        zk_hosts=os.getenv("LEDGER_ZK_HOSTS", "localhost:2181"),
        storage_root=os.getenv("LEDGER_STORAGE_ROOT", "/templeton-hadoop"),
        zk_timeout_seconds=_to_float(
            os.getenv("LEDGER_ZK_TIMEOUT_SECONDS"), default=10.0, minimum=1.0
        ),
        zk_connect_timeout_seconds=_to_float(
            os.getenv("LEDGER_ZK_CONNECT_TIMEOUT_SECONDS"), default=15.0, minimum=1.0
        ),
        log_level=os.getenv("LEDGER_LOG_LEVEL", "INFO"),
    )

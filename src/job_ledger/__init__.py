from job_ledger.config import TRACKING_DIR, Settings, get_settings
from job_ledger.errors import TrackingError, TrackingNodeDeletedError
from job_ledger.tracker import (
    JobStateTracker,
    PendingTracker,
    TrackingLedger,
    get_tracking_jobs,
    make_tracking_job_znode,
    make_tracking_znode,
    sequence_number,
    sort_by_sequence,
)

__all__ = [
    "JobStateTracker",
    "PendingTracker",
    "Settings",
    "TRACKING_DIR",
    "TrackingError",
    "TrackingLedger",
    "TrackingNodeDeletedError",
    "get_settings",
    "get_tracking_jobs",
    "make_tracking_job_znode",
    "make_tracking_znode",
    "sequence_number",
    "sort_by_sequence",
]

from __future__ import annotations

import argparse
import json
import sys
from collections.abc import Sequence

from job_ledger.config import get_settings
from job_ledger.errors import TrackingError, TrackingNodeDeletedError
from job_ledger.logging_config import configure_logging
from job_ledger.store import CoordinationStore, close_client, get_client
from job_ledger.tracker import TrackingLedger, get_tracking_jobs, sort_by_sequence


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="job-ledger",
        description="Inspect the ZooKeeper job submission ledger",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    list_parser = subparsers.add_parser("list", help="List live tracking nodes and their job ids")
    list_parser.add_argument(
        "--sorted",
        action="store_true",
        help="Order entries by sequence number instead of store order",
    )

    track_parser = subparsers.add_parser("track", help="Create a tracking node for a job id")
    track_parser.add_argument("job_id")

    untrack_parser = subparsers.add_parser("untrack", help="Delete a tracking node (best effort)")
    untrack_parser.add_argument("node")

    return parser


def _list_entries(ledger: TrackingLedger, nodes: list[str]) -> list[dict[str, object]]:
    entries: list[dict[str, object]] = []
    for node in nodes:
        tracker = ledger.tracker(node)
        try:
            job_id: str | None = tracker.get_job_id()
        except TrackingNodeDeletedError:
            job_id = None
        entries.append({"node": node, "sequence": tracker.sequence, "job_id": job_id})
    return entries


def run(args: argparse.Namespace, client: CoordinationStore) -> object:
    settings = get_settings()
    ledger = TrackingLedger.from_settings(settings, client)

    if args.command == "list":
        nodes = get_tracking_jobs(settings, client)
        if args.sorted:
            nodes = sort_by_sequence(nodes)
        return _list_entries(ledger, nodes)

    if args.command == "track":
        tracker = ledger.track(args.job_id).create()
        return {"node": tracker.node, "job_id": args.job_id}

    ledger.tracker(args.node).delete()
    return {"node": args.node, "deleted": True}


def main(argv: Sequence[str] | None = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)
    settings = get_settings()
    configure_logging(settings.log_level)

    try:
        result = run(args, get_client())
    except (TrackingError, ValueError) as exc:
        print(f"[job-ledger] failed: {exc}", file=sys.stderr, flush=True)
        raise SystemExit(1) from exc
    finally:
        close_client()

    print(json.dumps(result), flush=True)


if __name__ == "__main__":
    main()

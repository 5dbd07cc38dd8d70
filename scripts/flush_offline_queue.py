"""Send chat messages queued while the store was unreachable.

Run it once connectivity is back; entries that still fail stay queued.
"""

from __future__ import annotations

import argparse
import logging
from functools import partial

from cdstock.application.use_cases.chat import send_outgoing
from cdstock.config import get_settings
from cdstock.infrastructure.database import SessionLocal, initialize_database
from cdstock.infrastructure.offline_queue import OfflineQueue


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Flush the local chat offline queue.")
    parser.add_argument(
        "--path",
        default=None,
        help="Queue file (default: OFFLINE_QUEUE_PATH from the environment)",
    )
    return parser.parse_args()


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    args = parse_args()
    path = args.path or get_settings().offline_queue_path
    if not path:
        raise SystemExit("No queue file configured; pass --path or set OFFLINE_QUEUE_PATH.")

    initialize_database()
    session = SessionLocal()
    try:
        result = OfflineQueue(path).flush(partial(send_outgoing, session))
    finally:
        session.close()

    print(f"Sent: {len(result.sent)}  Still queued: {len(result.failed)}")


if __name__ == "__main__":
    main()

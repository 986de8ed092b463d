"""
Rewrite stored puzzle dates to midnight UTC of their day.

Earlier uploads stored some puzzles at 04:00 rather than 00:00, which moves
them out of the daily lookup window. This reads every puzzle and updates
the date field of the ones not at the start of their UTC day. Other stored
fields are left untouched.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from fusdle.config import get_settings
from fusdle.errors import BatchUploadError, FusdleError
from fusdle.store import build_puzzle_store
from fusdle.upload import apply_date_fixes, normalize_dates
from shared.constants import MAX_BATCH_WRITES

logger = logging.getLogger(__name__)


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Normalize stored puzzle dates to midnight UTC"
    )
    parser.add_argument(
        "--batch-size",
        type=int,
        default=MAX_BATCH_WRITES,
        help=f"Puzzles per write batch (at most {MAX_BATCH_WRITES})",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Report which puzzles would change without saving",
    )
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s:%(message)s")
    store = build_puzzle_store(get_settings())

    try:
        changed = normalize_dates(store.iter_all())
    except FusdleError as e:
        logger.error("Could not read puzzles: %s", e.message)
        return 1

    if not changed:
        logger.info("All puzzle dates are already at midnight UTC")
        return 0
    if args.dry_run:
        logger.info("%d puzzles would be updated", len(changed))
        return 0

    try:
        result = apply_date_fixes(store, changed, batch_size=args.batch_size)
    except BatchUploadError as e:
        logger.error(e.message)
        return 1

    logger.info("Updated %d puzzles in %d batches", result.uploaded, result.batches)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

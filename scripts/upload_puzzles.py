"""
Bulk upload puzzles from a JSON file to the puzzle store.

The file holds a list of camelCase puzzles, e.g.

  [{"puzzleNumber": 1, "date": "2025-04-01", "difficulty": "normal",
    "emojis": ["🏡", "🧹"], "answer": "Housekeeping", "hints": ["..."]}]

Each puzzle is written to the document named after its id (or puzzleNumber),
in batches no larger than Firestore's per-batch limit.
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
from fusdle.errors import BatchUploadError
from fusdle.store import build_puzzle_store
from fusdle.upload import load_puzzles_file, upload_puzzles
from shared.constants import MAX_BATCH_WRITES
from shared.puzzle_doc import InvalidPuzzleDocumentError

logger = logging.getLogger(__name__)


def main() -> int:
    parser = argparse.ArgumentParser(description="Upload puzzles to the puzzle store")
    parser.add_argument("puzzles_file", help="Path to a JSON list of puzzles")
    parser.add_argument(
        "--batch-size",
        type=int,
        default=MAX_BATCH_WRITES,
        help=f"Puzzles per write batch (at most {MAX_BATCH_WRITES})",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Validate the file and report what would be uploaded without writing",
    )
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s:%(message)s")

    try:
        docs = load_puzzles_file(args.puzzles_file)
    except (OSError, ValueError) as e:
        logger.error("Could not load %s: %s", args.puzzles_file, e)
        return 1

    if args.dry_run:
        for doc in docs:
            logger.info(
                "Would upload puzzle #%d (%s, %s) as %s",
                doc.puzzle_number,
                doc.difficulty,
                doc.date.date().isoformat(),
                doc.id,
            )
        logger.info("Validated %d puzzles", len(docs))
        return 0

    store = build_puzzle_store(get_settings())
    try:
        result = upload_puzzles(store, docs, batch_size=args.batch_size)
    except BatchUploadError as e:
        logger.error("%s; re-run with the remaining puzzles", e.message)
        return 1

    logger.info("Uploaded %d puzzles in %d batches", result.uploaded, result.batches)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

"""
Bulk puzzle writes: loading puzzle files, chunked batch uploads and date
normalization.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Iterable, Iterator, Sequence

from fusdle.errors import BatchUploadError
from shared.constants import MAX_BATCH_WRITES
from shared.dates import is_start_of_day
from shared.puzzle_doc import (
    InvalidPuzzleDocumentError,
    PuzzleDocument,
    decode_puzzle_document,
)

if TYPE_CHECKING:
    from fusdle.store import PuzzleStore

logger = logging.getLogger(__name__)


@dataclass
class UploadResult:
    uploaded: int
    batches: int


def load_puzzles_file(path: str | Path) -> list[PuzzleDocument]:
    """
    Load a JSON list of camelCase puzzles.

    Each entry's id defaults to its puzzleNumber. Dates without a time of day
    (e.g. "2025-04-01") are taken as midnight UTC.
    """
    with open(path, "r", encoding="utf-8") as f:
        entries = json.load(f)
    if not isinstance(entries, list):
        raise InvalidPuzzleDocumentError(f"{path}: expected a JSON list of puzzles")

    docs: list[PuzzleDocument] = []
    for position, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise InvalidPuzzleDocumentError(f"{path}: entry {position} is not an object")
        doc_id = entry.get("id") or entry.get("puzzleNumber")
        try:
            docs.append(decode_puzzle_document(str(doc_id or ""), entry))
        except InvalidPuzzleDocumentError as e:
            raise InvalidPuzzleDocumentError(f"{path}: entry {position}: {e}") from e
    return docs


def chunked(docs: Sequence[PuzzleDocument], size: int) -> Iterator[Sequence[PuzzleDocument]]:
    if size < 1:
        raise ValueError("Chunk size must be at least 1")
    for start in range(0, len(docs), size):
        yield docs[start : start + size]


def upload_puzzles(
    store: "PuzzleStore",
    docs: Sequence[PuzzleDocument],
    *,
    batch_size: int = MAX_BATCH_WRITES,
) -> UploadResult:
    """
    Write `docs` to the store in batches no larger than the store's limit.

    Each document is written whole. Stops at the first batch that fails and
    raises BatchUploadError naming that batch and how many puzzles were
    already committed.
    """
    return _write_in_batches(docs, store.commit_batch, batch_size)


def apply_date_fixes(
    store: "PuzzleStore",
    docs: Sequence[PuzzleDocument],
    *,
    batch_size: int = MAX_BATCH_WRITES,
) -> UploadResult:
    """
    Like upload_puzzles, but only the `date` field of each stored document is
    rewritten; every other stored field is kept as is.
    """
    return _write_in_batches(docs, store.update_dates, batch_size)


def _write_in_batches(
    docs: Sequence[PuzzleDocument],
    write: Callable[[Sequence[PuzzleDocument]], None],
    batch_size: int,
) -> UploadResult:
    batch_size = min(batch_size, MAX_BATCH_WRITES)
    committed = 0
    batches = 0
    for chunk_index, chunk in enumerate(chunked(docs, batch_size), start=1):
        try:
            write(chunk)
        except Exception as e:
            logger.error(
                "Batch %d failed (%s); %d of %d puzzles committed",
                chunk_index,
                e,
                committed,
                len(docs),
            )
            raise BatchUploadError(
                chunk_index=chunk_index,
                first_puzzle_number=chunk[0].puzzle_number,
                last_puzzle_number=chunk[-1].puzzle_number,
                committed=committed,
            ) from e
        committed += len(chunk)
        batches += 1
        logger.info("Committed batch %d (%d puzzles)", chunk_index, len(chunk))
    return UploadResult(uploaded=committed, batches=batches)


def normalize_dates(docs: Iterable[PuzzleDocument]) -> list[PuzzleDocument]:
    """Return copies of the documents whose date is not midnight UTC, floored to it."""
    changed = []
    for doc in docs:
        if is_start_of_day(doc.date):
            continue
        fixed = doc.at_start_of_day()
        logger.info(
            "Puzzle #%d (%s): %s -> %s",
            doc.puzzle_number,
            doc.id,
            doc.date.isoformat(),
            fixed.date.isoformat(),
        )
        changed.append(fixed)
    return changed

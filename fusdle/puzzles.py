"""
Puzzle queries: today's puzzle, answers, hints, the archive and guesses.

Every operation is a read against the store passed in by the caller. Lookups
by id always happen inside a difficulty partition, so (id, difficulty) acts as
the key.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime
from typing import Optional

from fusdle.errors import ClientInputError, PuzzleNotFoundError
from fusdle.guess import GuessResult, evaluate_guess
from fusdle.store import PuzzleStore
from shared.constants import DEFAULT_DIFFICULTY, MAX_ARCHIVE_LIMIT, MAX_GUESS_LENGTH
from shared.dates import day_window
from shared.puzzle_doc import ArchivePuzzle, PublicPuzzle, PuzzleDocument

logger = logging.getLogger(__name__)

_HINT_INDEX = re.compile(r"[0-9]+")


def resolve_difficulty(difficulty: str | None, default: str = DEFAULT_DIFFICULTY) -> str:
    """Difficulty labels are opaque; a missing or empty label means the default."""
    return difficulty or default


def parse_hint_index(index: str | int | None) -> int:
    if isinstance(index, int) and not isinstance(index, bool):
        if index >= 0:
            return index
    elif isinstance(index, str) and _HINT_INDEX.fullmatch(index):
        return int(index)
    raise ClientInputError("Missing or invalid parameters")


def _require_id(puzzle_id: str | None) -> str:
    if not puzzle_id or not puzzle_id.strip():
        raise ClientInputError("Missing required parameters")
    return puzzle_id


def _find_puzzle(
    store: PuzzleStore, puzzle_id: str | None, difficulty: str | None, default: str
) -> Optional[PuzzleDocument]:
    puzzle_id = _require_id(puzzle_id)
    return store.find_by_id(puzzle_id, resolve_difficulty(difficulty, default))


def get_today_puzzle(
    store: PuzzleStore,
    difficulty: str | None = None,
    *,
    now: datetime | None = None,
    default_difficulty: str = DEFAULT_DIFFICULTY,
) -> Optional[PublicPuzzle]:
    """
    Return the public view of the puzzle active today, or None.

    None covers both "no puzzle today" and an unavailable store; neither is
    an error for the daily feed.
    """
    difficulty = resolve_difficulty(difficulty, default_difficulty)
    if not store.available:
        logger.warning("Puzzle store unavailable; no %s puzzle served", difficulty)
        return None

    start, end = day_window(now)
    doc = store.find_for_day(difficulty, start, end)
    if doc is None:
        logger.info("No %s puzzle for %s", difficulty, start.date().isoformat())
        return None
    return doc.public_view()


def get_answer(
    store: PuzzleStore,
    puzzle_id: str | None,
    difficulty: str | None = None,
    *,
    default_difficulty: str = DEFAULT_DIFFICULTY,
) -> str:
    doc = _find_puzzle(store, puzzle_id, difficulty, default_difficulty)
    if doc is None:
        raise PuzzleNotFoundError("Puzzle not found")
    return doc.answer


def get_hint(
    store: PuzzleStore,
    puzzle_id: str | None,
    index: str | int | None,
    difficulty: str | None = None,
    *,
    default_difficulty: str = DEFAULT_DIFFICULTY,
) -> str:
    """
    Return a single hint.

    A missing puzzle and a missing hint raise the same PuzzleNotFoundError;
    callers cannot tell them apart.
    """
    _require_id(puzzle_id)
    hint_index = parse_hint_index(index)
    doc = _find_puzzle(store, puzzle_id, difficulty, default_difficulty)
    hint = doc.hint_at(hint_index) if doc is not None else None
    if hint is None:
        raise PuzzleNotFoundError("Puzzle or hint not found")
    return hint


def get_archive(
    store: PuzzleStore,
    *,
    limit: int,
    difficulty: str | None = None,
    now: datetime | None = None,
) -> list[ArchivePuzzle]:
    """Past puzzles (before today), newest first, answers included."""
    if not 1 <= limit <= MAX_ARCHIVE_LIMIT:
        raise ClientInputError(f"limit must be between 1 and {MAX_ARCHIVE_LIMIT}")
    if not store.available:
        logger.warning("Puzzle store unavailable; archive is empty")
        return []

    start, _ = day_window(now)
    docs = store.list_before(start, difficulty=difficulty or None, limit=limit)
    return [doc.archive_view() for doc in docs]


def check_guess(
    store: PuzzleStore,
    puzzle_id: str | None,
    guess: str | None,
    difficulty: str | None = None,
    *,
    default_difficulty: str = DEFAULT_DIFFICULTY,
) -> GuessResult:
    _require_id(puzzle_id)
    if not guess or not guess.strip() or len(guess) > MAX_GUESS_LENGTH:
        raise ClientInputError("Invalid guess format")
    doc = _find_puzzle(store, puzzle_id, difficulty, default_difficulty)
    if doc is None:
        raise PuzzleNotFoundError("Puzzle not found")
    result = evaluate_guess(doc.answer, guess)
    logger.info(
        "Guess for puzzle %s (%s): %s",
        doc.id,
        doc.difficulty,
        "correct" if result.is_correct else result.match_type,
    )
    return result

"""
Patch note queries for the release feed and external integrations.
"""

from __future__ import annotations

import logging
from typing import Optional

from fusdle.errors import ClientInputError
from fusdle.store import PuzzleStore
from shared.constants import MAX_PATCH_NOTES_LIMIT
from shared.patch_note import PatchNote

logger = logging.getLogger(__name__)


def _all_notes(store: PuzzleStore) -> list[PatchNote]:
    if not store.available:
        logger.warning("Puzzle store unavailable; no patch notes served")
        return []
    return store.list_patch_notes()


def get_latest_patch_note(store: PuzzleStore) -> Optional[PatchNote]:
    notes = _all_notes(store)
    return notes[0] if notes else None


def get_patch_notes(store: PuzzleStore, *, limit: int) -> tuple[list[PatchNote], int]:
    """Return the newest `limit` notes and the total number of notes."""
    if not 1 <= limit <= MAX_PATCH_NOTES_LIMIT:
        raise ClientInputError(f"limit must be between 1 and {MAX_PATCH_NOTES_LIMIT}")
    notes = _all_notes(store)
    return notes[:limit], len(notes)

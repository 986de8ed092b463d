"""
Puzzle store abstraction for Firestore and an in-memory test implementation.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Iterable, Iterator, Mapping, Optional, Protocol, Sequence

import firebase_admin
from firebase_admin import credentials, firestore
from google.api_core import exceptions as google_exceptions
from google.auth import exceptions as auth_exceptions
from google.cloud.firestore_v1.base_query import FieldFilter

from fusdle.config import Settings
from fusdle.errors import PuzzleStoreError, StoreUnavailableError
from fusdle.upload import load_puzzles_file
from shared.constants import MAX_BATCH_WRITES, PATCH_NOTES_COLLECTION
from shared.dates import as_utc
from shared.patch_note import InvalidPatchNoteError, PatchNote, decode_patch_note
from shared.puzzle_doc import (
    InvalidPuzzleDocumentError,
    PuzzleDocument,
    decode_puzzle_document,
)

logger = logging.getLogger(__name__)

STORE_FAULTS = (google_exceptions.GoogleAPIError, auth_exceptions.GoogleAuthError)


class PuzzleStore(Protocol):
    """Defines the operations the API and scripts need from the puzzle store."""

    available: bool

    def find_for_day(
        self, difficulty: str, start: datetime, end: datetime
    ) -> Optional[PuzzleDocument]:
        ...

    def find_by_id(self, puzzle_id: str, difficulty: str) -> Optional[PuzzleDocument]:
        ...

    def list_before(
        self, before: datetime, *, difficulty: str | None = None, limit: int = 30
    ) -> list[PuzzleDocument]:
        ...

    def iter_all(self) -> Iterator[PuzzleDocument]:
        ...

    def commit_batch(self, docs: Sequence[PuzzleDocument]) -> None:
        ...

    def update_dates(self, docs: Sequence[PuzzleDocument]) -> None:
        """Write only the `date` field of existing documents, in one batch."""
        ...

    def list_patch_notes(self) -> list[PatchNote]:
        """All patch notes, newest first."""
        ...


def _decode_note_or_skip(doc_id: str, data: Mapping[str, Any] | None) -> Optional[PatchNote]:
    try:
        return decode_patch_note(doc_id, data or {})
    except InvalidPatchNoteError as e:
        logger.warning("Skipping invalid patch note: %s", e)
        return None


def _decode_or_skip(doc_id: str, data: Mapping[str, Any] | None) -> Optional[PuzzleDocument]:
    try:
        return decode_puzzle_document(doc_id, data or {})
    except InvalidPuzzleDocumentError as e:
        logger.warning("Skipping invalid puzzle document: %s", e)
        return None


def _check_batch_size(docs: Sequence[PuzzleDocument]) -> None:
    if len(docs) > MAX_BATCH_WRITES:
        raise ValueError(
            f"A batch holds at most {MAX_BATCH_WRITES} writes, got {len(docs)}"
        )


class FirestorePuzzleStore:
    """
    Firestore-backed implementation reading the puzzles collection.
    """

    available = True

    def __init__(
        self,
        client: Any,
        collection: str,
        patch_notes_collection: str = PATCH_NOTES_COLLECTION,
    ):
        self._client = client
        self._collection = client.collection(collection)
        self._patch_notes_collection = patch_notes_collection

    def _stream(
        self, query: Any, what: str, message: str = "Failed to fetch puzzle"
    ) -> list[Any]:
        try:
            return list(query.stream())
        except STORE_FAULTS as e:
            logger.exception("Firestore query for %s failed", what)
            raise PuzzleStoreError(message) from e

    def _commit(self, batch: Any, count: int) -> None:
        try:
            batch.commit()
        except STORE_FAULTS as e:
            logger.exception("Firestore batch commit of %d puzzles failed", count)
            raise PuzzleStoreError("Failed to write puzzles") from e

    def find_for_day(
        self, difficulty: str, start: datetime, end: datetime
    ) -> Optional[PuzzleDocument]:
        query = (
            self._collection.where(filter=FieldFilter("difficulty", "==", difficulty))
            .where(filter=FieldFilter("date", ">=", start))
            .where(filter=FieldFilter("date", "<", end))
            .limit(1)
        )
        for snapshot in self._stream(query, "daily puzzle"):
            return _decode_or_skip(snapshot.id, snapshot.to_dict())
        return None

    def find_by_id(self, puzzle_id: str, difficulty: str) -> Optional[PuzzleDocument]:
        # Ids are matched inside the difficulty partition, not looked up directly.
        query = self._collection.where(filter=FieldFilter("difficulty", "==", difficulty))
        for snapshot in self._stream(query, f"puzzle {puzzle_id}"):
            if snapshot.id == puzzle_id:
                return _decode_or_skip(snapshot.id, snapshot.to_dict())
        return None

    def list_before(
        self, before: datetime, *, difficulty: str | None = None, limit: int = 30
    ) -> list[PuzzleDocument]:
        query = self._collection
        if difficulty:
            query = query.where(filter=FieldFilter("difficulty", "==", difficulty))
        query = (
            query.where(filter=FieldFilter("date", "<", before))
            .order_by("date", direction="DESCENDING")
            .limit(limit)
        )
        docs = (
            _decode_or_skip(snapshot.id, snapshot.to_dict())
            for snapshot in self._stream(query, "puzzle archive")
        )
        return [doc for doc in docs if doc is not None]

    def iter_all(self) -> Iterator[PuzzleDocument]:
        for snapshot in self._stream(self._collection, "all puzzles"):
            doc = _decode_or_skip(snapshot.id, snapshot.to_dict())
            if doc is not None:
                yield doc

    def commit_batch(self, docs: Sequence[PuzzleDocument]) -> None:
        _check_batch_size(docs)
        batch = self._client.batch()
        for doc in docs:
            batch.set(self._collection.document(doc.id), doc.to_store_dict())
        self._commit(batch, len(docs))

    def update_dates(self, docs: Sequence[PuzzleDocument]) -> None:
        # update() leaves fields the document model does not know about intact.
        _check_batch_size(docs)
        batch = self._client.batch()
        for doc in docs:
            batch.update(self._collection.document(doc.id), {"date": as_utc(doc.date)})
        self._commit(batch, len(docs))

    def list_patch_notes(self) -> list[PatchNote]:
        query = self._client.collection(self._patch_notes_collection).order_by(
            "date", direction="DESCENDING"
        )
        notes = (
            _decode_note_or_skip(snapshot.id, snapshot.to_dict())
            for snapshot in self._stream(
                query, "patch notes", message="Failed to fetch patch notes"
            )
        )
        return [note for note in notes if note is not None]


class InMemoryPuzzleStore:
    """Simple in-memory puzzle store for development and tests."""

    available = True

    def __init__(
        self,
        documents: Iterable[PuzzleDocument] = (),
        patch_notes: Iterable[PatchNote] = (),
    ):
        # Raw camelCase bodies keyed by (id, difficulty), decoded on read like
        # Firestore snapshots.
        self.documents: dict[tuple[str, str], dict] = {}
        self.patch_notes: dict[str, dict] = {}
        for doc in documents:
            self.add(doc)
        for note in patch_notes:
            self.add_patch_note(note)

    @classmethod
    def from_json_file(cls, path: str | Path) -> "InMemoryPuzzleStore":
        return cls(load_puzzles_file(path))

    def add(self, doc: PuzzleDocument) -> None:
        self.documents[(doc.id, doc.difficulty)] = doc.to_store_dict()

    def add_raw(self, doc_id: str, data: dict) -> None:
        """Store an undecoded body, e.g. to simulate legacy or malformed data."""
        self.documents[(doc_id, data.get("difficulty"))] = dict(data)

    def add_patch_note(self, note: PatchNote) -> None:
        data = asdict(note)
        self.patch_notes[data.pop("id")] = data

    def reset(self) -> None:
        """Clear all stored data (useful in tests)."""
        self.documents.clear()
        self.patch_notes.clear()

    def _decoded(self) -> list[PuzzleDocument]:
        docs = [
            _decode_or_skip(doc_id, data)
            for (doc_id, _difficulty), data in self.documents.items()
        ]
        return sorted(
            (doc for doc in docs if doc is not None),
            key=lambda doc: (doc.puzzle_number, doc.id),
        )

    def find_for_day(
        self, difficulty: str, start: datetime, end: datetime
    ) -> Optional[PuzzleDocument]:
        start, end = as_utc(start), as_utc(end)
        for doc in self._decoded():
            if doc.difficulty == difficulty and start <= doc.date < end:
                return doc
        return None

    def find_by_id(self, puzzle_id: str, difficulty: str) -> Optional[PuzzleDocument]:
        for doc in self._decoded():
            if doc.difficulty == difficulty and doc.id == puzzle_id:
                return doc
        return None

    def list_before(
        self, before: datetime, *, difficulty: str | None = None, limit: int = 30
    ) -> list[PuzzleDocument]:
        before = as_utc(before)
        docs = [
            doc
            for doc in self._decoded()
            if doc.date < before and (not difficulty or doc.difficulty == difficulty)
        ]
        docs.sort(key=lambda doc: doc.date, reverse=True)
        return docs[:limit]

    def iter_all(self) -> Iterator[PuzzleDocument]:
        return iter(self._decoded())

    def commit_batch(self, docs: Sequence[PuzzleDocument]) -> None:
        _check_batch_size(docs)
        for doc in docs:
            self.add(doc)

    def update_dates(self, docs: Sequence[PuzzleDocument]) -> None:
        _check_batch_size(docs)
        keys = [(doc.id, doc.difficulty) for doc in docs]
        # All or nothing, like a Firestore batch with a missing document.
        if any(key not in self.documents for key in keys):
            raise PuzzleStoreError("Failed to write puzzles")
        for key, doc in zip(keys, docs):
            self.documents[key]["date"] = as_utc(doc.date)

    def list_patch_notes(self) -> list[PatchNote]:
        notes = (
            _decode_note_or_skip(note_id, data)
            for note_id, data in self.patch_notes.items()
        )
        return sorted(
            (note for note in notes if note is not None),
            key=lambda note: note.date,
            reverse=True,
        )


@dataclass
class UnavailablePuzzleStore:
    """Stands in for a store that is not configured or failed to initialize."""

    reason: str
    available = False

    def _unavailable(self):
        raise StoreUnavailableError("Puzzle store unavailable")

    def find_for_day(
        self, difficulty: str, start: datetime, end: datetime
    ) -> Optional[PuzzleDocument]:
        self._unavailable()

    def find_by_id(self, puzzle_id: str, difficulty: str) -> Optional[PuzzleDocument]:
        self._unavailable()

    def list_before(
        self, before: datetime, *, difficulty: str | None = None, limit: int = 30
    ) -> list[PuzzleDocument]:
        self._unavailable()

    def iter_all(self) -> Iterator[PuzzleDocument]:
        self._unavailable()

    def commit_batch(self, docs: Sequence[PuzzleDocument]) -> None:
        self._unavailable()

    def update_dates(self, docs: Sequence[PuzzleDocument]) -> None:
        self._unavailable()

    def list_patch_notes(self) -> list[PatchNote]:
        self._unavailable()


def _load_credentials(settings: Settings) -> Optional[credentials.Certificate]:
    if settings.firebase_service_account:
        return credentials.Certificate(json.loads(settings.firebase_service_account))
    key_file = Path(settings.firebase_credentials_file)
    if key_file.is_file():
        return credentials.Certificate(str(key_file))
    return None


def _firebase_app(cred: credentials.Certificate, name: str) -> firebase_admin.App:
    try:
        return firebase_admin.get_app(name)
    except ValueError:
        return firebase_admin.initialize_app(cred, name=name)


def build_puzzle_store(settings: Settings) -> PuzzleStore:
    """
    Construct the puzzle store described by `settings`.

    Missing credentials or a failed Firebase initialization are logged and
    produce an UnavailablePuzzleStore rather than an exception.
    """
    if settings.use_in_memory_store:
        if settings.puzzle_seed_file:
            store = InMemoryPuzzleStore.from_json_file(settings.puzzle_seed_file)
            logger.info(
                "[STORE] In-memory store seeded with %d puzzles from %s",
                len(store.documents),
                settings.puzzle_seed_file,
            )
            return store
        logger.info("[STORE] Using empty in-memory store")
        return InMemoryPuzzleStore()

    try:
        cred = _load_credentials(settings)
    except (ValueError, OSError) as e:
        logger.error("[FIREBASE] Invalid service account credentials: %s", e)
        return UnavailablePuzzleStore(reason=f"Invalid Firebase credentials: {e}")

    if cred is None:
        logger.warning(
            "[FIREBASE] No service account configured; puzzle reads will be unavailable"
        )
        return UnavailablePuzzleStore(reason="No Firebase credentials configured")

    try:
        app = _firebase_app(cred, settings.firebase_app_name)
        client = firestore.client(app)
    except (ValueError, *STORE_FAULTS) as e:
        logger.error("[FIREBASE] Failed to initialize: %s", e)
        return UnavailablePuzzleStore(reason=f"Firebase initialization failed: {e}")

    logger.info(
        "[FIREBASE] Initialized app %r for collection %r",
        settings.firebase_app_name,
        settings.puzzles_collection,
    )
    return FirestorePuzzleStore(
        client, settings.puzzles_collection, settings.patch_notes_collection
    )

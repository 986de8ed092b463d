# Copyright 2025 Google LLC
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
# ==============================================================================

from dataclasses import asdict, dataclass, field, replace
from datetime import datetime
from typing import Any, List, Mapping, Optional

from dacite import Config, DaciteError, from_dict

from shared.dates import as_utc, coerce_datetime, format_timestamp, start_of_day
from shared.json_utils import convert_keys


class InvalidPuzzleDocumentError(ValueError):
    """Raised when stored data cannot be decoded into a PuzzleDocument."""


@dataclass
class PublicPuzzle:
    """Projection of a puzzle that is safe to serve before it is solved."""

    id: str
    puzzle_number: int
    date: str
    emojis: List[str]
    difficulty: str
    is_fusion_twist: bool
    twist_type: Optional[str]


@dataclass
class ArchivePuzzle(PublicPuzzle):
    """Projection of a past puzzle; reveals the answer but not the hints."""

    answer: str


@dataclass
class PuzzleDocument:
    """A puzzle as held in the document store."""

    id: str
    puzzle_number: int
    date: datetime
    emojis: List[str]
    answer: str
    difficulty: str
    hints: List[str] = field(default_factory=list)
    is_fusion_twist: bool = False
    twist_type: Optional[str] = None

    def public_view(self) -> PublicPuzzle:
        return PublicPuzzle(
            id=self.id,
            puzzle_number=self.puzzle_number,
            date=format_timestamp(self.date),
            emojis=list(self.emojis),
            difficulty=self.difficulty,
            is_fusion_twist=self.is_fusion_twist,
            twist_type=self.twist_type,
        )

    def archive_view(self) -> ArchivePuzzle:
        return ArchivePuzzle(**asdict(self.public_view()), answer=self.answer)

    def hint_at(self, index: int) -> Optional[str]:
        """Returns the hint at `index`, or None if there is no usable hint there."""
        if 0 <= index < len(self.hints) and self.hints[index]:
            return self.hints[index]
        return None

    def with_date(self, value: datetime) -> "PuzzleDocument":
        return replace(self, date=as_utc(value))

    def at_start_of_day(self) -> "PuzzleDocument":
        return self.with_date(start_of_day(self.date))

    def to_store_dict(self) -> dict:
        """Returns the camelCase document body written to the store (id excluded)."""
        data = convert_keys(asdict(self), "snake_to_camel")
        data.pop("id")
        data["date"] = as_utc(self.date)
        return data


def _coerce_bool(value: Any) -> Any:
    # Older puzzle rows stored the twist flag as 0/1.
    if isinstance(value, int) and not isinstance(value, bool):
        return bool(value)
    return value


_DECODE_CONFIG = Config(
    type_hooks={datetime: coerce_datetime, bool: _coerce_bool},
)


def decode_puzzle_document(doc_id: str, data: Mapping[str, Any]) -> PuzzleDocument:
    """
    Decodes a stored puzzle into a PuzzleDocument.

    Optional fields that are absent or null take their defaults; an empty
    twist type counts as absent. Documents that miss a required field or hold
    a value of the wrong type raise InvalidPuzzleDocumentError.
    """
    if not doc_id:
        raise InvalidPuzzleDocumentError("Puzzle document has no id")
    if not isinstance(data, Mapping):
        raise InvalidPuzzleDocumentError(f"Puzzle {doc_id!r} is not a mapping")

    fields = {
        key: value
        for key, value in convert_keys(dict(data), "camel_to_snake").items()
        if value is not None
    }
    if not fields.get("twist_type"):
        fields.pop("twist_type", None)
    fields["id"] = doc_id

    try:
        doc = from_dict(data_class=PuzzleDocument, data=fields, config=_DECODE_CONFIG)
    except DaciteError as e:
        raise InvalidPuzzleDocumentError(f"Puzzle {doc_id!r}: {e}") from e

    if doc.puzzle_number < 1:
        raise InvalidPuzzleDocumentError(
            f"Puzzle {doc_id!r}: puzzleNumber must be positive"
        )
    return doc

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

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping

from dacite import Config, DaciteError, from_dict

from shared.dates import format_timestamp


class InvalidPatchNoteError(ValueError):
    """Raised when stored data cannot be decoded into a PatchNote."""


@dataclass
class PatchNote:
    """A release note as held in the patchNotes collection."""

    id: str
    title: str
    content: str
    date: str
    version: str = ""
    type: str = ""


def _date_as_string(value: Any) -> Any:
    # Notes written by the admin client hold date strings; older ones hold
    # Firestore timestamps.
    if isinstance(value, datetime):
        return format_timestamp(value)
    return value


_DECODE_CONFIG = Config(type_hooks={str: _date_as_string})


def decode_patch_note(doc_id: str, data: Mapping[str, Any]) -> PatchNote:
    if not doc_id:
        raise InvalidPatchNoteError("Patch note has no id")
    if not isinstance(data, Mapping):
        raise InvalidPatchNoteError(f"Patch note {doc_id!r} is not a mapping")
    fields = {key: value for key, value in data.items() if value is not None}
    fields["id"] = doc_id
    try:
        return from_dict(data_class=PatchNote, data=fields, config=_DECODE_CONFIG)
    except DaciteError as e:
        raise InvalidPatchNoteError(f"Patch note {doc_id!r}: {e}") from e

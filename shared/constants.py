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

"""Constants shared by the API service and the puzzle scripts."""

PUZZLES_COLLECTION = "puzzles"
PATCH_NOTES_COLLECTION = "patchNotes"

DIFFICULTY_EASY = "easy"
DIFFICULTY_NORMAL = "normal"
DIFFICULTY_HARD = "hard"
DIFFICULTIES = (DIFFICULTY_EASY, DIFFICULTY_NORMAL, DIFFICULTY_HARD)
DEFAULT_DIFFICULTY = DIFFICULTY_NORMAL

# Firestore rejects write batches with more operations than this.
MAX_BATCH_WRITES = 500

DEFAULT_ARCHIVE_LIMIT = 30
MAX_ARCHIVE_LIMIT = 365

MAX_GUESS_LENGTH = 100

DEFAULT_PATCH_NOTES_LIMIT = 10
MAX_PATCH_NOTES_LIMIT = 100

NO_PUZZLE_MESSAGE = (
    "No puzzle available. Please make sure Firebase service account is configured."
)

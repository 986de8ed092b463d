"""
Pydantic schemas for the puzzle API. JSON field names are camelCase.
"""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from shared.constants import MAX_GUESS_LENGTH


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PublicPuzzleResponse(CamelModel):
    id: str
    puzzle_number: int
    date: str
    emojis: list[str]
    difficulty: str
    is_fusion_twist: bool = False
    twist_type: Optional[str] = None


class ArchivePuzzleResponse(PublicPuzzleResponse):
    answer: str


class NoPuzzleResponse(BaseModel):
    message: str


class AnswerResponse(BaseModel):
    answer: str


class HintResponse(BaseModel):
    hint: str


class GuessRequest(BaseModel):
    guess: str = Field(..., min_length=1, max_length=MAX_GUESS_LENGTH)
    difficulty: Optional[str] = None


class GuessResponse(CamelModel):
    is_correct: bool
    answer: Optional[str] = None
    partial_match_feedback: Optional[str] = None
    matched_word: Optional[str] = None
    match_type: str = "none"
    has_correct_words_wrong_order: bool = False


class StatusResponse(BaseModel):
    status: Literal["ok"]
    store: Literal["available", "unavailable"]


class ErrorResponse(BaseModel):
    error: str


class PatchNoteResponse(BaseModel):
    id: str
    title: str
    content: str
    version: str
    date: str
    type: str


class LatestPatchNoteResponse(PatchNoteResponse):
    url: str


class PatchNoteListResponse(CamelModel):
    patch_notes: list[PatchNoteResponse]
    total: int
    game_url: str

"""
HTTP routes for the puzzle API.
"""

from __future__ import annotations

import logging
from dataclasses import asdict
from typing import Optional, Union

from fastapi import APIRouter, Depends, Query, Request

from fusdle import patch_notes, puzzles
from fusdle.config import Settings
from fusdle.dependencies import get_app_settings, get_puzzle_store
from fusdle.errors import FusdleError
from fusdle.schemas import (
    AnswerResponse,
    ArchivePuzzleResponse,
    ErrorResponse,
    GuessRequest,
    GuessResponse,
    HintResponse,
    LatestPatchNoteResponse,
    NoPuzzleResponse,
    PatchNoteListResponse,
    PatchNoteResponse,
    PublicPuzzleResponse,
    StatusResponse,
)
from fusdle.store import PuzzleStore
from shared.constants import DEFAULT_PATCH_NOTES_LIMIT, NO_PUZZLE_MESSAGE

logger = logging.getLogger(__name__)

router = APIRouter()

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
    503: {"model": ErrorResponse},
}


@router.get("/status", response_model=StatusResponse)
def status(store: PuzzleStore = Depends(get_puzzle_store)):
    return StatusResponse(
        status="ok", store="available" if store.available else "unavailable"
    )


@router.get(
    "/puzzles/today",
    response_model=Union[PublicPuzzleResponse, NoPuzzleResponse],
    responses={500: {"model": ErrorResponse}},
)
def today_puzzle(
    difficulty: Optional[str] = Query(None),
    store: PuzzleStore = Depends(get_puzzle_store),
    settings: Settings = Depends(get_app_settings),
):
    """
    Today's puzzle without its answer or hints. When there is none (or the
    store is unavailable) the response is still 200 with a message.
    """
    puzzle = puzzles.get_today_puzzle(
        store, difficulty, default_difficulty=settings.default_difficulty
    )
    if puzzle is None:
        return NoPuzzleResponse(message=NO_PUZZLE_MESSAGE)
    return PublicPuzzleResponse(**asdict(puzzle))


@router.get(
    "/puzzles/archive",
    response_model=list[ArchivePuzzleResponse],
    responses=ERROR_RESPONSES,
)
def puzzle_archive(
    limit: Optional[int] = Query(None),
    difficulty: Optional[str] = Query(None),
    store: PuzzleStore = Depends(get_puzzle_store),
    settings: Settings = Depends(get_app_settings),
):
    archive = puzzles.get_archive(
        store,
        limit=settings.archive_limit if limit is None else limit,
        difficulty=difficulty,
    )
    return [ArchivePuzzleResponse(**asdict(puzzle)) for puzzle in archive]


@router.get(
    "/puzzles/{puzzle_id}/answer",
    response_model=AnswerResponse,
    responses=ERROR_RESPONSES,
)
def puzzle_answer(
    puzzle_id: str,
    difficulty: Optional[str] = Query(None),
    store: PuzzleStore = Depends(get_puzzle_store),
    settings: Settings = Depends(get_app_settings),
):
    answer = puzzles.get_answer(
        store, puzzle_id, difficulty, default_difficulty=settings.default_difficulty
    )
    return AnswerResponse(answer=answer)


@router.get(
    "/puzzles/{puzzle_id}/hints/{index}",
    response_model=HintResponse,
    responses=ERROR_RESPONSES,
)
def puzzle_hint(
    puzzle_id: str,
    index: str,
    difficulty: Optional[str] = Query(None),
    store: PuzzleStore = Depends(get_puzzle_store),
    settings: Settings = Depends(get_app_settings),
):
    hint = puzzles.get_hint(
        store,
        puzzle_id,
        index,
        difficulty,
        default_difficulty=settings.default_difficulty,
    )
    return HintResponse(hint=hint)


@router.post(
    "/puzzles/{puzzle_id}/guess",
    response_model=GuessResponse,
    responses=ERROR_RESPONSES,
)
def puzzle_guess(
    puzzle_id: str,
    payload: GuessRequest,
    difficulty: Optional[str] = Query(None),
    store: PuzzleStore = Depends(get_puzzle_store),
    settings: Settings = Depends(get_app_settings),
):
    # The body's difficulty wins over the query string.
    result = puzzles.check_guess(
        store,
        puzzle_id,
        payload.guess,
        payload.difficulty or difficulty,
        default_difficulty=settings.default_difficulty,
    )
    return GuessResponse(**asdict(result))


def _site_url(request: Request) -> str:
    return str(request.base_url).rstrip("/")


@router.get(
    "/patch-notes/latest",
    response_model=LatestPatchNoteResponse,
    responses={404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def latest_patch_note(request: Request, store: PuzzleStore = Depends(get_puzzle_store)):
    note = patch_notes.get_latest_patch_note(store)
    if note is None:
        raise FusdleError("No patch notes found", status_code=404)
    return LatestPatchNoteResponse(
        **asdict(note), url=f"{_site_url(request)}/patch-notes"
    )


@router.get(
    "/patch-notes",
    response_model=PatchNoteListResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def list_patch_notes(
    request: Request,
    limit: int = Query(DEFAULT_PATCH_NOTES_LIMIT),
    store: PuzzleStore = Depends(get_puzzle_store),
):
    notes, total = patch_notes.get_patch_notes(store, limit=limit)
    return PatchNoteListResponse(
        patch_notes=[PatchNoteResponse(**asdict(note)) for note in notes],
        total=total,
        game_url=_site_url(request),
    )

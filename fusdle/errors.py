"""
Error types raised by the puzzle service and mapped to HTTP responses.
"""

from __future__ import annotations


class FusdleError(Exception):
    """Base error; `message` is safe to return to clients."""

    status_code = 500

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ClientInputError(FusdleError):
    """A required parameter is missing or malformed."""

    status_code = 400


class PuzzleNotFoundError(FusdleError):
    """No puzzle (or no hint at the requested index) matches the request."""

    status_code = 404


class StoreUnavailableError(FusdleError):
    """The puzzle store is not configured or failed to initialize."""

    status_code = 503


class PuzzleStoreError(FusdleError):
    """A store query or write failed."""

    status_code = 500


class BatchUploadError(FusdleError):
    """A chunk of a bulk upload failed to commit."""

    def __init__(
        self,
        *,
        chunk_index: int,
        first_puzzle_number: int,
        last_puzzle_number: int,
        committed: int,
    ):
        super().__init__(
            f"Batch {chunk_index} (puzzles #{first_puzzle_number}-"
            f"#{last_puzzle_number}) failed after {committed} puzzles were committed"
        )
        self.chunk_index = chunk_index
        self.first_puzzle_number = first_puzzle_number
        self.last_puzzle_number = last_puzzle_number
        self.committed = committed

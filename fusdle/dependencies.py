"""
Dependency wiring for the FastAPI app.

The store and settings are built once by `create_app` and kept on
`app.state`; handlers receive them through these dependencies.
"""

from __future__ import annotations

from fastapi import Request

from fusdle.config import Settings
from fusdle.store import PuzzleStore


def get_puzzle_store(request: Request) -> PuzzleStore:
    return request.app.state.puzzle_store


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings

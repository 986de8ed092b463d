"""
FastAPI application entry point for the puzzle API.

    uvicorn fusdle.app:app
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from fusdle.config import Settings, get_settings
from fusdle.errors import FusdleError
from fusdle.routes import router
from fusdle.store import PuzzleStore, build_puzzle_store

logger = logging.getLogger(__name__)

HTTP_ERROR_MESSAGES = {404: "Not found", 405: "Method not allowed"}

CORS_ALLOW_HEADERS = [
    "X-CSRF-Token",
    "X-Requested-With",
    "Accept",
    "Accept-Version",
    "Content-Length",
    "Content-MD5",
    "Content-Type",
    "Date",
    "X-Api-Version",
]


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(FusdleError)
    async def handle_fusdle_error(request: Request, exc: FusdleError):
        if exc.status_code >= 500:
            logger.error(
                "%s %s failed: %s", request.method, request.url.path, exc.message
            )
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError):
        logger.info("Rejected %s %s: %s", request.method, request.url.path, exc.errors())
        return JSONResponse(
            status_code=400, content={"error": "Invalid request parameters"}
        )

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(request: Request, exc: StarletteHTTPException):
        # Unmatched paths and methods raised by the router.
        message = HTTP_ERROR_MESSAGES.get(exc.status_code, str(exc.detail))
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": message},
            headers=getattr(exc, "headers", None),
        )


def create_app(
    settings: Settings | None = None, store: PuzzleStore | None = None
) -> FastAPI:
    settings = settings or get_settings()
    logging.basicConfig(level=settings.log_level.upper())

    app = FastAPI(title="Fusdle Puzzle API", version="0.1.0")
    app.state.settings = settings
    app.state.puzzle_store = store if store is not None else build_puzzle_store(settings)

    _register_error_handlers(app)

    @app.middleware("http")
    async def answer_options(request: Request, call_next):
        # OPTIONS on any path succeeds with an empty body.
        if request.method == "OPTIONS":
            return Response(status_code=200)
        return await call_next(request)

    @app.middleware("http")
    async def catch_unexpected_errors(request: Request, call_next):
        # Runs inside CORSMiddleware; 500 responses must carry CORS headers.
        try:
            return await call_next(request)
        except Exception:
            logger.exception(
                "Unhandled error on %s %s", request.method, request.url.path
            )
            return JSONResponse(
                status_code=500, content={"error": "Internal server error"}
            )

    # Public read-only feed: any origin, credentials allowed.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=CORS_ALLOW_HEADERS,
    )

    app.include_router(router, prefix=settings.api_prefix)
    return app


app = create_app()

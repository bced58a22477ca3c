"""FastAPI app exposing word validation and missed-word review."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from fastapi import FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.engine import (
    CategoryMembership,
    HistoryUnavailable,
    InvalidInput,
    LookupUnavailable,
    MissedWordsReport,
    NotFound,
    ValidationResult,
    WordSuggester,
    build_missed_words_report,
    default_taxonomy,
    get_missed_words,
    validate_word_strict,
)
from src.history import PlayHistoryStore

from .config import AppSettings, build_membership, build_store, build_suggester
from .models import (
    CategoriesResponse,
    CategoryGroup,
    ErrorResponse,
    SoloMissedWordsRequest,
    ValidateWordRequest,
)

logger = logging.getLogger("api")

load_dotenv(Path(__file__).resolve().parents[2] / ".env")

_ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    503: {"model": ErrorResponse},
}


def _error(status_code: int, exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})


def create_app(
    settings: AppSettings | None = None,
    *,
    membership: CategoryMembership | None = None,
    suggester: WordSuggester | None = None,
    store: PlayHistoryStore | None = None,
) -> FastAPI:
    """Build the API. Collaborators not passed in are built from ``settings``."""
    settings = settings or AppSettings.from_env()

    app = FastAPI(title="Word Game API")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.settings = settings
    app.state.membership = membership or build_membership(settings)
    app.state.suggester = suggester or build_suggester(settings)
    app.state.store = store or build_store(settings)

    @app.exception_handler(LookupUnavailable)
    async def lookup_unavailable(request: Request, exc: LookupUnavailable) -> JSONResponse:
        logger.warning(f"{request.url.path}: {exc}")
        return _error(503, exc)

    @app.exception_handler(HistoryUnavailable)
    async def history_unavailable(request: Request, exc: HistoryUnavailable) -> JSONResponse:
        logger.warning(f"{request.url.path}: {exc}")
        return _error(503, exc)

    @app.exception_handler(InvalidInput)
    async def invalid_input(request: Request, exc: InvalidInput) -> JSONResponse:
        return _error(400, exc)

    @app.exception_handler(NotFound)
    async def not_found(request: Request, exc: NotFound) -> JSONResponse:
        return _error(404, exc)

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/categories", response_model=CategoriesResponse)
    def list_categories() -> CategoriesResponse:
        groups = [
            CategoryGroup(name=name, subcategories=default_taxonomy.children(name))
            for name in default_taxonomy.grand_categories()
        ]
        return CategoriesResponse(grand_categories=groups)

    @app.post("/validate-word", response_model=ValidationResult, responses=_ERROR_RESPONSES)
    async def validate_word(req: ValidateWordRequest, request: Request) -> ValidationResult:
        return await validate_word_strict(
            req.word,
            req.category,
            req.category_tags,
            req.allowed_letters,
            req.used_words,
            membership=request.app.state.membership,
            timeout=request.app.state.settings.lookup_timeout,
        )

    @app.get("/room/missed-words", response_model=MissedWordsReport, responses=_ERROR_RESPONSES)
    async def room_missed_words(
        request: Request,
        room_code: str = Query(alias="roomCode", min_length=1),
        player_id: str = Query(alias="playerId", min_length=1),
    ) -> MissedWordsReport:
        return await get_missed_words(
            room_code,
            player_id,
            store=request.app.state.store,
            suggester=request.app.state.suggester,
            timeout=request.app.state.settings.history_timeout,
        )

    @app.post("/solo/missed-words", response_model=MissedWordsReport, responses=_ERROR_RESPONSES)
    async def solo_missed_words(req: SoloMissedWordsRequest, request: Request) -> MissedWordsReport:
        return await build_missed_words_report(
            [played.to_turn() for played in req.categories_played],
            base_category=req.base_category,
            collected_letters=req.collected_letters,
            suggester=request.app.state.suggester,
        )

    return app

"""FastAPI app with status, ingestion and content endpoints.

Agent output is posted to ``/store-llm`` and read back under ``/api/content``.
"""
from __future__ import annotations

import json
import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any

from fastapi import Depends, FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import retrieval
from .config import Settings, settings as default_settings
from .db import Database, get_session
from .errors import ExtractionError, NotFoundError, StoreConnectivityError, StoreError
from .logging_config import setup_logging
from .pipelines.ingest import ingest_payload
from .startup import StartupConnector

logger = logging.getLogger(__name__)

STATUS_MESSAGE = "Service is running and ready to accept requests"


# Pydantic response models
class StatusResponse(BaseModel):
    """Status check response."""
    success: bool = True
    message: str


class ErrorResponse(BaseModel):
    """Error response."""
    success: bool = False
    error: str


class ItemErrorDTO(BaseModel):
    """Failure of one submitted item."""
    index: int
    error: str


class StoreResponse(BaseModel):
    """Ingestion response."""
    success: bool
    inserted: list[int] = Field(default_factory=list)
    errors: list[ItemErrorDTO] = Field(default_factory=list)


class RecordDTO(BaseModel):
    """Full stored record."""
    id: int
    heading: str
    summary: str
    keypoints: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    created_at: datetime


class SummaryDTO(BaseModel):
    """Record projection without list fields."""
    id: int
    heading: str
    summary: str
    created_at: datetime


class SummaryListResponse(BaseModel):
    success: bool = True
    data: list[SummaryDTO]


class RecordResponse(BaseModel):
    success: bool = True
    data: RecordDTO


async def read_submission(request: Request) -> Any:
    """Decode the raw request body for extraction.

    JSON bodies (or bodies without a content type) are decoded as JSON, so a
    JSON string still goes through fence detection. Any other content type
    is handed over as plain text.
    """
    body = await request.body()
    try:
        text = body.decode("utf-8")
    except UnicodeDecodeError as e:
        raise ExtractionError() from e

    content_type = request.headers.get("content-type", "").lower()
    if content_type and "json" not in content_type:
        return text

    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        logger.warning(f"Request body is not valid JSON: {e}")
        raise ExtractionError() from e


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message).model_dump(),
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup/shutdown logic."""
    config: Settings = app.state.settings

    # Startup
    setup_logging(config.logging)
    logger.info(f"Application starting up ({config.environment.value})")

    database = Database(config.db)
    connector = StartupConnector(
        database.initialize,
        max_attempts=config.db.connect_attempts,
        delay=config.db.connect_delay,
    )
    try:
        await connector.connect()
    except StoreConnectivityError:
        await database.dispose()
        raise
    app.state.database = database

    yield

    # Shutdown
    logger.info("Application shutting down")
    await database.dispose()


def create_app(config: Settings | None = None) -> FastAPI:
    """Build the application for the given settings."""
    config = config or default_settings

    app = FastAPI(
        title=config.app_name,
        version=config.version,
        description="Stores structured records extracted from LLM agent output",
        lifespan=lifespan,
    )
    app.state.settings = config

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.server.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    _register_exception_handlers(app)
    _register_routes(app)
    return app


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ExtractionError)
    async def extraction_error_handler(request: Request, exc: ExtractionError):
        """Handle payloads without parseable JSON."""
        logger.warning(f"Rejected submission: {exc}")
        return _error(status.HTTP_400_BAD_REQUEST, str(exc))

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        return _error(status.HTTP_404_NOT_FOUND, str(exc))

    @app.exception_handler(StoreError)
    async def store_error_handler(request: Request, exc: StoreError):
        """Handle store failures on reads."""
        logger.error(f"Store error: {exc}")
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc))

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return _error(exc.status_code, str(exc.detail))


def _register_routes(app: FastAPI) -> None:
    @app.get("/")
    async def root():
        """Root endpoint with API info."""
        config: Settings = app.state.settings
        return {
            "app": config.app_name,
            "version": config.version,
            "endpoints": {
                "status": "/status",
                "store": "/store-llm",
                "content_all": "/api/content/all",
                "content_summaries": "/api/content",
                "content_by_id": "/api/content/{content_id}",
                "docs": "/docs",
            },
        }

    @app.get("/status", response_model=StatusResponse)
    async def get_status() -> StatusResponse:
        """Liveness check."""
        return StatusResponse(message=STATUS_MESSAGE)

    @app.post("/store-llm", response_model=StoreResponse)
    async def store_llm(
        request: Request,
        session: AsyncSession = Depends(get_session),
    ) -> StoreResponse:
        """Store one or more records extracted from agent output.

        Accepts a JSON object, an array of objects, or a string (JSON string
        or plain-text body) that contains JSON, optionally inside a fenced
        code block. Each item succeeds or fails on its own.

        Raises:
            ExtractionError: If no JSON could be parsed from the body
        """
        raw = await read_submission(request)
        try:
            result = await ingest_payload(session, raw)
        except ExtractionError:
            raise
        except Exception as e:
            logger.error(f"Unexpected error storing submission: {e}", exc_info=True)
            raise StarletteHTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Internal server error: {str(e)}",
            )

        return StoreResponse(
            success=result.success,
            inserted=list(result.inserted),
            errors=[ItemErrorDTO(index=item.index, error=item.error) for item in result.errors],
        )

    @app.get("/api/content/all", response_model=list[RecordDTO])
    async def get_all_content(session: AsyncSession = Depends(get_session)):
        """All records, newest first; 404 while the store is empty."""
        return await retrieval.list_all(session)

    @app.get("/api/content", response_model=SummaryListResponse)
    async def get_content_summaries(session: AsyncSession = Depends(get_session)):
        """Summary listing, newest first; empty is still a success."""
        return SummaryListResponse(data=await retrieval.list_summaries(session))

    @app.get("/api/content/{content_id}", response_model=RecordResponse)
    async def get_content(content_id: int, session: AsyncSession = Depends(get_session)):
        """Single record by id."""
        return RecordResponse(data=await retrieval.get_by_id(session, content_id))


app = create_app()

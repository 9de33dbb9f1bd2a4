from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional

import uvicorn
from fastapi import Depends, FastAPI, File, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from starlette.concurrency import run_in_threadpool

from analytics_ai.config import Settings
from analytics_ai.errors import AnalyticsError, ConfigError, InputValidationError
from analytics_ai.models.data_models import LogEntry
from analytics_ai.services.analytics import AnalyticsService
from analytics_ai.services.gemini_client import GeminiClient
from analytics_ai.services.parser import LogParser
from analytics_ai.services.storage import UploadStore

logger = logging.getLogger(__name__)

# ──────────────────────────────────────────────────────────────────────────────
# Errors
# ──────────────────────────────────────────────────────────────────────────────


class ApiError(Exception):
    """Error already tagged with the HTTP status and message for the caller"""

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(message)


def status_for(exc: AnalyticsError) -> int:
    return 400 if isinstance(exc, InputValidationError) else 500


def describe_validation(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(x) for x in err.get("loc", ()))
        parts.append(f"{loc}: {err.get('msg')}")
    return "; ".join(parts)


def install_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(ApiError)
    async def api_error(_: Request, exc: ApiError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(AnalyticsError)
    async def analytics_error(_: Request, exc: AnalyticsError) -> JSONResponse:
        return JSONResponse(status_code=status_for(exc), content={"error": str(exc)})

    # Malformed bodies are a client error here, not FastAPI's default 422.
    @app.exception_handler(RequestValidationError)
    async def invalid_request(_: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content={"error": f"invalid request body: {describe_validation(exc)}"},
        )


# ──────────────────────────────────────────────────────────────────────────────
# App
# ──────────────────────────────────────────────────────────────────────────────


def get_service(request: Request) -> AnalyticsService:
    return request.app.state.service


def get_store(request: Request) -> UploadStore:
    return request.app.state.store


def create_app(settings: Settings, service: Optional[AnalyticsService] = None) -> FastAPI:
    """Build the application; a prepared service may be injected (tests)."""
    if service is None:
        service = AnalyticsService(
            GeminiClient(settings.api_key, endpoint=settings.gemini_endpoint)
        )

    @asynccontextmanager
    async def lifespan(_: FastAPI):
        yield
        service.close()

    app = FastAPI(title="Analytics AI (Logs → Gemini analysis)", lifespan=lifespan)
    app.state.service = service
    app.state.store = UploadStore(settings.upload_dir)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # dev OK; lock down in prod
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    install_error_handlers(app)

    # ── Health ────────────────────────────────────────────────────────────────

    @app.get("/health")
    def health() -> Dict[str, Any]:
        return {"status": "healthy", "message": "Analytics AI service is running"}

    # ── Upload ────────────────────────────────────────────────────────────────

    @app.post("/upload")
    async def upload(
        file: UploadFile = File(...),
        svc: AnalyticsService = Depends(get_service),
        store: UploadStore = Depends(get_store),
    ) -> Dict[str, Any]:
        """
        Saves the uploaded JSON array, reads it back and analyzes it like
        /analyze/logs.
        """
        content = await file.read()
        saved = await run_in_threadpool(store.save, file.filename or "", content)
        raw = await run_in_threadpool(store.read, saved)
        entries = LogParser.parse_entries(raw)

        try:
            analysis = await run_in_threadpool(svc.analyze_logs, entries)
        except AnalyticsError as e:
            raise ApiError(500, f"analysis err: {e}") from e

        return {"message": "File successfully uploaded and analyzed", "analysis": analysis}

    # ── Analysis ──────────────────────────────────────────────────────────────

    @app.post("/analyze/logs")
    def analyze_logs(
        logs: List[LogEntry],
        svc: AnalyticsService = Depends(get_service),
    ) -> Dict[str, Any]:
        try:
            analysis = svc.analyze_logs(logs)
        except AnalyticsError as e:
            raise ApiError(500, f"error generating analysis: {e}") from e
        return {"analysis": analysis}

    @app.post("/analyze/performance")
    def analyze_performance(
        logs: List[LogEntry],
        svc: AnalyticsService = Depends(get_service),
    ) -> Dict[str, Any]:
        try:
            analysis = svc.analyze_performance(logs)
        except AnalyticsError as e:
            raise ApiError(500, f"error generating analysis: {e}") from e
        return {"analysis": analysis}

    # ── CSV export ────────────────────────────────────────────────────────────

    @app.post("/convert/to-csv")
    def convert_to_csv(
        logs: List[LogEntry],
        svc: AnalyticsService = Depends(get_service),
    ) -> Response:
        try:
            data = svc.convert_to_csv(logs)
        except AnalyticsError as e:
            raise ApiError(500, f"error converting to CSV: {e}") from e
        return Response(
            content=data,
            media_type="text/csv",
            headers={"Content-Disposition": "attachment; filename=analytics.csv"},
        )

    return app


def run() -> None:
    """Console entry point: load settings, configure logging, serve."""
    try:
        settings = Settings.from_env()
    except ConfigError as e:
        logging.basicConfig(level=logging.INFO)
        logger.critical("%s", e)
        sys.exit(1)

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("Starting Analytics AI service on %s:%d", settings.host, settings.port)
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()

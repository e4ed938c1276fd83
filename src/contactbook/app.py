from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, AsyncIterator, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .config import ContactBookSettings, get_settings
from .db import Database
from .errors import Conflict, ContactBookError, NotFound, ReferentialIntegrity, ValidationFailure
from .logging import get_logger, setup_logging
from .routes import lookups, organizations, persons

logger = get_logger("contactbook.api")

_STATUS_BY_ERROR = (
    (ValidationFailure, status.HTTP_400_BAD_REQUEST),
    (NotFound, status.HTTP_404_NOT_FOUND),
    (Conflict, status.HTTP_409_CONFLICT),
    (ReferentialIntegrity, status.HTTP_400_BAD_REQUEST),
)


def _error_body(exc: ContactBookError) -> Dict[str, Any]:
    body: Dict[str, Any] = {"success": False, "error": exc.message}
    if exc.detail:
        body["detail"] = exc.detail
    if isinstance(exc, ValidationFailure) and exc.errors:
        body["details"] = exc.errors
    return body


async def handle_contactbook_error(request: Request, exc: ContactBookError) -> JSONResponse:
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return JSONResponse(status_code=status_code, content=_error_body(exc))
    logger.error("request_failed", path=request.url.path, error=exc.message, detail=exc.detail)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"success": False, "error": "Internal server error"},
    )


async def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = []
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ())]
        if location and location[0] in {"body", "query", "path"}:
            location = location[1:]
        details.append({"field": ".".join(location), "message": error.get("msg", "")})
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"success": False, "error": "Validation Error", "details": details},
    )


def create_app(settings: Optional[ContactBookSettings] = None, db: Optional[Database] = None) -> FastAPI:
    settings = settings or get_settings()
    database = db or Database(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        setup_logging(settings.log_level)
        database.open()
        logger.info("contactbook_api_startup", service=settings.service_name)
        try:
            yield
        finally:
            database.close()

    app = FastAPI(title="Contact Service API", version="1.0.0", lifespan=lifespan)
    app.state.db = database
    app.state.settings = settings

    app.add_exception_handler(ContactBookError, handle_contactbook_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        response = await call_next(request)
        logger.info("http_request", method=request.method, path=request.url.path, status=response.status_code)
        return response

    @app.get("/api/health", tags=["system"])
    async def health() -> Dict[str, Any]:
        return {
            "success": True,
            "message": "Contact Service API is running",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    app.include_router(persons.router)
    app.include_router(organizations.router)
    app.include_router(lookups.router)

    return app


__all__ = ["create_app"]

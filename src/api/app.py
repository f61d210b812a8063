"""Application factory of the remote service."""

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session, sessionmaker

from src.api.auth import TokenVerifier
from src.api.models import ErrorResponse
from src.api.routes import router
from src.core.config import Settings, configure_logging
from src.core.exceptions import DuplicateGameError, NotAuthenticatedError
from src.db.database import make_session_factory

logger = logging.getLogger(__name__)


def _error(status_code: int, code: str, message: str, details: Optional[str] = None) -> JSONResponse:
    body = ErrorResponse(code=code, message=message, details=details)
    return JSONResponse(status_code=status_code, content=body.model_dump())


async def not_authenticated_handler(request: Request, exc: NotAuthenticatedError) -> JSONResponse:
    return _error(401, "PGRST301", exc.message)


async def duplicate_game_handler(request: Request, exc: DuplicateGameError) -> JSONResponse:
    return _error(409, "23505", str(exc))


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info("Rejected %s %s: invalid body", request.method, request.url.path)
    return _error(400, "PGRST102", "invalid request body", details=str(exc.errors()))


def create_app(
    token_verifier: TokenVerifier,
    session_factory: Optional[sessionmaker[Session]] = None,
    settings: Optional[Settings] = None,
) -> FastAPI:
    """Build the service. Without an explicit session factory the remote database URL from the settings is used."""
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)
    if session_factory is None:
        session_factory = make_session_factory(settings.remote_db_url)

    app = FastAPI(title="Break and Run")
    app.state.session_factory = session_factory
    app.state.token_verifier = token_verifier
    app.add_exception_handler(NotAuthenticatedError, not_authenticated_handler)
    app.add_exception_handler(DuplicateGameError, duplicate_game_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.include_router(router)
    return app

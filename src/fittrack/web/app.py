"""FastAPI application exposing the cascade operations."""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .. import __version__
from ..db.engine import get_db_path, init_db
from ..db.store import DocumentStore
from ..errors import FitTrackError, InvalidArgumentError
from ..services.cascade import CascadeOperator
from .routers import entities, functions

logger = logging.getLogger(__name__)

# HTTP status for each symbolic error code
STATUS_BY_CODE = {
    "unauthenticated": 401,
    "invalid-argument": 400,
    "not-found": 404,
    "permission-denied": 403,
    "internal": 500,
}


def create_app(db_path: Path | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    db_path = db_path or get_db_path()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Initialize the document store on startup."""
        await init_db(db_path)
        yield

    app = FastAPI(
        title="fittrack",
        description="Cascading delete and duplicate for training programs",
        version=__version__,
        lifespan=lifespan,
    )

    store = DocumentStore(db_path)
    app.state.store = store
    app.state.cascade = CascadeOperator(store)

    @app.exception_handler(FitTrackError)
    async def fittrack_error_handler(request: Request, exc: FitTrackError):
        """Render errors as {"error": {"code", "message"}}."""
        return JSONResponse(
            status_code=STATUS_BY_CODE.get(exc.code, 500),
            content={"error": exc.to_dict()},
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        """Render malformed request bodies as invalid-argument errors."""
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in exc.errors()
        )
        error = InvalidArgumentError(f"Invalid request: {problems}")
        return JSONResponse(
            status_code=STATUS_BY_CODE[error.code], content={"error": error.to_dict()}
        )

    app.include_router(functions.router)
    app.include_router(entities.router)

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        return {"status": "healthy", "version": __version__}

    return app

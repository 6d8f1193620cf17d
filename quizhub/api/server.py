"""FastAPI application setup"""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from quizhub.api.routes import router
from quizhub.api.middleware import setup_cors, setup_rate_limiting
from quizhub.config import STORE_BACKEND
from quizhub.db.connection import db
from quizhub.db.document_store import DocumentStore, InMemoryDocumentStore, PostgresDocumentStore
from quizhub.exceptions import (
    AuthenticationError,
    DataAccessError,
    QuizHubError,
    RecordNotFoundError,
    StoreConnectionError,
    ValidationError,
)
from quizhub.services import init_container

logger = logging.getLogger(__name__)

# Most specific first
_ERROR_STATUS = (
    (RecordNotFoundError, status.HTTP_404_NOT_FOUND),
    (StoreConnectionError, status.HTTP_503_SERVICE_UNAVAILABLE),
    (DataAccessError, status.HTTP_500_INTERNAL_SERVER_ERROR),
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (AuthenticationError, status.HTTP_401_UNAUTHORIZED),
)


def status_for_error(exc: QuizHubError) -> int:
    for error_type, status_code in _ERROR_STATUS:
        if isinstance(exc, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def create_store() -> DocumentStore:
    """Build the document store selected by STORE_BACKEND"""
    if STORE_BACKEND == "memory":
        logger.warning("Using in-memory document store; data is lost on restart")
        return InMemoryDocumentStore()

    await db.init_pool()
    logger.info("Database pool initialized")
    await db.init_schema()
    return PostgresDocumentStore(db)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifecycle manager for FastAPI application"""
    # Startup
    logger.info("Starting API server...")
    store = await create_store()
    init_container(store)

    yield

    # Shutdown
    logger.info("Shutting down API server...")
    if STORE_BACKEND != "memory":
        await db.close_pool()
        logger.info("Database pool closed")


def create_api_application() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="QuizHub API",
        description="Quiz history, achievements, badges and notifications",
        version="1.0.0",
        lifespan=lifespan
    )

    # Setup middleware
    setup_cors(app)
    setup_rate_limiting(app)

    # Include routes
    app.include_router(router)

    @app.exception_handler(QuizHubError)
    async def quizhub_exception_handler(request: Request, exc: QuizHubError):
        # Already logged when the exception was created
        return JSONResponse(status_code=status_for_error(exc), content=exc.to_dict())

    # Global exception handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error", "detail": str(exc)}
        )

    logger.info("FastAPI application created")

    return app

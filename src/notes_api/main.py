"""
Notes API Application

FastAPI application entrypoint with async lifespan management.
Handles startup checks (database), repository construction and
graceful shutdown.

Start locally:
    uvicorn notes_api.main:app --host 0.0.0.0 --port 8080
"""

import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy import text
from starlette.exceptions import HTTPException as StarletteHTTPException

from notes_api.api.v1.notes import router as notes_router
from notes_api.core.config import settings
from notes_api.core.database import create_schema, dispose_engine, get_engine
from notes_api.core.errors import NoteNotFoundError, StorageError
from notes_api.core.logging import setup_logging
from notes_api.repositories import NoteRepository

# Initialize logging before any log statements
setup_logging()
logger = logging.getLogger(__name__)


async def wait_for_db(retries: int = 10, delay: int = 1) -> bool:
    """
    Wait for PostgreSQL to become available.

    Useful in containerized environments where the database may start
    after the application. Implements retry logic with linear delay.

    Args:
        retries: Maximum connection attempts.
        delay: Seconds between attempts.

    Returns:
        True if connection established, False if all retries exhausted.
    """
    engine = get_engine()
    for i in range(retries):
        try:
            async with engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
                logger.info("Postgres connection established")
                return True
        except Exception as e:
            logger.warning(f"Waiting for Postgres ({i + 1}/{retries})... Error: {e}")
            await asyncio.sleep(delay)

    return False


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Startup:
        - Validates database connectivity (required, blocks startup on failure)
        - Creates missing tables when AUTO_CREATE_SCHEMA is set
        - Builds the shared NoteRepository (statements prepared once)

    Shutdown:
        - Closes the repository and disposes the connection pool
    """
    logger.info("Starting Notes API...")
    logger.info(f"Log Level: {settings.LOG_LEVEL}")

    if not await wait_for_db():
        logger.critical("Could not connect to Postgres. Shutting down.")
        await dispose_engine()
        raise RuntimeError("Database connection failed")

    if settings.AUTO_CREATE_SCHEMA:
        try:
            await create_schema()
        except Exception:
            logger.critical("Schema bootstrap failed. Shutting down.")
            await dispose_engine()
            raise

    repository = NoteRepository(default_timeout=settings.REQUEST_TIMEOUT_SECONDS)
    app.state.notes_repository = repository

    yield  # Application runs here

    logger.info("Shutting down Notes API...")
    repository.close()
    await dispose_engine()


app = FastAPI(title=settings.PROJECT_NAME, lifespan=lifespan)

app.include_router(notes_router, prefix="/notes", tags=["Notes"])


# ---------------------------------------------------------------------------
# Error mapping: every non-2xx body is {"error": "<message>"}
# ---------------------------------------------------------------------------


@app.exception_handler(NoteNotFoundError)
async def note_not_found_handler(request: Request, exc: NoteNotFoundError):
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"error": "not found"},
    )


@app.exception_handler(StorageError)
async def storage_error_handler(request: Request, exc: StorageError):
    # Details are already logged by the repository; keep the body opaque
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "storage failure"},
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Malformed JSON, empty title/content and non-integer ids are client errors."""
    first = exc.errors()[0] if exc.errors() else {}
    location = ".".join(str(part) for part in first.get("loc", ()))
    message = first.get("msg", "invalid request")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": f"{location}: {message}" if location else message},
    )


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.get("/health")
async def health_check():
    """Liveness probe for load balancers and orchestrators."""
    return {"status": "ok"}

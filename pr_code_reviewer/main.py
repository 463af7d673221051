"""Main FastAPI application for PR Code Reviewer."""

from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from pr_code_reviewer.api.routes import router as api_router
from pr_code_reviewer.config import get_settings
from pr_code_reviewer.utils import get_logger
from pr_code_reviewer.utils.database import create_tables, get_database_info

# Configure logging
logger = get_logger(__name__)
settings = get_settings()


@asynccontextmanager
async def lifespan(_app: FastAPI) -> None:
    """Application lifespan events."""
    logger.info("Starting %s API", settings.app_name)

    logger.info("Creating database tables...")
    create_tables()
    logger.info("Application startup complete")

    yield

    logger.info("Shutting down %s API", settings.app_name)


app = FastAPI(
    title=settings.app_name,
    description="Heuristic code-quality review of GitHub pull requests",
    version=settings.app_version,
    lifespan=lifespan,
    docs_url=settings.docs_url,
    redoc_url=settings.redoc_url,
)

app.include_router(api_router, prefix=settings.api_prefix)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {
        "status": "healthy",
        "app": settings.app_name,
        "version": settings.app_version,
    }


@app.get("/database-info")
async def database_info() -> dict[str, str]:
    """Database info endpoint."""
    return get_database_info()


@app.exception_handler(HTTPException)
async def http_exception_handler(_request: Request, exc: HTTPException) -> JSONResponse:
    """HTTP exception handler."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
    )


@app.exception_handler(500)
async def internal_error_handler(_request: Request, _exc: Exception) -> JSONResponse:
    """500 error handler."""
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"},
    )


if __name__ == "__main__":
    uvicorn.run(
        "pr_code_reviewer.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )

"""Main FastAPI application entry point."""

from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from entitlements.presentation import router as entitlements_router
from infrastructure.database.dependencies import (
    close_database_connections,
    get_read_session,
)
from infrastructure.logging import configure_logging
from infrastructure.settings import get_settings
from infrastructure.version import __version__
from tenancy.domain.exceptions import AuthError, TenancyError
from tenancy.presentation import router as tenancy_router


@asynccontextmanager
async def citygate_lifespan(app: FastAPI):
    """Application lifespan context.

    Manages:
    - Logging configuration
    - Database engine lifecycle (created lazily, disposed on shutdown)
    """
    configure_logging(debug=get_settings().debug)

    yield

    await close_database_connections()


app = FastAPI(
    title="Citygate API",
    description="Tenant isolation and entitlements for franchise city instances",
    version=__version__,
    lifespan=citygate_lifespan,
)


@app.exception_handler(TenancyError)
async def tenancy_error_handler(request: Request, exc: TenancyError) -> JSONResponse:
    """Return the generic public message; the reason stays in the logs."""
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthError) else None
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.public_message},
        headers=headers,
    )


app.include_router(tenancy_router)
app.include_router(entitlements_router)


@app.get("/health")
def health():
    """Basic health check endpoint."""
    return {"status": "ok"}


@app.get("/health/db")
async def health_db(
    session: Annotated[AsyncSession, Depends(get_read_session)],
) -> dict:
    """Check database connection health."""
    try:
        await session.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        return {
            "status": "error",
            "connected": False,
            "error": type(e).__name__,
        }
    return {"status": "ok", "connected": True}

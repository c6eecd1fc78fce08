"""FastAPI application entry point."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from smartmeter.api.routes import api_router
from smartmeter.core.config import settings
from smartmeter.core.database import Base, engine
from smartmeter.core.exceptions import (
    AuthorizationDeniedError,
    BillAlreadyPaidError,
    BillNotFoundError,
    InvalidInputError,
    MeterUnavailableError,
    SmartMeterError,
)
from smartmeter.core.logging_config import configure_logging

# Import models for Base.metadata.create_all - order matters for foreign keys
from smartmeter.models import (
    bill,  # noqa: F401
    meter,  # noqa: F401
    meter_reading,  # noqa: F401
)

logger = logging.getLogger(__name__)

ERROR_STATUS_CODES: dict[type[SmartMeterError], int] = {
    InvalidInputError: 422,
    MeterUnavailableError: 404,
    AuthorizationDeniedError: 403,
    BillNotFoundError: 404,
    BillAlreadyPaidError: 409,
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan manager."""
    configure_logging(settings.LOG_LEVEL)
    # Startup: Create database tables
    Base.metadata.create_all(bind=engine)
    yield


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    description="Smart meter consumption and billing API",
    lifespan=lifespan,
)


@app.exception_handler(SmartMeterError)
async def smartmeter_error_handler(request: Request, exc: SmartMeterError) -> JSONResponse:
    """Map domain errors to HTTP responses."""
    status_code = next(
        (code for cls, code in ERROR_STATUS_CODES.items() if isinstance(exc, cls)),
        409,
    )
    logger.info("%s on %s: %s", type(exc).__name__, request.url.path, exc.detail)
    return JSONResponse(status_code=status_code, content={"detail": exc.detail})


# Include API routers
app.include_router(api_router, prefix="/api")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "smartmeter.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )

"""FastAPI application entry point with lifespan management."""

from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.api.calculators import router as calculators_router
from src.api.contact import router as contact_router
from src.api.health import router as health_router
from src.api.middleware import RequestContextMiddleware
from src.api.tax import router as tax_router
from src.api.visitors import router as visitors_router
from src.calculators.errors import EstimatorError
from src.core.config import settings
from src.core.database import create_engine, create_session_factory, create_tables
from src.core.logging import configure_logging, get_logger
from src.core.sentry import init_sentry
from src.tax.year_config import get_tax_year_config

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application lifecycle resources.

    Startup:
        - Configure structured logging
        - Check that TAX_YEAR has a bracket table
        - Initialize Sentry error tracking
        - Create database engine, session factory and missing tables

    Shutdown:
        - Dispose database engine
    """
    configure_logging()
    logger.info(
        "Starting application",
        environment=settings.environment,
        tax_year=settings.tax_year,
    )

    try:
        get_tax_year_config(settings.tax_year)
    except ValueError as exc:
        raise RuntimeError(f"TAX_YEAR={settings.tax_year} is not supported. {exc}") from exc

    if init_sentry():
        logger.info("Sentry initialized")

    app.state.db_engine = create_engine()
    app.state.async_session = create_session_factory(app.state.db_engine)
    await create_tables(app.state.db_engine)
    logger.info("Database engine created")

    yield

    logger.info("Shutting down application")
    await app.state.db_engine.dispose()
    logger.info("Database engine disposed")


app = FastAPI(
    title="Taxdesk",
    description="Website backend: tax estimator, calculators, contact form and visitor stats",
    version="0.1.0",
    lifespan=lifespan,
)


@app.exception_handler(EstimatorError)
async def estimator_error_handler(request: Request, exc: EstimatorError) -> JSONResponse:
    """Report a calculator input error back to the form."""
    return JSONResponse(
        status_code=422,
        content={"detail": exc.message, "error": exc.kind, "field": exc.field},
    )


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(RequestContextMiddleware)

# Include routers
app.include_router(health_router)
app.include_router(tax_router)
app.include_router(calculators_router)
app.include_router(contact_router)
app.include_router(visitors_router)

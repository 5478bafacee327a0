"""FastAPI application initialization."""

from contextlib import asynccontextmanager

from dotenv import load_dotenv

# Load environment variables before anything else
load_dotenv()

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from imf_gadgets import __version__
from imf_gadgets.api.auth import router as auth_router
from imf_gadgets.api.gadgets import router as gadgets_router
from imf_gadgets.api.handlers import install_exception_handlers
from imf_gadgets.api.middleware import CorrelationIdMiddleware
from imf_gadgets.config import get_settings
from imf_gadgets.services.logging_service import configure_logging, get_logger


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events."""
    settings = get_settings()
    configure_logging(settings.log_level, settings.log_format)
    logger = get_logger("main")

    # Initialize database connection pool and run migrations
    try:
        from imf_gadgets.database import init_database, run_migrations

        await init_database(settings)
        await run_migrations()
        logger.info("database_initialized")
    except Exception as e:
        logger.warning(
            "database_initialization_failed",
            error=str(e),
            note="Continuing without database - requests needing storage will fail with 500",
        )

    logger.info(
        "application_started",
        port=settings.port,
        log_level=settings.log_level,
    )

    yield

    from imf_gadgets.database import close_database

    await close_database()
    logger.info("application_shutdown")


app = FastAPI(
    title="IMF Gadget Inventory API",
    description="Gadget inventory with codename assignment and bearer-token authentication",
    version=__version__,
    lifespan=lifespan,
)

install_exception_handlers(app)

# CORS for browser clients; origins come from CORS_ALLOW_ORIGINS
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Correlation-Id"],
)

# Correlation ID middleware for request tracking and observability
app.add_middleware(CorrelationIdMiddleware)

app.include_router(auth_router)
app.include_router(gadgets_router)


@app.get("/health", tags=["Health"])
async def health() -> dict:
    """Liveness probe reporting database connectivity."""
    from imf_gadgets.database import health_check

    return {"status": "ok", "database": await health_check()}


def run() -> None:
    """Serve the app with uvicorn on the configured host and port."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "imf_gadgets.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()

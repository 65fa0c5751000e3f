# Main application entry point
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api import auth_router, health_router, notes_router
from .api.errors import register_exception_handlers
from .config import get_settings
from .core.logging import LoggingMiddleware, get_logger, setup_logging
from .core.pubsub import create_pubsub
from .database import create_tables

# Setup logging first
setup_logging()
logger = get_logger("main")

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the notification bus and make sure tables exist."""
    logger.info(
        "Starting Noted application",
        extra={
            "version": settings.app_version,
            "environment": settings.environment,
            "pubsub_backend": settings.pubsub_backend,
        },
    )

    bus = create_pubsub(settings)
    await bus.start()
    app.state.pubsub = bus
    logger.info("Notification bus ready")

    # tests run against their own engine
    if os.getenv("NOTED_SKIP_LIFESPAN_DB") == "1":
        logger.info("Skipping DB table creation due to NOTED_SKIP_LIFESPAN_DB=1")
    else:
        try:
            await create_tables()
            logger.info("Database tables created/verified")
        except Exception as e:
            logger.error("Failed to create database tables", exc_info=e)
            raise

    yield

    logger.info("Shutting down Noted application")
    await bus.stop()


app = FastAPI(
    title="Noted",
    description="Personal notes with hashtags, attachments and live updates",
    version=settings.app_version,
    lifespan=lifespan,
)

app.add_middleware(LoggingMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(auth_router, prefix="/api")
app.include_router(notes_router, prefix="/api")
app.include_router(health_router, prefix="/api")


@app.get("/")
async def root():
    return {"message": "Noted API"}


def run() -> None:
    import uvicorn

    uvicorn.run("noted.main:app", host=settings.host, port=settings.port, reload=settings.reload)


if __name__ == "__main__":
    run()

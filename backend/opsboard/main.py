"""Main FastAPI application."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import settings
from .database import init_db, close_db, async_session
from .routers import cron_router, uptime_router, health_router, events_router
from .services.coordinator import PassCoordinator
from .services.recorder import RecorderService
from .services.registry import SiteRegistry
from .services.scheduler import SchedulerService

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def build_coordinator() -> PassCoordinator:
    """Coordinator wired to the application database and settings."""
    return PassCoordinator(
        config=settings.health_check_config(),
        registry=SiteRegistry(async_session),
        recorder=RecorderService(async_session),
    )


scheduler_service = SchedulerService(
    build_coordinator,
    interval_minutes=settings.health_check_interval_minutes,
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - startup and shutdown."""
    logger.info("Starting Opsboard")

    await init_db()
    logger.info("Database initialized")

    if settings.scheduler_enabled:
        scheduler_service.start()
    if not settings.cron_secret:
        logger.warning("CRON_SECRET is not set; the health check trigger will reject every request")

    yield

    scheduler_service.stop()
    await close_db()
    logger.info("Shutdown complete")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Opsboard",
        description="Operations dashboard - site health checks, uptime and alerts",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # In production, restrict to your domain
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(cron_router)
    app.include_router(uptime_router)
    app.include_router(health_router)
    app.include_router(events_router)

    # Liveness of the dashboard itself
    @app.get("/health")
    async def health_check():
        return {"status": "healthy"}

    return app


# Create the application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=settings.web_port)

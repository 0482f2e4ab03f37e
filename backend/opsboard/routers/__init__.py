"""API routers."""
from .cron import router as cron_router
from .uptime import router as uptime_router
from .health import router as health_router
from .events import router as events_router

__all__ = ["cron_router", "uptime_router", "health_router", "events_router"]

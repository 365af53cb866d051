"""Kea Config Panel - DHCPv4 configuration backend API"""
from contextlib import asynccontextmanager

from fastapi import FastAPI

from kea_config.api import dhcp4, logs
from kea_config.config import settings
from kea_config.logger import cleanup_old_logs, get_logger

logger = get_logger("main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    removed = cleanup_old_logs(settings.logs_dir, settings.log_max_age_days)
    if removed:
        logger.info("Removed %d rotated log files older than %d days", removed, settings.log_max_age_days)
    yield


app = FastAPI(
    title=settings.app_name,
    description="Servers, shared networks and subnets of a Kea DHCPv4 configuration backend",
    version="1.0.0",
    lifespan=lifespan,
)

# Include routers
app.include_router(dhcp4.router)
app.include_router(logs.router)


@app.get("/api/health")
def health_check():
    return {"status": "ok"}

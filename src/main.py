from fastapi import FastAPI
from pydantic_settings import BaseSettings
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional
import logging

from routers.api import router as api_router
from schemas import AppHealthOK
from core.config_loader import ConfigLoader
from core.errors import ConfigError
from core.logging_config import configure_logging
from core.service_manager import service_manager

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    app_name: str = "Plant Monitoring Dashboard API"
    debug: bool = False
    log_level: str = "INFO"
    # Defaults to config/dashboard_config.json at the project root
    config_path: Optional[Path] = None
    # Override the values from the config file when set
    parameter_source: Optional[str] = None
    poll_interval: Optional[float] = None


settings = Settings()
configure_logging(settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load configuration, then start polling for the lifetime of the app."""
    try:
        loader = ConfigLoader(settings.config_path)
        config = loader.with_overrides(
            source=settings.parameter_source,
            poll_interval=settings.poll_interval,
        )
    except ConfigError as e:
        logger.error(f"Invalid dashboard configuration, refusing to start: {e}")
        raise

    logger.info(f"Starting background services with {config.source} source")
    await service_manager.start_services(config)

    try:
        yield
    finally:
        logger.info("Stopping background services")
        service_manager.stop_services()


app = FastAPI(title=settings.app_name, debug=settings.debug, lifespan=lifespan)


@app.get("/", tags=["meta"])
async def read_root() -> dict[str, str]:
    return {"message": settings.app_name}


@app.get("/health", tags=["meta"], response_model=AppHealthOK)
async def healthcheck() -> AppHealthOK:
    return AppHealthOK(status="ok", app=settings.app_name)


# mount API router under /api
app.include_router(api_router, prefix="/api")

from contextlib import asynccontextmanager

from fastapi import FastAPI

from metrics_manager.api.v1 import router as api_router
from metrics_manager.core.config import settings
from metrics_manager.core.logging_config import configure_logging, get_logger
from metrics_manager.services.metrics.instance import set_metrics_manager
from metrics_manager.services.metrics.manager import MetricsManager

configure_logging()
logger = get_logger("app")


@asynccontextmanager
async def lifespan(_: FastAPI):
    # Startup
    manager = MetricsManager(settings.metrics_config())
    set_metrics_manager(manager)
    manager.start()
    logger.info(f"Metrics manager state: {manager.state.value}")

    yield

    # Shutdown
    manager.stop()
    manager.await_stopped(timeout=5.0)


app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Periodic metrics collection and dispatch",
    version=settings.VERSION,
    lifespan=lifespan,
)

app.include_router(api_router)

# backend/tutorslot/main.py
from contextlib import asynccontextmanager
import logging
from typing import AsyncGenerator

from fastapi import APIRouter, FastAPI
from fastapi.routing import APIRoute

from .core.config import is_running_tests, settings
from .core.constants import API_DESCRIPTION, API_TITLE, API_V1_PREFIX, API_VERSION, BRAND_NAME
from .errors import register_error_handlers
from .routes import health
from .routes.v1 import (
    auth as auth_v1,
    availability as availability_v1,
    courses as courses_v1,
    reservations as reservations_v1,
    teachers as teachers_v1,
    users as users_v1,
)

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def app_lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle application startup/shutdown without deprecated events."""
    logger.info(f"{BRAND_NAME} API starting up...")
    logger.info(
        f"Environment: {settings.environment}, business hours "
        f"{settings.business_open}-{settings.business_close}, "
        f"lesson length {settings.lesson_duration_minutes} min"
    )
    if is_running_tests():
        logger.info("Running under pytest (test mode active)")

    yield

    logger.info(f"{BRAND_NAME} API shutting down...")


def _unique_operation_id(route: APIRoute) -> str:
    methods = "_".join(sorted(m.lower() for m in route.methods or []))
    path = route.path_format.replace("/", "_").replace("{", "").replace("}", "").strip("_")
    name = (route.name or "operation").lower().replace(" ", "_")
    return f"{methods}__{path}__{name}".strip("_")


app = FastAPI(
    title=API_TITLE,
    description=API_DESCRIPTION,
    version=API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=app_lifespan,
    generate_unique_id_function=_unique_operation_id,
)
register_error_handlers(app)

# Create API v1 router
api_v1 = APIRouter(prefix=API_V1_PREFIX)

api_v1.include_router(auth_v1.router, prefix="/auth")
api_v1.include_router(users_v1.router, prefix="/users")
api_v1.include_router(courses_v1.router, prefix="/courses")
api_v1.include_router(availability_v1.router, prefix="/availability")
api_v1.include_router(reservations_v1.router, prefix="/reservations")
api_v1.include_router(teachers_v1.router, prefix="/teachers")

app.include_router(api_v1)
app.include_router(health.router)

# backend/livadai/main.py
from __future__ import annotations

from datetime import datetime, timezone
import logging
from typing import Optional

from fastapi import APIRouter, FastAPI, Response
from fastapi.routing import APIRoute
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from .core.config import Settings, settings
from .core.constants import API_DESCRIPTION, API_V1_PREFIX, API_VERSION, BRAND_NAME
from .core.metrics import REGISTRY
from .errors import register_error_handlers
from .routes.v1 import bookings as bookings_v1
from .routes.v1 import config as config_v1
from .routes.v1 import experiences as experiences_v1
from .routes.v1 import host as host_v1
from .schemas.eligibility_responses import HealthResponse

# Configure logging
logging.basicConfig(
    level=settings.log_level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

logger = logging.getLogger(__name__)


def _unique_operation_id(route: APIRoute) -> str:
    methods = "_".join(sorted(m.lower() for m in route.methods or []))
    path = route.path_format.replace("/", "_").replace("{", "").replace("}", "").strip("_")
    name = (route.name or "operation").lower().replace(" ", "_")
    return f"{methods}__{path}__{name}".strip("_")


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """Build the FastAPI application with versioned routers and error envelopes."""

    active = app_settings or settings
    app = FastAPI(
        title=active.api_title,
        description=API_DESCRIPTION,
        version=API_VERSION,
        docs_url="/docs" if active.docs_enabled else None,
        redoc_url="/redoc" if active.docs_enabled else None,
        generate_unique_id_function=_unique_operation_id,
    )
    register_error_handlers(app, media_type=active.error_media_type)

    api_v1 = APIRouter(prefix=API_V1_PREFIX)
    api_v1.include_router(bookings_v1.router, prefix="/bookings")
    api_v1.include_router(host_v1.router, prefix="/host")
    api_v1.include_router(experiences_v1.router, prefix="/experiences")
    api_v1.include_router(config_v1.router, prefix="/config")
    app.include_router(api_v1)

    @app.get("/health", response_model=HealthResponse, tags=["health"])
    def health() -> HealthResponse:
        return HealthResponse(
            status="healthy",
            service=f"{BRAND_NAME.lower()}-booking-rules",
            version=API_VERSION,
            timestamp=datetime.now(timezone.utc),
        )

    if active.metrics_enabled:

        @app.get("/metrics", include_in_schema=False)
        def metrics() -> Response:
            return Response(generate_latest(REGISTRY), media_type=CONTENT_TYPE_LATEST)

    logger.info(
        "%s booking rules API ready (site_mode=%s, metrics=%s)",
        BRAND_NAME,
        active.site_mode,
        active.metrics_enabled,
    )
    return app


app = create_app()

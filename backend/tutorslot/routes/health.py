"""
Health check and metrics endpoints for monitoring and load balancer probes.

Both are public, following standard Prometheus practice for ``/metrics``.
"""

from datetime import datetime, timezone
import logging

from fastapi import APIRouter, Response

from ..core.config import settings
from ..monitoring.prometheus_metrics import prometheus_metrics

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check() -> dict:
    return {
        "status": "healthy",
        "service": settings.app_name,
        "environment": settings.environment,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/metrics")
async def get_prometheus_metrics() -> Response:
    """Prometheus text exposition of service and reservation metrics."""
    return Response(
        content=prometheus_metrics.get_metrics(),
        media_type=prometheus_metrics.get_content_type(),
    )

# backend/tutorly/routes/metrics.py
"""
Prometheus metrics endpoint.

Public, unauthenticated, following standard Prometheus practice. It exposes
the HTTP metrics from the middleware and the service metrics collected by
@measure_operation.
"""

from fastapi import APIRouter, Response

from ..monitoring.prometheus_metrics import prometheus_metrics

router = APIRouter(tags=["monitoring"])


@router.get("/metrics", include_in_schema=False)
def metrics() -> Response:
    return Response(
        content=prometheus_metrics.get_metrics(),
        media_type=prometheus_metrics.get_content_type(),
    )

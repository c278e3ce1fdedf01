"""Prometheus metrics endpoint."""

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

router = APIRouter()


@router.get("/metrics")
async def metrics() -> Response:
    """Expose registered Prometheus metrics.

    Includes:
    - engine_operation_latency_ms{operation, outcome}
    - schedule_conflicts_total{operation, reason}
    - activity_moves_total{placement}
    """
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

"""Structured logging for engine mutations."""

import logging
from typing import Any
from uuid import UUID

logger = logging.getLogger(__name__)


class StructuredEngineLogger:
    """Structured logger for trip/activity mutations."""

    def log_operation(
        self,
        operation: str,
        trip_id: UUID | None,
        user_id: UUID,
        outcome: str,
        latency_ms: float,
        error_code: str | None = None,
        **fields: Any,
    ) -> None:
        """Log one engine operation with structured data."""
        log_data: dict[str, Any] = {
            "operation": operation,
            "trip_id": str(trip_id) if trip_id else None,
            "user_id": str(user_id),
            "outcome": outcome,
            "latency_ms": round(latency_ms, 2),
        }

        if error_code:
            log_data["error_code"] = error_code
        log_data.update(fields)

        log_msg = f"Engine operation: {operation} - {outcome}"

        if outcome == "success":
            logger.info(log_msg, extra={"structured": log_data})
        else:
            logger.warning(log_msg, extra={"structured": log_data})

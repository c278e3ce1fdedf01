"""Error taxonomy for the scheduling engine.

Every engine failure carries a machine-usable ``code`` and a human-readable
``message``. The HTTP layer maps each class to a status code in ``main.py``.
"""

from typing import Any
from uuid import UUID


class SchedulingError(Exception):
    """Base class for all engine errors."""

    code = "SCHEDULING_ERROR"

    def __init__(self, message: str, *, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code

    def to_dict(self) -> dict[str, Any]:
        """Serialize for an error response body."""
        return {"detail": self.message, "code": self.code}


class ValidationError(SchedulingError):
    """Malformed or logically invalid input (bad ordering, bad reorder list)."""

    code = "VALIDATION_ERROR"


class OutOfBoundsError(SchedulingError):
    """Destination interval falls outside the trip's date range."""

    code = "OUT_OF_BOUNDS"


class OverlapError(SchedulingError):
    """Destination interval overlaps one or more existing destinations."""

    code = "OVERLAP"

    def __init__(self, message: str, conflicting_ids: list[UUID]) -> None:
        super().__init__(message)
        self.conflicting_ids = conflicting_ids

    def to_dict(self) -> dict[str, Any]:
        body = super().to_dict()
        body["conflicting_ids"] = [str(i) for i in self.conflicting_ids]
        return body


class NotFoundError(SchedulingError):
    """Trip, destination or activity id did not resolve."""

    code = "NOT_FOUND"

    def __init__(self, kind: str, ident: UUID | str) -> None:
        super().__init__(f"{kind} not found: {ident}")
        self.kind = kind
        self.ident = ident


class AuthorizationError(SchedulingError):
    """Caller lacks the capability required for the operation."""

    code = "FORBIDDEN"


class ConcurrencyError(SchedulingError):
    """Stored revision changed between read and write."""

    code = "REVISION_CONFLICT"

    def __init__(self, trip_id: UUID, expected: int, actual: int | None) -> None:
        super().__init__(
            f"Trip {trip_id} was modified concurrently "
            f"(expected revision {expected}, found {actual})"
        )
        self.trip_id = trip_id
        self.expected = expected
        self.actual = actual

"""Request context for capability checks."""

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True)
class RequestContext:
    """Identity of the caller making the current request.

    Passed to every service call so ownership and collaborator roles can be
    checked against the trip being touched.
    """

    user_id: UUID

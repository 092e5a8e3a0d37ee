"""API schemas for request/response models."""

from .optimization_schemas import OptimizeRequest, RunStartedResponse, RunStatusResponse
from .schedule_schemas import (
    ApplyEditsRequest,
    ConstraintsRequest,
    ConstraintsResponse,
    ValidateScheduleRequest,
    ScheduleRequest,
)

__all__ = [
    "OptimizeRequest",
    "RunStartedResponse",
    "RunStatusResponse",
    "ApplyEditsRequest",
    "ConstraintsRequest",
    "ConstraintsResponse",
    "ValidateScheduleRequest",
    "ScheduleRequest",
]

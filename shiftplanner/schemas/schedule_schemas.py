"""Schemas for schedule (ledger) endpoints."""

from typing import Dict, List, Optional
from pydantic import BaseModel

from ..models.ledger import DaySchedule, Edit
from ..models.optimization import ManualConstraint, OptimizationConfig
from ..models.shift import ShiftCatalog


class ApplyEditsRequest(BaseModel):
    """Request model for applying edits to a ledger."""

    schedule: List[DaySchedule]
    edits: List[Edit]
    config: OptimizationConfig
    shift_types: Optional[ShiftCatalog] = None


class ConstraintsRequest(BaseModel):
    """Request model for learning constraints from edits."""

    edits: List[Edit]
    shift_types: Optional[ShiftCatalog] = None


class ConstraintsResponse(BaseModel):
    """Response model for learned constraints."""

    constraints: Dict[int, ManualConstraint]


class ValidateScheduleRequest(BaseModel):
    """Request model for ledger validation."""

    schedule: List[DaySchedule]
    config: OptimizationConfig


class ScheduleRequest(BaseModel):
    """Request model carrying a ledger only."""

    schedule: List[DaySchedule]

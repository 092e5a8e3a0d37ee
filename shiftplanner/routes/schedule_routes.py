"""Routes for ledger edits, learned constraints, validation and export."""

import logging
from typing import List
from fastapi import APIRouter, HTTPException
from fastapi.responses import PlainTextResponse

from ..exceptions import ShiftPlannerError
from ..models.ledger import DaySchedule
from ..reconciler import ScheduleMetrics, ScheduleReconciler, ScheduleValidation
from ..schemas.schedule_schemas import (
    ApplyEditsRequest,
    ConstraintsRequest,
    ConstraintsResponse,
    ScheduleRequest,
    ValidateScheduleRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/schedule", tags=["schedule"])


@router.post("/apply-edits", response_model=List[DaySchedule])
async def apply_edits(request: ApplyEditsRequest):
    """
    Apply ledger edits and recompute balances.

    Args:
        request: Ledger, edits and the run configuration

    Returns:
        Updated ledger
    """
    reconciler = ScheduleReconciler(request.shift_types)
    try:
        return reconciler.apply_edits_to_schedule(request.schedule, request.edits, request.config)
    except (ShiftPlannerError, ValueError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error applying edits: {e}")
        raise HTTPException(status_code=500, detail=str(e))


# Unset fields are left out so that an explicit "shifts": null (fixed day
# off) stays distinguishable from a free day.
@router.post(
    "/constraints",
    response_model=ConstraintsResponse,
    response_model_exclude_unset=True,
)
async def generate_constraints(request: ConstraintsRequest):
    """
    Learn manual constraints from ledger edits.

    Returns:
        Constraints keyed by day, ready for the next optimization config
    """
    reconciler = ScheduleReconciler(request.shift_types)
    try:
        return ConstraintsResponse(constraints=reconciler.generate_manual_constraints(request.edits))
    except (ShiftPlannerError, ValueError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error generating constraints: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/validate", response_model=ScheduleValidation)
async def validate_schedule(request: ValidateScheduleRequest):
    return ScheduleReconciler().validate_schedule(request.schedule, request.config)


@router.post("/metrics", response_model=ScheduleMetrics)
async def schedule_metrics(request: ScheduleRequest):
    return ScheduleReconciler().calculate_metrics(request.schedule)


@router.post("/export", response_class=PlainTextResponse)
async def export_schedule(request: ScheduleRequest):
    """Ledger as CSV text."""
    csv_text = ScheduleReconciler().export_schedule_csv(request.schedule)
    return PlainTextResponse(content=csv_text, media_type="text/csv")

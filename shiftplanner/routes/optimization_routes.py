"""Routes for optimization runs (synchronous and background)."""

import logging
from fastapi import APIRouter, BackgroundTasks, HTTPException

from ..exceptions import ShiftPlannerError
from ..models.optimization import OptimizationResult
from ..schemas.optimization_schemas import OptimizeRequest, RunStartedResponse, RunStatusResponse
from ..services.singleton import get_optimization_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["optimization"])


@router.post("/optimize", response_model=OptimizationResult)
def optimize(request: OptimizeRequest):
    """
    Run an optimization and wait for its result.

    Args:
        request: Config, expenses, deposits and optional shift catalog

    Returns:
        Best schedule found
    """
    optimization_service = get_optimization_service()

    try:
        return optimization_service.optimize(request)
    except (ShiftPlannerError, ValueError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error running optimization: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/start", response_model=RunStartedResponse)
async def start_optimization(
    request: OptimizeRequest,
    background_tasks: BackgroundTasks,
):
    """
    Start an optimization (runs in background).

    Progress is available from /api/status and the result from /api/result.

    Args:
        request: Optimization request
        background_tasks: FastAPI background tasks

    Returns:
        Confirmation message with the run id
    """
    optimization_service = get_optimization_service()

    try:
        run_id = optimization_service.start_run(request)
        background_tasks.add_task(optimization_service.run_optimization_task)
        return RunStartedResponse(
            message="Optimization started",
            status="running",
            run_id=run_id,
        )
    except (ShiftPlannerError, ValueError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error starting optimization: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/pause", response_model=RunStatusResponse)
async def pause_optimization():
    """Pause the running optimization at its next generation."""
    try:
        return RunStatusResponse(**get_optimization_service().pause())
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/resume", response_model=RunStatusResponse)
async def resume_optimization():
    """Resume a paused optimization."""
    try:
        return RunStatusResponse(**get_optimization_service().resume())
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/cancel", response_model=RunStatusResponse)
async def cancel_optimization():
    """
    Cancel the running optimization.

    The best schedule found so far stays available from /api/result.
    """
    try:
        return RunStatusResponse(**get_optimization_service().cancel())
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/status", response_model=RunStatusResponse)
async def get_status():
    """
    Get current run status.

    Returns:
        Status and the latest progress event
    """
    return RunStatusResponse(**get_optimization_service().get_status())


@router.get("/result", response_model=OptimizationResult)
async def get_result():
    """Result of the last finished (or cancelled) run."""
    result = get_optimization_service().get_result()
    if result is None:
        raise HTTPException(status_code=404, detail="No optimization result available")
    return result

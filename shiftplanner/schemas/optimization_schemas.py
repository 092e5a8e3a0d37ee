"""Schemas for optimization endpoints."""

from typing import List, Optional
from pydantic import BaseModel, Field

from ..models.ledger import Expense, Deposit
from ..models.optimization import OptimizationConfig, OptimizationProgress
from ..models.shift import ShiftCatalog


class OptimizeRequest(BaseModel):
    """Request model for running an optimization."""

    config: OptimizationConfig
    expenses: List[Expense] = Field(default_factory=list)
    deposits: List[Deposit] = Field(default_factory=list)
    shift_types: Optional[ShiftCatalog] = Field(None, description="Custom shift catalog")


class RunStartedResponse(BaseModel):
    """Response model for a started background run."""

    message: str
    status: str
    run_id: Optional[str] = None


class RunStatusResponse(BaseModel):
    """Response model for background run status."""

    status: str
    run_id: Optional[str] = None
    progress: Optional[OptimizationProgress] = None
    error: Optional[str] = None

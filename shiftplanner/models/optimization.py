"""Optimization models: configuration, constraints, progress, and results."""

from typing import Dict, List, Optional
from pydantic import BaseModel, Field

from .ledger import DaySchedule


class ManualConstraint(BaseModel):
    """Day-level manual override.

    ``shifts`` set explicitly to None pins the day as a day off; leaving it
    unset means the shift is free for the optimizer to choose.
    """

    shifts: Optional[str] = None
    fixed_earnings: Optional[float] = None
    fixed_expenses: Optional[float] = None
    fixed_balance: Optional[float] = None

    @property
    def has_fixed_shift(self) -> bool:
        return "shifts" in self.model_fields_set

    @property
    def is_locked(self) -> bool:
        """Whether the optimizer must leave this day untouched."""
        return (
            self.has_fixed_shift
            or self.fixed_earnings is not None
            or self.fixed_balance is not None
        )


class OptimizationConfig(BaseModel):
    """Inputs of one optimization run."""

    starting_balance: float
    target_ending_balance: float
    minimum_balance: float = 0.0
    population_size: int = 200
    generations: int = 500
    manual_constraints: Dict[int, ManualConstraint] = Field(default_factory=dict)
    balance_edit_day: Optional[int] = None
    new_starting_balance: Optional[float] = None
    random_seed: Optional[int] = None
    debug_fitness: bool = False

    class Config:
        json_schema_extra = {
            "example": {
                "starting_balance": 90.5,
                "target_ending_balance": 490.5,
                "minimum_balance": 0,
                "population_size": 200,
                "generations": 500,
                "manual_constraints": {"5": {"shifts": "large"}},
            }
        }


class OptimizationProgress(BaseModel):
    """Progress event emitted during evolution."""

    generation: int
    progress: float  # percent of the configured generations
    best_fitness: float
    work_days: int
    balance: float
    violations: int
    message: Optional[str] = None


class OptimizationResult(BaseModel):
    """Outcome of an optimization run."""

    schedule: List[Optional[str]]  # index day - 1
    work_days: List[int]
    total_earnings: float
    final_balance: float
    min_balance: float
    violations: int
    computation_time: str
    formatted_schedule: List[DaySchedule]
    generations_run: int = 0
    mode: str = "normal"

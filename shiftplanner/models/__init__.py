"""Shift planner models package."""

from .shift import ShiftType, ShiftCatalog
from .ledger import Expense, Deposit, DaySchedule, Edit
from .optimization import (
    ManualConstraint,
    OptimizationConfig,
    OptimizationProgress,
    OptimizationResult,
)

__all__ = [
    "ShiftType",
    "ShiftCatalog",
    "Expense",
    "Deposit",
    "DaySchedule",
    "Edit",
    "ManualConstraint",
    "OptimizationConfig",
    "OptimizationProgress",
    "OptimizationResult",
]

"""Genetic algorithm modules for shift schedule optimization."""

from .config import GeneticConfig, FAST_CONFIG
from .types import Chromosome, FitnessBreakdown, Individual, SearchMode
from .constraints import ResolvedProblem, resolve_constraints, resolve_mode
from .control import RunControl
from .fitness import (
    FitnessContext,
    FitnessManager,
    NormalFitnessStrategy,
    CrisisFitnessStrategy,
    evaluate_fitness,
)
from .engine import GeneticOptimizer

__all__ = [
    "GeneticConfig",
    "FAST_CONFIG",
    "Chromosome",
    "FitnessBreakdown",
    "Individual",
    "SearchMode",
    "ResolvedProblem",
    "resolve_constraints",
    "resolve_mode",
    "RunControl",
    "FitnessContext",
    "FitnessManager",
    "NormalFitnessStrategy",
    "CrisisFitnessStrategy",
    "evaluate_fitness",
    "GeneticOptimizer",
]

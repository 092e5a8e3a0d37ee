"""Type definitions for the genetic algorithm.

Contains the chromosome alias, the search mode, the fitness breakdown and
the Individual class representing a candidate schedule.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple


# One entry per day (index day - 1): None for a day off, else a shift label
Chromosome = List[Optional[str]]


class SearchMode(str, Enum):
    """Which fitness strategy and shift biases a run uses."""

    NORMAL = "normal"
    CRISIS = "crisis"


@dataclass(frozen=True)
class FitnessBreakdown:
    """Result of scoring one chromosome. Lower fitness is better."""

    fitness: float
    balance: float
    work_days: int
    violations: int
    total_earnings: float
    min_balance: float
    work_days_list: Tuple[int, ...] = field(default_factory=tuple)


class Individual:
    """Represents a solution candidate (chromosome plus its score).

    Attributes:
        chromosome: Day-by-day shift labels
        breakdown: Fitness breakdown of the chromosome
    """

    def __init__(self, chromosome: Chromosome, breakdown: FitnessBreakdown):
        self.chromosome = chromosome
        self.breakdown = breakdown

    @property
    def fitness(self) -> float:
        return self.breakdown.fitness

    def copy(self) -> 'Individual':
        """Copy the chromosome; the breakdown is immutable and shared."""
        return Individual(list(self.chromosome), self.breakdown)

    def __repr__(self) -> str:
        return (
            f"Individual(work_days={self.breakdown.work_days}, "
            f"balance={self.breakdown.balance:.2f}, fit={self.fitness:.2f})"
        )

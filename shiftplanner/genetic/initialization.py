"""Population initialization for the genetic algorithm.

Chromosomes are built in three steps:
1. Stamp every manually fixed shift
2. Cover each critical day with a work day 2-5 days before it
3. Fill free days until the target work-day count is met, preferring days
   with no work on either side, then any free day

Shift sizes are biased by the run's search mode: crisis runs draw double
shifts only, normal runs mostly single shifts.
"""

import logging
import random
from typing import List, Optional

from ..config import MAX_DAY
from .constraints import ResolvedProblem
from .types import Chromosome

logger = logging.getLogger(__name__)


def crisis_double_shift(rng: random.Random, large_large: float, mixed_large: float) -> str:
    rand = rng.random()
    if rand < large_large:
        return "large+large"
    if rand < mixed_large:
        return "medium+large" if rng.random() < 0.5 else "large+medium"
    return "medium+medium"


def critical_day_shift(problem: ResolvedProblem, rng: random.Random) -> str:
    """Shift label for a work day placed ahead of a critical day."""
    ga = problem.ga_config
    if problem.in_crisis:
        return crisis_double_shift(rng, ga.crisis_large_large, ga.crisis_mixed_large)

    rand = rng.random()
    if rand < ga.normal_critical_large:
        return "large"
    if rand < ga.normal_critical_medium:
        return "medium"
    return "small"


def fill_day_shift(problem: ResolvedProblem, rng: random.Random) -> str:
    """Shift label for a work day added to reach the target work-day count."""
    ga = problem.ga_config
    if problem.in_crisis:
        return crisis_double_shift(rng, ga.crisis_fill_large_large, ga.crisis_fill_mixed_large)

    rand = rng.random()
    if rand < ga.normal_fill_small:
        label = "small"
    elif rand < ga.normal_fill_medium:
        label = "medium"
    else:
        label = "large"

    if label != "large" and rng.random() < ga.normal_double_shift:
        second = "small" if rng.random() < 0.5 else "medium"
        label = f"{label}+{second}"
    return label


def _is_free(problem: ResolvedProblem, chromosome: Chromosome, day: int) -> bool:
    return day not in problem.locked_days and chromosome[day - 1] is None


def _has_neighbour(problem: ResolvedProblem, chromosome: Chromosome, day: int) -> bool:
    for other in (day - 1, day + 1):
        if problem.start_day <= other <= MAX_DAY and chromosome[other - 1] is not None:
            return True
    return False


def generate_chromosome(problem: ResolvedProblem, rng: random.Random) -> Chromosome:
    """Generate one chromosome for the initial population.

    Args:
        problem: Resolved problem
        rng: Random source owned by the run

    Returns:
        New chromosome (index day - 1)
    """
    ga = problem.ga_config
    chromosome = problem.empty_chromosome()

    # Cover critical days with randomized lead time
    for critical_day in problem.critical_days:
        days_before = rng.randint(ga.critical_min_days_before, ga.critical_max_days_before)
        work_day = max(problem.start_day, critical_day - days_before)
        if work_day <= MAX_DAY and _is_free(problem, chromosome, work_day):
            chromosome[work_day - 1] = critical_day_shift(problem, rng)

    scheduled = sum(1 for day in problem.window() if chromosome[day - 1] is not None)
    needed = max(0, problem.target_work_days() - scheduled)
    if needed == 0:
        return chromosome

    free_days = [day for day in problem.window() if _is_free(problem, chromosome, day)]
    rng.shuffle(free_days)

    # First pass: only days with no work on either side
    added = 0
    for day in free_days:
        if added >= needed:
            break
        if not _has_neighbour(problem, chromosome, day):
            chromosome[day - 1] = fill_day_shift(problem, rng)
            added += 1

    # Second pass: any free day
    for day in free_days:
        if added >= needed:
            break
        if chromosome[day - 1] is None:
            chromosome[day - 1] = fill_day_shift(problem, rng)
            added += 1

    return chromosome


def initialize_population(
    problem: ResolvedProblem,
    population_size: int,
    rng: random.Random,
    seeds: Optional[List[Chromosome]] = None,
) -> List[Chromosome]:
    """Create the initial population of chromosomes.

    Args:
        problem: Resolved problem
        population_size: Number of chromosomes to create
        rng: Random source owned by the run
        seeds: Optional chromosomes to include first (e.g. a previous result)

    Returns:
        List of population_size chromosomes
    """
    population: List[Chromosome] = []
    for seed in seeds or []:
        if len(population) >= population_size:
            break
        chromosome = list(seed)
        problem.stamp_constraints(chromosome)
        population.append(chromosome)

    while len(population) < population_size:
        population.append(generate_chromosome(problem, rng))

    logger.debug(
        f"Initial population: {len(population)} chromosomes, "
        f"target work days={problem.target_work_days()}, mode={problem.mode.value}"
    )
    return population

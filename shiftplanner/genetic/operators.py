"""Genetic operators: selection, crossover, mutation.

All operators draw from the run's own random source and never modify their
inputs; locked days (fixed shift, earnings or balance) are left as the
constraints dictate.
"""

import random
from typing import List, Optional

from ..config import MIN_DAY, MAX_DAY
from .constraints import ResolvedProblem
from .initialization import crisis_double_shift
from .types import Chromosome, Individual


def tournament_selection(
    population: List[Individual],
    tournament_size: int,
    rng: random.Random,
) -> Individual:
    """Select an individual using tournament selection.

    Samples tournament_size individuals uniformly (with replacement) and
    returns the best one. Lower fitness is better.
    """
    tournament = [population[rng.randrange(len(population))] for _ in range(tournament_size)]
    return min(tournament, key=lambda ind: ind.fitness)


def crossover(
    parent1: Individual,
    parent2: Individual,
    problem: ResolvedProblem,
    rng: random.Random,
) -> Chromosome:
    """Two-point segment crossover.

    The child takes parent2's days between two random points (inclusive)
    and parent1's days elsewhere. Fixed days are stamped back afterwards so
    a crossover never overrides a manual constraint.

    Returns:
        Child chromosome
    """
    point1 = rng.randint(MIN_DAY, MAX_DAY)
    point2 = rng.randint(MIN_DAY, MAX_DAY)
    start, end = min(point1, point2), max(point1, point2)

    child = list(parent1.chromosome)
    child[start - 1:end] = parent2.chromosome[start - 1:end]
    problem.stamp_constraints(child)
    return child


def _normal_redraw(problem: ResolvedProblem, rng: random.Random):
    ga = problem.ga_config
    rand = rng.random()
    if rand < ga.mutate_off:
        return None
    if rand < ga.mutate_medium:
        return "medium"
    if rand < ga.mutate_medium_medium:
        return "medium+medium"
    if rand < ga.mutate_large:
        return "large"
    return rng.choice(problem.catalog.combinations())


def mutate(
    chromosome: Chromosome,
    problem: ResolvedProblem,
    rng: random.Random,
    mutation_rate: Optional[float] = None,
) -> Chromosome:
    """Mutate a chromosome.

    Each mutable day in the window is resampled with probability
    mutation_rate. Crisis runs resample to double shifts. Normal runs keep
    well-spaced work days and avoid adding work next to existing work most
    of the time, otherwise redraw from the full combination space.

    Args:
        chromosome: Chromosome to mutate (not modified)
        problem: Resolved problem
        rng: Random source owned by the run
        mutation_rate: Per-day mutation probability (defaults to ga_config)

    Returns:
        Mutated copy of the chromosome
    """
    ga = problem.ga_config
    rate = ga.mutation_rate if mutation_rate is None else mutation_rate
    mutated = list(chromosome)

    for day in problem.mutable_days():
        if rng.random() >= rate:
            continue

        if problem.in_crisis:
            mutated[day - 1] = crisis_double_shift(rng, ga.crisis_large_large, ga.crisis_mixed_large)
            continue

        has_adjacent = (day > MIN_DAY and mutated[day - 2] is not None) or (
            day < MAX_DAY and mutated[day] is not None
        )
        current = mutated[day - 1]
        rand = rng.random()

        if current is not None and not has_adjacent and rand < ga.keep_well_spaced:
            continue
        if current is None and has_adjacent and rand >= ga.add_adjacent:
            continue

        mutated[day - 1] = _normal_redraw(problem, rng)

    return mutated

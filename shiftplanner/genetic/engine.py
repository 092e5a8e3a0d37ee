"""Genetic optimizer for monthly shift schedules.

Key Design Decisions:
- Chromosome: one shift label (or None) per day of the 30-day month
- Fitness: simulated month scored by a normal or crisis strategy
- Mode: resolved once per run from required earnings vs. single-shift capacity
- Elitism: top 20% (at least 30) carried over unchanged every generation
- Selection: tournament of 7 drawn from the whole population
- Early stopping: after 300 generations, once 150 generations pass without a
  1% improvement and the best schedule is violation-free and on target
- Randomness: one random.Random per run, seeded from the config, so equal
  inputs and seed reproduce the same schedule
- Control: progress callback every N generations; cancel/pause honoured at
  every generation through a RunControl
"""

import logging
import random
import time
from typing import Callable, List, Optional

from ..exceptions import InvalidConfigurationError, OptimizationCancelled
from ..models.ledger import Expense, Deposit
from ..models.optimization import OptimizationConfig, OptimizationProgress, OptimizationResult
from ..models.shift import ShiftCatalog
from ..reconciler import build_schedule
from ..utils import format_computation_time
from .config import GeneticConfig
from .constraints import ResolvedProblem, resolve_constraints
from .control import RunControl
from .fitness import FitnessManager, evaluate_fitness
from .initialization import initialize_population
from .operators import crossover, mutate, tournament_selection
from .types import Chromosome, Individual

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[OptimizationProgress], None]

MIN_POPULATION_SIZE = 10


def _validate_config(config: OptimizationConfig, ga_config: GeneticConfig) -> None:
    if config is None:
        raise InvalidConfigurationError("No configuration provided")
    if config.population_size < MIN_POPULATION_SIZE:
        raise InvalidConfigurationError(
            f"population_size must be at least {MIN_POPULATION_SIZE}, got {config.population_size}"
        )
    if config.generations < 1:
        raise InvalidConfigurationError(
            f"generations must be at least 1, got {config.generations}"
        )
    if ga_config.tournament_size < 1:
        raise InvalidConfigurationError("tournament_size must be at least 1")
    if ga_config.progress_interval < 1:
        raise InvalidConfigurationError("progress_interval must be at least 1")


class GeneticOptimizer:
    """Genetic algorithm searching for a month of shifts.

    Usage:
        optimizer = GeneticOptimizer(config, expenses, deposits)
        result = optimizer.optimize(progress_callback=print)
    """

    def __init__(
        self,
        config: OptimizationConfig,
        expenses: Optional[List[Expense]] = None,
        deposits: Optional[List[Deposit]] = None,
        catalog: Optional[ShiftCatalog] = None,
        ga_config: Optional[GeneticConfig] = None,
    ):
        """Validate the config and resolve the problem.

        Raises:
            InvalidConfigurationError: If the config is missing or degenerate
            InvalidShiftLabelError: If a manual constraint names unknown shifts
        """
        self.ga_config = ga_config or GeneticConfig()
        _validate_config(config, self.ga_config)

        self.config = config
        self.problem: ResolvedProblem = resolve_constraints(
            config, expenses or [], deposits or [], catalog, self.ga_config
        )
        self.rng = random.Random(config.random_seed)
        self.fitness_manager = FitnessManager(self.ga_config, debug=config.debug_fitness)

        elite = max(self.ga_config.min_elite_size, int(config.population_size * self.ga_config.elite_ratio))
        self.elite_size = max(1, min(elite, config.population_size))
        self.fitness_history: List[float] = []

        logger.info(
            f"GeneticOptimizer initialized: pop={config.population_size}, gens={config.generations}, "
            f"elite={self.elite_size}, tournament={self.ga_config.tournament_size}, "
            f"mutation={self.ga_config.mutation_rate}, mode={self.problem.mode.value}, "
            f"required={self.problem.required_earnings:.2f}"
        )

    def evaluate(self, chromosome: Chromosome) -> Individual:
        """Score a chromosome and wrap it in an Individual."""
        return Individual(chromosome, evaluate_fitness(chromosome, self.problem, self.fitness_manager))

    def optimize(
        self,
        progress_callback: Optional[ProgressCallback] = None,
        control: Optional[RunControl] = None,
    ) -> OptimizationResult:
        """Run the genetic algorithm and return the best schedule found.

        Args:
            progress_callback: Called with an OptimizationProgress every
                progress_interval generations and once at the end
            control: Optional RunControl for cancel / pause / resume

        Returns:
            OptimizationResult for the best individual

        Raises:
            OptimizationCancelled: If control.cancel() was called; carries
                the best result found so far
        """
        started = time.perf_counter()
        ga = self.ga_config
        generations = self.config.generations

        population = [
            self.evaluate(chromosome)
            for chromosome in initialize_population(self.problem, self.config.population_size, self.rng)
        ]
        logger.info(f"GA Initial: best={min(ind.fitness for ind in population):.2f}, pop={len(population)}")

        best_ever = float("inf")
        stagnant = 0
        generations_run = 0

        for generation in range(generations):
            population.sort(key=lambda ind: ind.fitness)
            best = population[0]
            self.fitness_history.append(best.fitness)
            generations_run = generation + 1

            if progress_callback is not None and generation % ga.progress_interval == 0:
                progress_callback(self._progress(generation, best))

            if control is not None and not control.checkpoint(ga.pause_poll_interval):
                logger.info(f"GA cancelled at gen {generation}: best={best.fitness:.2f}")
                raise OptimizationCancelled(generation, self._build_result(best, started, generation))

            if best.fitness < best_ever * ga.improvement_threshold:
                best_ever = best.fitness
                stagnant = 0
            else:
                stagnant += 1

            if self._should_terminate(generation, stagnant, best):
                logger.info(
                    f"GA converged at gen {generation}: best={best.fitness:.2f}, "
                    f"{stagnant} generations without improvement"
                )
                break

            population = self._next_generation(population)

        population.sort(key=lambda ind: ind.fitness)
        best = population[0]
        result = self._build_result(best, started, generations_run)

        if progress_callback is not None:
            progress_callback(self._progress(generations_run, best, message="Optimization complete"))

        logger.info(
            f"GA Final: best={best.fitness:.2f} after {generations_run} gens, "
            f"work_days={best.breakdown.work_days}, balance={best.breakdown.balance:.2f}, "
            f"violations={best.breakdown.violations}, time={result.computation_time}"
        )
        return result

    def _should_terminate(self, generation: int, stagnant: int, best: Individual) -> bool:
        ga = self.ga_config
        target = self.config.target_ending_balance
        return (
            generation > ga.min_generations_before_termination
            and stagnant > ga.max_generations_without_improvement
            and best.breakdown.violations == 0
            and abs(best.breakdown.balance - target) <= ga.balance_tolerance
        )

    def _next_generation(self, population: List[Individual]) -> List[Individual]:
        """Elites first, then tournament-bred children until the population is full.

        Expects population sorted best-first.
        """
        ga = self.ga_config
        new_population = [population[i].copy() for i in range(self.elite_size)]

        while len(new_population) < self.config.population_size:
            parent1 = tournament_selection(population, ga.tournament_size, self.rng)
            parent2 = tournament_selection(population, ga.tournament_size, self.rng)
            child = crossover(parent1, parent2, self.problem, self.rng)
            child = mutate(child, self.problem, self.rng)
            new_population.append(self.evaluate(child))

        return new_population

    def _progress(self, generation: int, best: Individual, message: Optional[str] = None) -> OptimizationProgress:
        return OptimizationProgress(
            generation=generation,
            progress=min(100.0, generation / self.config.generations * 100),
            best_fitness=best.fitness,
            work_days=best.breakdown.work_days,
            balance=best.breakdown.balance,
            violations=best.breakdown.violations,
            message=message,
        )

    def _build_result(self, best: Individual, started: float, generations_run: int) -> OptimizationResult:
        elapsed_ms = int((time.perf_counter() - started) * 1000)
        breakdown = best.breakdown
        return OptimizationResult(
            schedule=list(best.chromosome),
            work_days=list(breakdown.work_days_list),
            total_earnings=breakdown.total_earnings,
            final_balance=breakdown.balance,
            min_balance=breakdown.min_balance,
            violations=breakdown.violations,
            computation_time=format_computation_time(elapsed_ms),
            formatted_schedule=build_schedule(best.chromosome, self.problem),
            generations_run=generations_run,
            mode=self.problem.mode.value,
        )

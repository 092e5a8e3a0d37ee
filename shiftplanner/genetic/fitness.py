"""Fitness evaluation for the genetic algorithm.

Simulates the month day by day for a candidate chromosome:
- deposit in, shift earnings in (locked schedule before the window,
  chromosome inside it), expense out
- balance reset override on the reset day
- fixed-balance constraints pin the balance; the gap is penalized
- a violation for every day that ends below the minimum balance

The resulting FitnessContext is scored by one of two strategies:
- NormalFitnessStrategy: hit the target closely with few, spread-out work
  days; overshooting is penalized harder than undershooting
- CrisisFitnessStrategy: reach the target at all; undershooting is
  penalized harder than overshooting

Lower fitness is better.
"""

import logging
import math
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from ..config import MIN_DAY, MAX_DAY
from .config import GeneticConfig
from .constraints import ResolvedProblem
from .types import Chromosome, FitnessBreakdown, SearchMode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FitnessContext:
    """Simulation summary handed to a fitness strategy."""

    balance: float
    work_days: int
    violations: int
    total_earnings: float
    min_balance: float
    work_days_list: Tuple[int, ...]
    mode: SearchMode
    target_ending_balance: float
    minimum_balance: float
    required_earnings: float
    start_day: int
    crisis_work_days_needed: int


def _gaps(work_days_list: Tuple[int, ...]) -> List[int]:
    days = sorted(work_days_list)
    return [days[i] - days[i - 1] for i in range(1, len(days))]


def gap_variance(work_days_list: Tuple[int, ...]) -> float:
    """Population variance of the gaps between consecutive work days."""
    gaps = _gaps(work_days_list)
    if not gaps:
        return 0.0
    mean = sum(gaps) / len(gaps)
    return sum((gap - mean) ** 2 for gap in gaps) / len(gaps)


def consecutive_work_days(work_days_list: Tuple[int, ...]) -> int:
    """Number of back-to-back work day pairs."""
    return sum(1 for gap in _gaps(work_days_list) if gap == 1)


class FitnessStrategy:
    """Base class for fitness strategies."""

    name = "base"

    def __init__(self, ga_config: GeneticConfig):
        self.ga_config = ga_config

    def evaluate(self, chromosome: Chromosome, context: FitnessContext) -> float:
        raise NotImplementedError


class NormalFitnessStrategy(FitnessStrategy):
    """Score for runs that single shifts can cover."""

    name = "normal"

    def evaluate(self, chromosome: Chromosome, context: FitnessContext) -> float:
        ga = self.ga_config
        target = context.target_ending_balance

        balance_penalty = abs(context.balance - target) * ga.normal_balance_weight
        if context.balance > target:
            overshoot_ratio = (context.balance - target) / max(abs(target), 1.0)
            balance_penalty *= 1 + overshoot_ratio * ga.normal_overshoot_factor

        min_balance_penalty = 0.0
        if context.min_balance < context.minimum_balance:
            min_balance_penalty = (context.minimum_balance - context.min_balance) * ga.normal_min_balance_weight

        return (
            context.violations * ga.normal_violation_weight
            + balance_penalty
            + context.work_days * ga.normal_work_day_weight
            + consecutive_work_days(context.work_days_list) * ga.normal_consecutive_weight
            + math.sqrt(gap_variance(context.work_days_list)) * ga.normal_gap_spread_weight
            + min_balance_penalty
        )


class CrisisFitnessStrategy(FitnessStrategy):
    """Score for runs that need double shifts to reach the target."""

    name = "crisis"

    def evaluate(self, chromosome: Chromosome, context: FitnessContext) -> float:
        ga = self.ga_config
        target = context.target_ending_balance

        below_target = max(0.0, target - context.balance) * ga.crisis_below_target_weight
        above_target = max(0.0, context.balance - target) * ga.crisis_above_target_weight
        earnings_shortfall = max(0.0, context.required_earnings - context.total_earnings)

        window_work_days = sum(1 for day in context.work_days_list if day >= context.start_day)
        work_day_deficit = max(0, context.crisis_work_days_needed - window_work_days)

        min_balance_penalty = 0.0
        if context.min_balance < context.minimum_balance:
            min_balance_penalty = (context.minimum_balance - context.min_balance) * ga.crisis_min_balance_weight

        return (
            context.violations * ga.crisis_violation_weight
            + below_target
            + above_target
            + earnings_shortfall * ga.crisis_earnings_shortfall_weight
            + work_day_deficit * ga.crisis_work_day_deficit_weight
            + min_balance_penalty
        )


class FitnessManager:
    """Dispatches scoring to the strategy matching the run's mode."""

    def __init__(self, ga_config: Optional[GeneticConfig] = None, debug: bool = False):
        ga_config = ga_config or GeneticConfig()
        self.strategies: Dict[SearchMode, FitnessStrategy] = {
            SearchMode.NORMAL: NormalFitnessStrategy(ga_config),
            SearchMode.CRISIS: CrisisFitnessStrategy(ga_config),
        }
        self.debug = debug

    def strategy_for(self, mode: SearchMode) -> FitnessStrategy:
        return self.strategies[mode]

    def evaluate(self, chromosome: Chromosome, context: FitnessContext) -> float:
        strategy = self.strategy_for(context.mode)
        fitness = strategy.evaluate(chromosome, context)
        if self.debug:
            logger.debug(
                f"[{strategy.name}] fitness={fitness:.2f} balance={context.balance:.2f} "
                f"work_days={context.work_days} violations={context.violations}"
            )
        return fitness


def evaluate_fitness(
    chromosome: Chromosome,
    problem: ResolvedProblem,
    manager: Optional[FitnessManager] = None,
) -> FitnessBreakdown:
    """Simulate the month for a chromosome and score it.

    Args:
        chromosome: Candidate schedule (index day - 1)
        problem: Resolved problem
        manager: Fitness manager (created from problem.ga_config if omitted)

    Returns:
        FitnessBreakdown with the scalar fitness and simulation summary
    """
    manager = manager or FitnessManager(problem.ga_config)
    ga = problem.ga_config
    config = problem.config

    balance = config.starting_balance
    min_balance = config.starting_balance
    total_earnings = 0.0
    violations = 0
    constraint_gap = 0.0
    work_days_list: List[int] = []

    for day in range(MIN_DAY, MAX_DAY + 1):
        balance += problem.deposits_by_day[day - 1]

        shifts, earnings = problem.day_assignment(day, chromosome)
        if shifts or earnings > 0:
            work_days_list.append(day)
        balance += earnings
        total_earnings += earnings

        balance -= problem.expenses_by_day[day - 1]

        if day == problem.reset_day:
            balance = config.new_starting_balance

        fixed = problem.fixed_balance(day)
        if fixed is not None:
            gap = abs(balance - fixed)
            if gap > ga.constraint_tolerance:
                constraint_gap += gap
            balance = fixed

        if balance < config.minimum_balance:
            violations += 1
        if balance < min_balance:
            min_balance = balance

    work_days = tuple(work_days_list)
    context = FitnessContext(
        balance=balance,
        work_days=len(work_days),
        violations=violations,
        total_earnings=total_earnings,
        min_balance=min_balance,
        work_days_list=work_days,
        mode=problem.mode,
        target_ending_balance=config.target_ending_balance,
        minimum_balance=config.minimum_balance,
        required_earnings=problem.required_earnings,
        start_day=problem.start_day,
        crisis_work_days_needed=problem.target_work_days() if problem.in_crisis else 0,
    )

    fitness = manager.evaluate(chromosome, context)
    if constraint_gap:
        multiplier = (
            ga.crisis_constraint_multiplier if problem.in_crisis else ga.normal_constraint_multiplier
        )
        fitness += constraint_gap * multiplier

    return FitnessBreakdown(
        fitness=fitness,
        balance=balance,
        work_days=len(work_days),
        violations=violations,
        total_earnings=total_earnings,
        min_balance=min_balance,
        work_days_list=work_days,
    )

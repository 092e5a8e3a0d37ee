"""Constraint resolution: turns a run's inputs into the problem the GA solves.

Merges dated expenses and deposits into per-day arrays, applies manual
overrides, locates the optimizable window (everything after a balance reset
day, if one is configured), computes the net earnings the window still
needs and the days whose balance would run low without any work.

The search mode (normal / crisis) is decided here exactly once per run and
read by the generator, the mutator and the evaluator.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, Optional, Tuple

from ..config import MIN_DAY, MAX_DAY, DAYS_IN_MONTH
from ..exceptions import InvalidConfigurationError
from ..models.ledger import Expense, Deposit
from ..models.optimization import ManualConstraint, OptimizationConfig
from ..models.shift import ShiftCatalog
from .config import GeneticConfig
from .types import Chromosome, SearchMode

logger = logging.getLogger(__name__)


def is_valid_day(day: int) -> bool:
    return MIN_DAY <= day <= MAX_DAY


def resolve_mode(required_earnings: float, available_days: int, large_net: float) -> SearchMode:
    """Decide between normal and crisis search.

    Crisis mode applies when the window cannot be covered with one large
    shift per day, i.e. required_earnings / available_days > large_net.
    A window without days has nothing to search and stays normal.
    """
    if available_days <= 0:
        return SearchMode.NORMAL
    if required_earnings / available_days > large_net:
        return SearchMode.CRISIS
    return SearchMode.NORMAL


@dataclass
class ResolvedProblem:
    """Everything the generator, operators and evaluator need for one run."""

    config: OptimizationConfig
    catalog: ShiftCatalog
    ga_config: GeneticConfig
    expenses_by_day: List[float]  # index day - 1
    deposits_by_day: List[float]  # index day - 1
    constraints: Dict[int, ManualConstraint]
    start_day: int
    effective_starting_balance: float
    required_earnings: float
    critical_days: List[int]
    mode: SearchMode
    locked_days: FrozenSet[int]
    _label_cache: Dict[Optional[str], Tuple[Tuple[str, ...], float]] = field(
        default_factory=dict, repr=False
    )

    @property
    def available_days(self) -> int:
        return MAX_DAY - self.start_day + 1

    @property
    def in_crisis(self) -> bool:
        return self.mode is SearchMode.CRISIS

    @property
    def reset_day(self) -> Optional[int]:
        return self.config.balance_edit_day

    def window(self) -> range:
        """Days the optimizer may assign."""
        return range(self.start_day, MAX_DAY + 1)

    def mutable_days(self) -> List[int]:
        return [day for day in self.window() if day not in self.locked_days]

    def target_work_days(self) -> int:
        """Minimum number of work days the generator aims for."""
        ga = self.ga_config
        if self.in_crisis:
            by_ratio = math.floor(self.available_days * ga.crisis_min_work_days_ratio)
            by_earnings = math.ceil(self.required_earnings / self.catalog.average_double_net())
            return min(max(by_ratio, by_earnings), self.available_days)
        return math.ceil(self.required_earnings / self.catalog.large.net_pay)

    def parse_label(self, label: Optional[str]) -> Tuple[Tuple[str, ...], float]:
        """(shift names, net pay) for a label, cached per run."""
        cached = self._label_cache.get(label)
        if cached is None:
            parts = tuple(self.catalog.split(label))
            cached = (parts, self.catalog.net_for(label))
            self._label_cache[label] = cached
        return cached

    def day_assignment(self, day: int, chromosome: Chromosome) -> Tuple[Tuple[str, ...], float]:
        """Shifts worked and earnings credited on a day.

        Days before the window follow the locked (manual) schedule; days in
        the window follow the chromosome, except where a constraint pins the
        shift. A fixed-earnings constraint overrides the shift pay.
        """
        constraint = self.constraints.get(day)
        if constraint is not None and constraint.has_fixed_shift:
            label = constraint.shifts
        elif day < self.start_day:
            label = None
        else:
            label = chromosome[day - 1]

        shifts, earnings = self.parse_label(label)
        if constraint is not None and constraint.fixed_earnings is not None:
            earnings = constraint.fixed_earnings
        return shifts, earnings

    def fixed_balance(self, day: int) -> Optional[float]:
        constraint = self.constraints.get(day)
        if constraint is None:
            return None
        return constraint.fixed_balance

    def empty_chromosome(self) -> Chromosome:
        """All-off chromosome with every fixed shift stamped in."""
        chromosome: Chromosome = [None] * DAYS_IN_MONTH
        self.stamp_constraints(chromosome)
        return chromosome

    def stamp_constraints(self, chromosome: Chromosome) -> None:
        """Write fixed shifts onto a chromosome (in place)."""
        for day, constraint in self.constraints.items():
            if constraint.has_fixed_shift:
                chromosome[day - 1] = constraint.shifts
            elif constraint.is_locked:
                chromosome[day - 1] = None


def _aggregate_by_day(items, label: str) -> List[float]:
    by_day = [0.0] * DAYS_IN_MONTH
    for item in items:
        if not is_valid_day(item.day):
            logger.debug(f"Ignoring {label} on invalid day {item.day}: {item.amount}")
            continue
        by_day[item.day - 1] += item.amount
    return by_day


def _validate_reset(config: OptimizationConfig, constraints: Dict[int, ManualConstraint]) -> None:
    reset_day = config.balance_edit_day
    if reset_day is None:
        return
    if not is_valid_day(reset_day):
        raise InvalidConfigurationError(
            f"balance_edit_day must be between {MIN_DAY} and {MAX_DAY}, got {reset_day}"
        )
    if config.new_starting_balance is None:
        raise InvalidConfigurationError(
            "new_starting_balance is required when balance_edit_day is set"
        )
    pinned = constraints.get(reset_day)
    if pinned is not None and pinned.fixed_balance is not None:
        if abs(pinned.fixed_balance - config.new_starting_balance) > 0.01:
            raise InvalidConfigurationError(
                f"Day {reset_day} fixes balance {pinned.fixed_balance:.2f} but the balance "
                f"reset sets {config.new_starting_balance:.2f}"
            )


def resolve_constraints(
    config: OptimizationConfig,
    expenses: List[Expense],
    deposits: List[Deposit],
    catalog: Optional[ShiftCatalog] = None,
    ga_config: Optional[GeneticConfig] = None,
) -> ResolvedProblem:
    """Resolve a run's inputs into a ResolvedProblem.

    Args:
        config: Optimization configuration
        expenses: Dated expenses
        deposits: Dated deposits
        catalog: Shift catalog (defaults to the standard three shifts)
        ga_config: GA tunables (defaults to GeneticConfig())

    Returns:
        ResolvedProblem for the generator, operators and evaluator

    Raises:
        InvalidConfigurationError: If the config is missing or inconsistent
        InvalidShiftLabelError: If a constraint names an unknown shift
    """
    if config is None:
        raise InvalidConfigurationError("No configuration provided")

    catalog = catalog or ShiftCatalog()
    ga_config = ga_config or GeneticConfig()

    constraints: Dict[int, ManualConstraint] = {}
    for day, constraint in config.manual_constraints.items():
        if not is_valid_day(day):
            logger.debug(f"Ignoring manual constraint on invalid day {day}")
            continue
        if constraint.has_fixed_shift:
            catalog.split(constraint.shifts)
        constraints[day] = constraint

    _validate_reset(config, constraints)

    expenses_by_day = _aggregate_by_day(expenses, "expense")
    deposits_by_day = _aggregate_by_day(deposits, "deposit")

    # Fixed expenses replace what the expense list says for that day
    for day, constraint in constraints.items():
        if constraint.fixed_expenses is not None:
            expenses_by_day[day - 1] = constraint.fixed_expenses

    if config.balance_edit_day is not None:
        start_day = config.balance_edit_day + 1
        effective_starting_balance = config.new_starting_balance
    else:
        start_day = MIN_DAY
        effective_starting_balance = config.starting_balance

    window_expenses = sum(expenses_by_day[start_day - 1:])
    window_deposits = sum(deposits_by_day[start_day - 1:])
    required_earnings = max(
        0.0,
        window_expenses
        + config.target_ending_balance
        - effective_starting_balance
        - window_deposits,
    )

    # Days where the balance would dip under the floor plus buffer with no work at all
    critical_days = []
    running_balance = effective_starting_balance
    threshold = config.minimum_balance + ga_config.critical_day_buffer
    for day in range(start_day, MAX_DAY + 1):
        running_balance += deposits_by_day[day - 1]
        running_balance -= expenses_by_day[day - 1]
        if running_balance < threshold:
            critical_days.append(day)

    available_days = MAX_DAY - start_day + 1
    mode = resolve_mode(required_earnings, available_days, catalog.large.net_pay)
    locked_days = frozenset(day for day, c in constraints.items() if c.is_locked)

    if mode is SearchMode.CRISIS:
        logger.warning(
            f"Crisis mode: required earnings {required_earnings:.2f} exceed "
            f"{available_days} single large shifts ({available_days * catalog.large.net_pay:.2f})"
        )

    logger.debug(
        f"Resolved problem: start_day={start_day}, start_balance={effective_starting_balance:.2f}, "
        f"required={required_earnings:.2f}, critical_days={critical_days}, mode={mode.value}"
    )

    return ResolvedProblem(
        config=config,
        catalog=catalog,
        ga_config=ga_config,
        expenses_by_day=expenses_by_day,
        deposits_by_day=deposits_by_day,
        constraints=constraints,
        start_day=start_day,
        effective_starting_balance=effective_starting_balance,
        required_earnings=required_earnings,
        critical_days=critical_days,
        mode=mode,
        locked_days=locked_days,
    )

"""Schedule reconciliation between the optimizer and the day-by-day ledger.

- build_schedule turns a chromosome into the 30-row ledger
- ScheduleReconciler applies user edits to a ledger (recomputing balances
  forward), learns manual constraints from those edits for the next run,
  validates ledgers and summarizes / exports them
"""

import logging
from typing import TYPE_CHECKING, Dict, List, Optional, Union

import pandas as pd
from pydantic import BaseModel

from .config import MIN_DAY, MAX_DAY, SHIFT_SEPARATOR
from .exceptions import InvalidEditError
from .models.ledger import DaySchedule, Edit
from .models.optimization import ManualConstraint, OptimizationConfig
from .models.shift import ShiftCatalog
from .utils import format_currency

if TYPE_CHECKING:
    from .genetic.constraints import ResolvedProblem
    from .genetic.types import Chromosome

logger = logging.getLogger(__name__)

BALANCE_TOLERANCE = 0.01
EARNINGS_MATCH_TOLERANCE = 1.0
FINAL_BALANCE_DEVIATION = 0.1


class ScheduleValidation(BaseModel):
    """Result of validating a ledger."""

    is_valid: bool
    violations: List[str]


class ScheduleMetrics(BaseModel):
    """Summary figures of a ledger."""

    total_work_days: int
    total_earnings: float
    total_expenses: float
    average_balance: float
    min_balance: float
    max_balance: float


def build_schedule(chromosome: "Chromosome", problem: "ResolvedProblem") -> List[DaySchedule]:
    """
    Build the ledger for a chromosome.

    Uses the same per-day rules as the fitness evaluation, so the ledger's
    balances are the ones the chromosome was scored on. Balance overrides
    (reset day, fixed balances) are recorded as the row's adjustment.

    Args:
        chromosome: Schedule to format (index day - 1)
        problem: Resolved problem the chromosome belongs to

    Returns:
        List of 30 DaySchedule rows, day 1 first
    """
    config = problem.config
    rows = []
    balance = config.starting_balance

    for day in range(MIN_DAY, MAX_DAY + 1):
        shifts, earnings = problem.day_assignment(day, chromosome)
        deposit = problem.deposits_by_day[day - 1]
        expenses = problem.expenses_by_day[day - 1]

        natural_end = balance + deposit + earnings - expenses
        end_balance = natural_end
        if day == problem.reset_day:
            end_balance = config.new_starting_balance
        fixed = problem.fixed_balance(day)
        if fixed is not None:
            end_balance = fixed

        rows.append(DaySchedule(
            day=day,
            shifts=list(shifts),
            earnings=earnings,
            expenses=expenses,
            deposit=deposit,
            start_balance=balance,
            end_balance=end_balance,
            adjustment=end_balance - natural_end,
        ))
        balance = end_balance

    return rows


def _to_float(edit: Edit) -> float:
    value = edit.new_value
    if isinstance(value, list):
        raise InvalidEditError(f"Day {edit.day}: {edit.field} edit expects a number, got a list")
    try:
        return float(str(value).replace("$", "").replace(",", ""))
    except ValueError:
        raise InvalidEditError(
            f"Day {edit.day}: cannot use {value!r} as {edit.field}"
        ) from None


class ScheduleReconciler:
    """Applies ledger edits and turns them into constraints for the next run."""

    def __init__(self, catalog: Optional[ShiftCatalog] = None):
        """
        Initialize reconciler.

        Args:
            catalog: Shift catalog used to price shift edits and match earnings
        """
        self.catalog = catalog or ShiftCatalog()

    def _shift_label(self, edit: Edit) -> Optional[str]:
        value: Union[float, str, List[str]] = edit.new_value
        if isinstance(value, list):
            label = SHIFT_SEPARATOR.join(value)
        else:
            label = str(value).strip()
        if label == "" or label.lower() == "off":
            return None
        self.catalog.split(label)
        return label

    def apply_edits_to_schedule(
        self,
        schedule: List[DaySchedule],
        edits: List[Edit],
        config: OptimizationConfig,
    ) -> List[DaySchedule]:
        """
        Apply edits to a ledger and recompute balances.

        Balances are recomputed forward from the earliest affected day. A
        balance edit pins that day's end balance; rows whose balance was
        already overridden (adjustment != 0) stay pinned as well.

        Args:
            schedule: Ledger rows in day order (not modified)
            edits: Field-level edits
            config: Configuration providing the starting balance

        Returns:
            New list of ledger rows with the edits applied

        Raises:
            InvalidEditError: If an edit value cannot be parsed
        """
        logger.info(f"Applying {len(edits)} edits to a {len(schedule)}-day schedule")

        updated = [row.model_copy(deep=True) for row in schedule]
        index_by_day = {row.day: i for i, row in enumerate(updated)}
        pinned: Dict[int, float] = {
            row.day: row.end_balance for row in updated if abs(row.adjustment) > BALANCE_TOLERANCE
        }
        recalculate_from = MAX_DAY + 1

        for edit in edits:
            index = index_by_day.get(edit.day)
            if index is None:
                logger.warning(f"Edit day out of range: day {edit.day} ({edit.field})")
                continue

            row = updated[index]
            logger.debug(f"Day {edit.day}: {edit.field} {edit.original_value!r} -> {edit.new_value!r}")

            if edit.field == "earnings":
                row.earnings = _to_float(edit)
                recalculate_from = min(recalculate_from, edit.day)
            elif edit.field == "expenses":
                row.expenses = _to_float(edit)
                recalculate_from = min(recalculate_from, edit.day)
            elif edit.field == "deposit":
                row.deposit = _to_float(edit)
                recalculate_from = min(recalculate_from, edit.day)
            elif edit.field == "shifts":
                label = self._shift_label(edit)
                row.shifts = self.catalog.split(label)
                row.earnings = self.catalog.net_for(label)
                recalculate_from = min(recalculate_from, edit.day)
            elif edit.field == "balance":
                new_balance = _to_float(edit)
                pinned[edit.day] = new_balance
                row.end_balance = new_balance
                row.adjustment = new_balance - (row.start_balance + row.deposit + row.earnings - row.expenses)
                recalculate_from = min(recalculate_from, edit.day + 1)
            elif edit.field == "notes":
                row.notes = "" if edit.new_value is None else str(edit.new_value)

        if recalculate_from in index_by_day:
            start_index = index_by_day[recalculate_from]
            balance = config.starting_balance if start_index == 0 else updated[start_index - 1].end_balance
            logger.debug(f"Recalculating balances from day {recalculate_from} (start {balance:.2f})")

            for row in updated[start_index:]:
                row.start_balance = balance
                natural_end = balance + row.deposit + row.earnings - row.expenses
                if row.day in pinned:
                    row.end_balance = pinned[row.day]
                    row.adjustment = row.end_balance - natural_end
                else:
                    row.end_balance = natural_end
                    row.adjustment = 0.0
                balance = row.end_balance

        if updated:
            logger.info(f"Edits applied, final balance {updated[-1].end_balance:.2f}")
        return updated

    def find_shift_combination(self, target_earnings: float) -> Optional[str]:
        """Label whose net total matches target_earnings within $1, singles first."""
        for label, total in self.catalog.net_totals():
            if abs(target_earnings - total) <= EARNINGS_MATCH_TOLERANCE:
                return label
        return None

    def generate_manual_constraints(self, edits: List[Edit]) -> Dict[int, ManualConstraint]:
        """
        Turn ledger edits into manual constraints for the next optimization.

        Earnings edits become shift constraints when they match a known
        single or double shift total (0 becomes a fixed day off), otherwise
        fixed earnings. Expense and balance edits become fixed expenses and
        fixed balances; shift edits become shift constraints.

        Args:
            edits: Field-level edits

        Returns:
            Dictionary mapping day to ManualConstraint
        """
        fields_by_day: Dict[int, Dict[str, object]] = {}

        for edit in edits:
            if not MIN_DAY <= edit.day <= MAX_DAY:
                logger.warning(f"Skipping constraint for out-of-range day {edit.day}")
                continue
            fields = fields_by_day.setdefault(edit.day, {})

            if edit.field == "earnings":
                earnings = _to_float(edit)
                if earnings == 0:
                    fields["shifts"] = None
                    continue
                combination = self.find_shift_combination(earnings)
                if combination:
                    fields["shifts"] = combination
                    logger.debug(f"Day {edit.day}: earnings {earnings} matched shifts {combination}")
                else:
                    fields["fixed_earnings"] = earnings
                    logger.debug(f"Day {edit.day}: earnings {earnings} kept as fixed earnings")
            elif edit.field == "expenses":
                fields["fixed_expenses"] = _to_float(edit)
            elif edit.field == "balance":
                fields["fixed_balance"] = _to_float(edit)
            elif edit.field == "shifts":
                fields["shifts"] = self._shift_label(edit)

        constraints = {day: ManualConstraint(**fields) for day, fields in fields_by_day.items() if fields}
        logger.info(f"Generated constraints for {len(constraints)} days from {len(edits)} edits")
        return constraints

    def validate_schedule(self, schedule: List[DaySchedule], config: OptimizationConfig) -> ScheduleValidation:
        """
        Check a ledger's balance chain, minimum balance and final balance.

        Args:
            schedule: Ledger rows in day order
            config: Configuration with starting, minimum and target balances

        Returns:
            ScheduleValidation listing every violation found
        """
        if not schedule:
            return ScheduleValidation(is_valid=False, violations=["Schedule is empty"])

        violations = []
        balance = config.starting_balance

        for row in schedule:
            if abs(row.start_balance - balance) > BALANCE_TOLERANCE:
                violations.append(
                    f"Day {row.day}: Start balance ({format_currency(row.start_balance)}) does not "
                    f"match previous end balance ({format_currency(balance)})"
                )
            if row.end_balance < config.minimum_balance:
                violations.append(
                    f"Day {row.day}: Balance ({format_currency(row.end_balance)}) below minimum "
                    f"({format_currency(config.minimum_balance)})"
                )
            if abs(row.expected_end_balance() - row.end_balance) > BALANCE_TOLERANCE:
                violations.append(f"Day {row.day}: Balance calculation mismatch")
            balance = row.end_balance

        target = config.target_ending_balance
        final_balance = schedule[-1].end_balance
        if abs(final_balance - target) > abs(target) * FINAL_BALANCE_DEVIATION:
            violations.append(
                f"Final balance ({format_currency(final_balance)}) significantly differs from "
                f"target ({format_currency(target)})"
            )

        if violations:
            logger.warning(f"Schedule validation failed: {len(violations)} violations")
        return ScheduleValidation(is_valid=not violations, violations=violations)

    def calculate_metrics(self, schedule: List[DaySchedule]) -> ScheduleMetrics:
        """Totals and balance range of a ledger (all zero for an empty one)."""
        if not schedule:
            return ScheduleMetrics(
                total_work_days=0,
                total_earnings=0.0,
                total_expenses=0.0,
                average_balance=0.0,
                min_balance=0.0,
                max_balance=0.0,
            )

        balances = [row.end_balance for row in schedule]
        return ScheduleMetrics(
            total_work_days=sum(1 for row in schedule if row.shifts or row.earnings > 0),
            total_earnings=sum(row.earnings for row in schedule),
            total_expenses=sum(row.expenses for row in schedule),
            average_balance=sum(balances) / len(balances),
            min_balance=min(balances),
            max_balance=max(balances),
        )

    def export_schedule_csv(self, schedule: List[DaySchedule]) -> str:
        """Ledger as CSV text: Day, Shifts, Earnings, Expenses, Deposit, End Balance."""
        df = pd.DataFrame(
            [
                {
                    "Day": row.day,
                    "Shifts": SHIFT_SEPARATOR.join(row.shifts) or "Off",
                    "Earnings": row.earnings,
                    "Expenses": row.expenses,
                    "Deposit": row.deposit,
                    "End Balance": row.end_balance,
                }
                for row in schedule
            ],
            columns=["Day", "Shifts", "Earnings", "Expenses", "Deposit", "End Balance"],
        )
        csv_text = df.to_csv(index=False, float_format="%.2f", lineterminator="\n")
        logger.debug(f"Exported {len(schedule)} rows to CSV")
        return csv_text

"""Command-line runner for a single optimization.

Usage:
    python -m shiftplanner.runner --starting-balance 90.5 --target 490.5
    python -m shiftplanner.runner --expenses expenses.csv --deposits deposits.csv \
        --starting-balance 500 --target 800 --seed 7 --export schedule.csv
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config import Config
from .data_loader import load_deposits, load_expenses
from .exceptions import ShiftPlannerError
from .genetic import GeneticConfig, GeneticOptimizer
from .logger import configure_logging
from .models.optimization import OptimizationConfig, OptimizationProgress, OptimizationResult
from .reconciler import ScheduleReconciler
from .sample_data import sample_deposits, sample_expenses
from .utils import format_currency

logger = logging.getLogger(__name__)


def build_parser(settings: Config) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Genetic shift planner for a 30-day month",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m shiftplanner.runner --starting-balance 90.5 --target 490.5
  python -m shiftplanner.runner --expenses e.csv --deposits d.csv --starting-balance 500 --target 800
        """,
    )
    parser.add_argument("--expenses", metavar="CSV", help="Expenses CSV (default: sample month)")
    parser.add_argument("--deposits", metavar="CSV", help="Deposits CSV (default: sample month)")
    parser.add_argument("--starting-balance", type=float, required=True)
    parser.add_argument("--target", type=float, required=True, help="Target ending balance")
    parser.add_argument("--minimum-balance", type=float, default=0.0)
    parser.add_argument("--population", type=int, default=settings.DEFAULT_POPULATION_SIZE)
    parser.add_argument("--generations", type=int, default=settings.DEFAULT_GENERATIONS)
    parser.add_argument("--seed", type=int, default=settings.RANDOM_SEED)
    parser.add_argument("--export", metavar="CSV", help="Write the resulting ledger to this file")
    parser.add_argument("--quiet", "-q", action="store_true", help="Do not print progress")
    return parser


def print_summary(result: OptimizationResult) -> None:
    print("=" * 80)
    print(f"SHIFT PLAN ({result.mode} mode, {result.generations_run} generations, {result.computation_time})")
    print("=" * 80)
    for row in result.formatted_schedule:
        shifts = "+".join(row.shifts) or "-"
        print(
            f"Day {row.day:>2}  {shifts:<14} earn {format_currency(row.earnings):>10}  "
            f"exp {format_currency(row.expenses):>10}  end {format_currency(row.end_balance):>11}"
        )
    print("-" * 80)
    print(f"Work days:      {len(result.work_days)}")
    print(f"Total earnings: {format_currency(result.total_earnings)}")
    print(f"Final balance:  {format_currency(result.final_balance)}")
    print(f"Min balance:    {format_currency(result.min_balance)}")
    print(f"Violations:     {result.violations}")


def main(argv: Optional[List[str]] = None) -> int:
    settings = Config()
    args = build_parser(settings).parse_args(argv)
    configure_logging(settings.LOG_LEVEL, settings.LOG_FILE)

    try:
        expenses = load_expenses(args.expenses) if args.expenses else sample_expenses()
        deposits = load_deposits(args.deposits) if args.deposits else sample_deposits()

        config = OptimizationConfig(
            starting_balance=args.starting_balance,
            target_ending_balance=args.target,
            minimum_balance=args.minimum_balance,
            population_size=args.population,
            generations=args.generations,
            random_seed=args.seed,
        )
        optimizer = GeneticOptimizer(
            config,
            expenses,
            deposits,
            ga_config=GeneticConfig(progress_interval=settings.PROGRESS_INTERVAL),
        )

        def report(progress: OptimizationProgress) -> None:
            if not args.quiet:
                print(
                    f"[gen {progress.generation:>4}] {progress.progress:5.1f}%  "
                    f"fitness={progress.best_fitness:.2f}  work_days={progress.work_days}  "
                    f"balance={progress.balance:.2f}  violations={progress.violations}"
                )

        result = optimizer.optimize(progress_callback=report)
    except (ShiftPlannerError, ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nOperation cancelled by user.")
        return 1

    print_summary(result)

    if args.export:
        csv_text = ScheduleReconciler().export_schedule_csv(result.formatted_schedule)
        Path(args.export).write_text(csv_text)
        print(f"Schedule written to {args.export}")

    return 0


if __name__ == "__main__":
    sys.exit(main())

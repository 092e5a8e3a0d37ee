"""Tests for ledger building, edits, constraints, validation and export."""

import pytest
from shiftplanner.exceptions import InvalidEditError, InvalidShiftLabelError
from shiftplanner.genetic import evaluate_fitness, resolve_constraints
from shiftplanner.models.ledger import Edit, Expense, Deposit
from shiftplanner.models.optimization import ManualConstraint, OptimizationConfig
from shiftplanner.reconciler import ScheduleReconciler, build_schedule


@pytest.fixture
def config():
    return OptimizationConfig(starting_balance=500, target_ending_balance=550)


@pytest.fixture
def schedule(config):
    """Ledger with a large shift on day 1 and one on day 15."""
    problem = resolve_constraints(
        config,
        [Expense(day=1, name="Insurance", amount=86.5), Expense(day=15, name="Food", amount=86.5)],
        [Deposit(day=20, amount=50)],
    )
    chromosome = problem.empty_chromosome()
    chromosome[0] = "large"
    chromosome[14] = "large"
    return build_schedule(chromosome, problem)


@pytest.fixture
def reconciler():
    return ScheduleReconciler()


def test_build_schedule(schedule, config):
    assert len(schedule) == 30
    assert schedule[0].shifts == ["large"]
    assert schedule[0].earnings == 86.5
    assert schedule[0].start_balance == config.starting_balance
    assert schedule[19].deposit == 50
    assert schedule[-1].end_balance == pytest.approx(550)
    assert all(row.adjustment == 0 for row in schedule)


def test_earnings_edit_shifts_later_balances(reconciler, schedule, config):
    edits = [Edit(day=1, field="earnings", original_value=86.5, new_value=200)]

    updated = reconciler.apply_edits_to_schedule(schedule, edits, config)

    assert updated[0].earnings == 200
    assert updated[0].start_balance == schedule[0].start_balance
    assert updated[0].end_balance == pytest.approx(schedule[0].end_balance + 113.5)
    for before, after in zip(schedule[1:], updated[1:]):
        assert after.start_balance == pytest.approx(before.start_balance + 113.5)
        assert after.end_balance == pytest.approx(before.end_balance + 113.5)
        assert after.earnings == before.earnings
        assert after.expenses == before.expenses
        assert after.shifts == before.shifts


def test_apply_edits_does_not_modify_input(reconciler, schedule, config):
    original = [row.model_copy(deep=True) for row in schedule]

    reconciler.apply_edits_to_schedule(schedule, [Edit(day=3, field="expenses", new_value=40)], config)

    assert schedule == original


def test_balance_edit_pins_day(reconciler, schedule, config):
    edits = [
        Edit(day=10, field="balance", new_value="1,000.00"),
        Edit(day=5, field="expenses", new_value=20),
    ]

    updated = reconciler.apply_edits_to_schedule(schedule, edits, config)

    assert updated[9].end_balance == 1000
    assert updated[9].end_balance == pytest.approx(updated[9].expected_end_balance())
    assert updated[10].start_balance == 1000
    assert updated[-1].end_balance == pytest.approx(1000 - 86.5 + 86.5 + 50)


def test_shift_edit_updates_earnings(reconciler, schedule, config):
    edits = [
        Edit(day=2, field="shifts", new_value=["medium", "large"]),
        Edit(day=1, field="shifts", new_value="off"),
    ]

    updated = reconciler.apply_edits_to_schedule(schedule, edits, config)

    assert updated[1].shifts == ["medium", "large"]
    assert updated[1].earnings == pytest.approx(154)
    assert updated[0].shifts == []
    assert updated[0].earnings == 0
    assert updated[-1].end_balance == pytest.approx(schedule[-1].end_balance - 86.5 + 154)


def test_notes_edit(reconciler, schedule, config):
    updated = reconciler.apply_edits_to_schedule(
        schedule, [Edit(day=4, field="notes", new_value="Dentist")], config
    )

    assert updated[3].notes == "Dentist"
    assert updated[-1].end_balance == schedule[-1].end_balance


def test_out_of_range_edit_ignored(reconciler, schedule, config):
    updated = reconciler.apply_edits_to_schedule(
        schedule, [Edit(day=31, field="earnings", new_value=100)], config
    )

    assert updated == schedule


def test_unparseable_edit_rejected(reconciler, schedule, config):
    with pytest.raises(InvalidEditError):
        reconciler.apply_edits_to_schedule(
            schedule, [Edit(day=2, field="earnings", new_value="lots")], config
        )


def test_find_shift_combination(reconciler):
    assert reconciler.find_shift_combination(86.5) == "large"
    assert reconciler.find_shift_combination(154) == "medium+large"
    assert reconciler.find_shift_combination(154.9) == "medium+large"
    assert reconciler.find_shift_combination(100) is None


def test_generate_constraints(reconciler):
    edits = [
        Edit(day=2, field="earnings", new_value=154),
        Edit(day=3, field="earnings", new_value=100),
        Edit(day=4, field="earnings", new_value=0),
        Edit(day=5, field="expenses", new_value=75),
        Edit(day=6, field="balance", new_value="$1,200"),
        Edit(day=7, field="shifts", new_value="small"),
        Edit(day=8, field="notes", new_value="ignored"),
        Edit(day=40, field="earnings", new_value=86.5),
    ]

    constraints = reconciler.generate_manual_constraints(edits)

    assert set(constraints) == {2, 3, 4, 5, 6, 7}
    assert constraints[2].shifts == "medium+large"
    assert constraints[2].fixed_earnings is None
    assert constraints[3].fixed_earnings == 100
    assert not constraints[3].has_fixed_shift
    assert constraints[4].has_fixed_shift
    assert constraints[4].shifts is None
    assert constraints[5].fixed_expenses == 75
    assert not constraints[5].is_locked
    assert constraints[6].fixed_balance == 1200
    assert constraints[7].shifts == "small"


def test_generated_constraints_drive_next_run(reconciler):
    constraints = reconciler.generate_manual_constraints([Edit(day=2, field="earnings", new_value=154)])
    config = OptimizationConfig(
        starting_balance=0, target_ending_balance=0, manual_constraints=constraints
    )

    problem = resolve_constraints(config, [], [])

    assert problem.day_assignment(2, problem.empty_chromosome()) == (("medium", "large"), 154)


def test_invalid_shift_edit_rejected(reconciler):
    with pytest.raises(InvalidShiftLabelError):
        reconciler.generate_manual_constraints([Edit(day=2, field="shifts", new_value="huge")])


def test_validate_schedule(reconciler, schedule, config):
    validation = reconciler.validate_schedule(schedule, config)

    assert validation.is_valid
    assert validation.violations == []


def test_validate_schedule_reports_problems(reconciler, schedule, config):
    broken = [row.model_copy(deep=True) for row in schedule]
    broken[4].start_balance += 10
    broken[4].end_balance = -5

    validation = reconciler.validate_schedule(broken, config)

    assert not validation.is_valid
    messages = " ".join(validation.violations)
    assert "Day 5: Start balance" in messages
    assert "below minimum" in messages
    assert "Balance calculation mismatch" in messages


def test_validate_schedule_final_balance(reconciler, schedule):
    config = OptimizationConfig(starting_balance=500, target_ending_balance=2000)

    validation = reconciler.validate_schedule(schedule, config)

    assert not validation.is_valid
    assert "significantly differs" in validation.violations[-1]


def test_validate_empty_schedule(reconciler, config):
    validation = reconciler.validate_schedule([], config)

    assert not validation.is_valid
    assert validation.violations == ["Schedule is empty"]


def test_calculate_metrics(reconciler, schedule):
    metrics = reconciler.calculate_metrics(schedule)

    assert metrics.total_work_days == 2
    assert metrics.total_earnings == pytest.approx(173)
    assert metrics.total_expenses == pytest.approx(173)
    assert metrics.min_balance == pytest.approx(500)
    assert metrics.max_balance == pytest.approx(550)


def test_calculate_metrics_empty(reconciler):
    metrics = reconciler.calculate_metrics([])

    assert metrics.total_work_days == 0
    assert metrics.average_balance == 0


def test_export_schedule_csv(reconciler, schedule):
    lines = reconciler.export_schedule_csv(schedule).strip().split("\n")

    assert lines[0] == "Day,Shifts,Earnings,Expenses,Deposit,End Balance"
    assert len(lines) == 31
    assert lines[1] == "1,large,86.50,86.50,0.00,500.00"
    assert lines[2].startswith("2,Off,")


def test_reconciler_uses_custom_catalog():
    from shiftplanner.models.shift import ShiftCatalog, ShiftType

    catalog = ShiftCatalog(large=ShiftType(name="large", gross_pay=110, net_pay=100))

    assert ScheduleReconciler(catalog).find_shift_combination(100) == "large"


def test_metrics_count_fixed_earnings_days(reconciler):
    config = OptimizationConfig(
        starting_balance=0,
        target_ending_balance=0,
        manual_constraints={3: ManualConstraint(fixed_earnings=120)},
    )
    problem = resolve_constraints(config, [], [])
    chromosome = problem.empty_chromosome()
    chromosome[9] = "small"

    metrics = reconciler.calculate_metrics(build_schedule(chromosome, problem))

    assert metrics.total_work_days == evaluate_fitness(chromosome, problem).work_days == 2
    assert metrics.total_earnings == pytest.approx(176)

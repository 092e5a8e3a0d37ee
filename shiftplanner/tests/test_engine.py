"""Tests for the genetic optimizer."""

import threading
from dataclasses import replace

import pytest
from shiftplanner.exceptions import (
    InvalidConfigurationError,
    InvalidShiftLabelError,
    OptimizationCancelled,
)
from shiftplanner.genetic import FAST_CONFIG, GeneticOptimizer, RunControl
from shiftplanner.models.optimization import ManualConstraint, OptimizationConfig
from shiftplanner.sample_data import sample_deposits, sample_expenses


@pytest.fixture
def sample_config():
    """Sample-month config small enough for quick runs."""
    return OptimizationConfig(
        starting_balance=90.5,
        target_ending_balance=490.5,
        population_size=40,
        generations=15,
        random_seed=11,
    )


def run(config, **kwargs):
    optimizer = GeneticOptimizer(config, sample_expenses(), sample_deposits(), ga_config=FAST_CONFIG)
    return optimizer.optimize(**kwargs)


def assert_chain(result, starting_balance):
    balance = starting_balance
    for row in result.formatted_schedule:
        assert row.start_balance == pytest.approx(balance)
        assert row.end_balance == pytest.approx(row.expected_end_balance())
        balance = row.end_balance


def test_result_shape(sample_config):
    result = run(sample_config)

    assert len(result.schedule) == 30
    assert [row.day for row in result.formatted_schedule] == list(range(1, 31))
    assert result.work_days == [i + 1 for i, label in enumerate(result.schedule) if label is not None]
    assert result.final_balance == pytest.approx(result.formatted_schedule[-1].end_balance)
    assert 1 <= result.generations_run <= sample_config.generations
    assert result.mode == "normal"
    assert_chain(result, sample_config.starting_balance)


def test_same_seed_same_result(sample_config):
    first = run(sample_config)
    second = run(sample_config)

    assert first.schedule == second.schedule
    assert first.final_balance == second.final_balance


def test_all_off_when_nothing_is_needed():
    config = OptimizationConfig(
        starting_balance=1000,
        target_ending_balance=1000,
        minimum_balance=0,
        population_size=30,
        generations=50,
        random_seed=1,
    )
    result = GeneticOptimizer(config, [], []).optimize()

    assert result.schedule == [None] * 30
    assert result.work_days == []
    assert result.violations == 0
    assert result.final_balance == 1000


def test_crisis_uses_double_shifts():
    config = OptimizationConfig(
        starting_balance=0,
        target_ending_balance=5000,
        population_size=40,
        generations=20,
        random_seed=3,
    )
    result = GeneticOptimizer(config, [], [], ga_config=FAST_CONFIG).optimize()

    assert result.mode == "crisis"
    assert result.violations == 0
    assert any(label is not None and "+" in label for label in result.schedule)


def test_manual_constraints_honoured(sample_config):
    config = sample_config.model_copy(update={
        "manual_constraints": {
            5: ManualConstraint(shifts="large"),
            6: ManualConstraint(shifts=None),
            12: ManualConstraint(fixed_balance=250),
        },
    })
    result = run(config)

    assert result.schedule[4] == "large"
    assert result.formatted_schedule[4].earnings == 86.5
    assert result.schedule[5] is None
    assert result.formatted_schedule[5].shifts == []
    assert result.formatted_schedule[11].end_balance == 250
    assert_chain(result, config.starting_balance)


def test_balance_reset(sample_config):
    config = sample_config.model_copy(update={
        "balance_edit_day": 10,
        "new_starting_balance": 600,
    })
    result = run(config)

    assert all(label is None for label in result.schedule[:10])
    assert result.formatted_schedule[9].end_balance == 600
    assert_chain(result, config.starting_balance)


def test_fitness_history_never_worsens(sample_config):
    optimizer = GeneticOptimizer(sample_config, sample_expenses(), sample_deposits())
    optimizer.optimize()

    history = optimizer.fitness_history
    assert len(history) >= 1
    assert all(later <= earlier for earlier, later in zip(history, history[1:]))


def test_progress_events(sample_config):
    events = []
    run(sample_config, progress_callback=events.append)

    assert events[0].generation == 0
    assert events[-1].message == "Optimization complete"
    assert all(0 <= event.progress <= 100 for event in events)


def test_cancel_returns_partial_result(sample_config):
    control = RunControl()

    def cancel_on_first_event(progress):
        control.cancel()

    with pytest.raises(OptimizationCancelled) as excinfo:
        run(sample_config, progress_callback=cancel_on_first_event, control=control)

    assert excinfo.value.generation == 0
    assert excinfo.value.partial_result is not None
    assert len(excinfo.value.partial_result.schedule) == 30


@pytest.mark.parametrize("update", [{"population_size": 5}, {"generations": 0}])
def test_degenerate_config_rejected(sample_config, update):
    with pytest.raises(InvalidConfigurationError):
        GeneticOptimizer(sample_config.model_copy(update=update))


def test_missing_config_rejected():
    with pytest.raises(InvalidConfigurationError):
        GeneticOptimizer(None)


def test_bad_constraint_label_rejected(sample_config):
    config = sample_config.model_copy(update={
        "manual_constraints": {3: ManualConstraint(shifts="large+large+large")},
    })

    with pytest.raises(InvalidShiftLabelError):
        GeneticOptimizer(config)


def test_cancel_seen_mid_run(sample_config):
    control = RunControl()
    optimizer = GeneticOptimizer(
        sample_config,
        sample_expenses(),
        sample_deposits(),
        ga_config=replace(FAST_CONFIG, progress_interval=1),
    )

    def cancel_at_generation_3(progress):
        if progress.generation == 3:
            control.cancel()

    with pytest.raises(OptimizationCancelled) as excinfo:
        optimizer.optimize(progress_callback=cancel_at_generation_3, control=control)

    assert excinfo.value.generation == 3
    assert excinfo.value.partial_result.generations_run == 3
    assert len(optimizer.fitness_history) == 4


def test_pause_and_resume_mid_run(sample_config):
    control = RunControl()
    resumed = threading.Event()
    optimizer = GeneticOptimizer(
        sample_config,
        sample_expenses(),
        sample_deposits(),
        ga_config=replace(FAST_CONFIG, progress_interval=1, pause_poll_interval=0.01),
    )

    def resume_later():
        resumed.set()
        control.resume()

    def pause_at_generation_2(progress):
        if progress.generation == 2 and not resumed.is_set():
            control.pause()
            threading.Timer(0.05, resume_later).start()

    result = optimizer.optimize(progress_callback=pause_at_generation_2, control=control)

    assert resumed.is_set()
    assert result.generations_run == sample_config.generations
    assert len(result.schedule) == 30

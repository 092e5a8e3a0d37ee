"""Tests for the optimization service."""

import json

import pytest
from shiftplanner.config import Config
from shiftplanner.logger import JSONProgressLogger
from shiftplanner.models.optimization import OptimizationConfig
from shiftplanner.sample_data import sample_deposits, sample_expenses
from shiftplanner.schemas import OptimizeRequest
from shiftplanner.services import OptimizationService


@pytest.fixture
def settings():
    return Config(
        DEFAULT_POPULATION_SIZE=30,
        DEFAULT_GENERATIONS=10,
        PROGRESS_INTERVAL=5,
        RANDOM_SEED=9,
    )


@pytest.fixture
def service(settings):
    return OptimizationService(settings)


@pytest.fixture
def request_model():
    return OptimizeRequest(
        config=OptimizationConfig(starting_balance=90.5, target_ending_balance=490.5),
        expenses=sample_expenses(),
        deposits=sample_deposits(),
    )


def test_build_optimizer_applies_defaults(service, request_model):
    optimizer = service.build_optimizer(request_model)

    assert optimizer.config.population_size == 30
    assert optimizer.config.generations == 10
    assert optimizer.config.random_seed == 9
    assert optimizer.ga_config.progress_interval == 5


def test_request_values_win_over_defaults(service):
    request = OptimizeRequest(
        config=OptimizationConfig(
            starting_balance=0, target_ending_balance=0, population_size=12, generations=3, random_seed=1
        )
    )

    optimizer = service.build_optimizer(request)

    assert optimizer.config.population_size == 12
    assert optimizer.config.generations == 3
    assert optimizer.config.random_seed == 1


def test_optimize_is_reproducible(service, request_model):
    first = service.optimize(request_model)
    second = service.optimize(request_model)

    assert len(first.formatted_schedule) == 30
    assert first.schedule == second.schedule


def test_background_run_completes(service, request_model):
    run_id = service.start_run(request_model)
    assert service.get_status()["status"] == "running"

    service.run_optimization_task()

    status = service.get_status()
    assert status["status"] == "completed"
    assert status["run_id"] == run_id
    assert status["progress"].message == "Optimization complete"
    assert service.get_result() is not None


def test_only_one_run_at_a_time(service, request_model):
    service.start_run(request_model)

    with pytest.raises(ValueError):
        service.start_run(request_model)


def test_cancel_before_first_generation(service, request_model):
    service.start_run(request_model)
    service.cancel()

    service.run_optimization_task()

    assert service.get_status()["status"] == "cancelled"
    assert service.get_result() is not None


def test_pause_and_resume_update_status(service, request_model):
    service.start_run(request_model)

    assert service.pause()["status"] == "paused"
    assert service.control.paused
    assert service.resume()["status"] == "running"
    assert not service.control.paused


def test_controls_without_run_rejected(service):
    for command in (service.pause, service.resume, service.cancel):
        with pytest.raises(ValueError):
            command()


def test_invalid_request_records_nothing(service):
    request = OptimizeRequest(
        config=OptimizationConfig(starting_balance=0, target_ending_balance=0, population_size=2)
    )

    with pytest.raises(ValueError):
        service.start_run(request)
    assert service.get_status()["status"] == "not_started"


def test_progress_log_written(tmp_path, request_model):
    log_file = tmp_path / "runs" / "progress.jsonl"
    service = OptimizationService(Config(
        DEFAULT_POPULATION_SIZE=30,
        DEFAULT_GENERATIONS=10,
        PROGRESS_INTERVAL=5,
        RANDOM_SEED=9,
        PROGRESS_LOG_FILE=str(log_file),
    ))

    run_id = service.start_run(request_model)
    service.run_optimization_task()

    entries = [json.loads(line) for line in log_file.read_text().splitlines()]
    assert entries[0]["event"] == "progress"
    assert entries[-1]["event"] == "result"
    assert all(entry["run_id"] == run_id for entry in entries)
    assert "formatted_schedule" not in entries[-1]


def test_unwritable_progress_log_marks_error(tmp_path, request_model):
    # A directory cannot be opened as the progress log
    service = OptimizationService(Config(
        DEFAULT_POPULATION_SIZE=30,
        DEFAULT_GENERATIONS=10,
        RANDOM_SEED=9,
        PROGRESS_LOG_FILE=str(tmp_path),
    ))

    service.start_run(request_model)
    service.run_optimization_task()

    status = service.get_status()
    assert status["status"] == "error"
    assert status["error"]

    # The failed run no longer blocks new ones
    service.start_run(request_model)
    assert service.get_status()["status"] == "running"


def test_new_run_started_while_previous_task_finishes(tmp_path, request_model, monkeypatch):
    service = OptimizationService(Config(
        DEFAULT_POPULATION_SIZE=30,
        DEFAULT_GENERATIONS=10,
        RANDOM_SEED=9,
        PROGRESS_LOG_FILE=str(tmp_path / "progress.jsonl"),
    ))
    started = []
    original_close = JSONProgressLogger.close

    def close_then_start_next(self):
        original_close(self)
        if not started:
            started.append(service.start_run(request_model))

    monkeypatch.setattr(JSONProgressLogger, "close", close_then_start_next)

    first_run = service.start_run(request_model)
    service.run_optimization_task()

    status = service.get_status()
    assert status["run_id"] == started[0] != first_run
    assert status["status"] == "running"
    assert service.get_result() is None

    service.run_optimization_task()

    status = service.get_status()
    assert status["run_id"] == started[0]
    assert status["status"] == "completed"
    assert service.get_result() is not None


def test_task_without_prepared_run(service):
    with pytest.raises(ValueError):
        service.run_optimization_task()

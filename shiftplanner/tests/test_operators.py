"""Tests for genetic operators."""

import random

import pytest
from shiftplanner.genetic import Individual, evaluate_fitness, resolve_constraints
from shiftplanner.genetic.operators import crossover, mutate, tournament_selection
from shiftplanner.models.optimization import ManualConstraint, OptimizationConfig


@pytest.fixture
def problem():
    config = OptimizationConfig(
        starting_balance=500,
        target_ending_balance=1500,
        manual_constraints={
            5: ManualConstraint(shifts="large"),
            6: ManualConstraint(fixed_earnings=100),
        },
    )
    return resolve_constraints(config, [], [])


def individual(problem, chromosome):
    return Individual(chromosome, evaluate_fitness(chromosome, problem))


def test_tournament_returns_best_of_sample(problem):
    population = []
    for work_days in range(5):
        chromosome = problem.empty_chromosome()
        for day in range(10, 10 + work_days * 2, 2):
            chromosome[day - 1] = "large"
        population.append(individual(problem, chromosome))
    best = min(population, key=lambda ind: ind.fitness)

    winner = tournament_selection(population, 200, random.Random(1))

    assert winner is best


def test_crossover_keeps_fixed_days(problem):
    rng = random.Random(2)
    parent1 = individual(problem, ["small"] * 30)
    parent2 = individual(problem, ["medium+medium"] * 30)

    for _ in range(50):
        child = crossover(parent1, parent2, problem, rng)
        assert len(child) == 30
        assert child[4] == "large"
        assert child[5] is None
        assert set(child) <= {"small", "medium+medium", "large", None}


def test_crossover_does_not_modify_parents(problem):
    parent1 = individual(problem, ["small"] * 30)
    parent2 = individual(problem, ["medium"] * 30)

    crossover(parent1, parent2, problem, random.Random(3))

    assert parent1.chromosome == ["small"] * 30
    assert parent2.chromosome == ["medium"] * 30


def test_mutate_zero_rate_is_identity(problem):
    chromosome = problem.empty_chromosome()
    chromosome[0] = "medium"

    mutated = mutate(chromosome, problem, random.Random(4), mutation_rate=0.0)

    assert mutated == chromosome
    assert mutated is not chromosome


def test_mutate_leaves_locked_days(problem):
    rng = random.Random(5)
    chromosome = problem.empty_chromosome()

    for _ in range(50):
        mutated = mutate(chromosome, problem, rng, mutation_rate=1.0)
        assert mutated[4] == "large"
        assert mutated[5] is None
        for label in mutated:
            problem.catalog.split(label)

    assert chromosome == problem.empty_chromosome()


def test_crisis_mutation_draws_doubles():
    config = OptimizationConfig(starting_balance=0, target_ending_balance=5000)
    crisis = resolve_constraints(config, [], [])

    mutated = mutate(crisis.empty_chromosome(), crisis, random.Random(6), mutation_rate=1.0)

    assert all(label is not None and "+" in label for label in mutated)

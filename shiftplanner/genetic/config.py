"""Configuration for the genetic algorithm.

Every tunable of the search lives here: evolution parameters, early
termination, generator and mutation biases, and fitness weights.

## TUNING NOTES:

Speed vs accuracy tradeoff (population x generations):
- FAST: pop=60, gens=150 - interactive previews
- DEFAULT: pop=200, gens=500 - what the UI requests

Elitism is deliberately strong (20%, at least 30 individuals). With a
population of 30 or less the whole population is elite and the run keeps
its seeded population.
"""

from dataclasses import dataclass


@dataclass
class GeneticConfig:
    """Hyperparameters for the shift schedule search."""

    # Core GA parameters
    mutation_rate: float = 0.15
    tournament_size: int = 7
    elite_ratio: float = 0.2
    min_elite_size: int = 30

    # Progress reporting
    progress_interval: int = 50

    # Stagnation / early termination
    improvement_threshold: float = 0.99  # best must drop below best_ever * threshold
    min_generations_before_termination: int = 300
    max_generations_without_improvement: int = 150
    balance_tolerance: float = 5.0

    # Pause polling (seconds) while a run is paused
    pause_poll_interval: float = 0.1

    # Constraint resolution
    critical_day_buffer: float = 200.0

    # Generator: critical day coverage window (days before the critical day)
    critical_min_days_before: int = 2
    critical_max_days_before: int = 5

    # Generator: crisis mode shift mix for critical days / mutation
    crisis_large_large: float = 0.4
    crisis_mixed_large: float = 0.8  # cumulative, remainder is medium+medium
    # Generator: crisis mode shift mix when filling work days
    crisis_fill_large_large: float = 0.3
    crisis_fill_mixed_large: float = 0.7
    crisis_min_work_days_ratio: float = 0.9

    # Generator: normal mode shift mix for critical days (cumulative)
    normal_critical_large: float = 0.6
    normal_critical_medium: float = 0.8
    # Generator: normal mode shift mix when filling work days (cumulative)
    normal_fill_small: float = 0.2
    normal_fill_medium: float = 0.7
    normal_double_shift: float = 0.3

    # Mutation: normal mode biases
    keep_well_spaced: float = 0.8
    add_adjacent: float = 0.2
    # Mutation: normal mode redraw mix (cumulative, remainder is uniform)
    mutate_off: float = 0.2
    mutate_medium: float = 0.5
    mutate_medium_medium: float = 0.7
    mutate_large: float = 0.85

    # Normal strategy weights
    normal_violation_weight: float = 5000.0
    normal_balance_weight: float = 100.0
    normal_overshoot_factor: float = 2.0
    normal_work_day_weight: float = 30.0
    normal_consecutive_weight: float = 75.0
    normal_gap_spread_weight: float = 50.0
    normal_min_balance_weight: float = 100.0

    # Crisis strategy weights
    crisis_violation_weight: float = 10000.0
    crisis_below_target_weight: float = 1000.0
    crisis_above_target_weight: float = 500.0
    crisis_earnings_shortfall_weight: float = 100.0
    crisis_work_day_deficit_weight: float = 1000.0
    crisis_min_balance_weight: float = 200.0

    # Fixed-balance constraint penalty multipliers
    crisis_constraint_multiplier: float = 0.01
    normal_constraint_multiplier: float = 10000.0
    constraint_tolerance: float = 0.01


# Alternative config for quick previews
FAST_CONFIG = GeneticConfig(
    min_elite_size=10,
    progress_interval=25,
    min_generations_before_termination=100,
    max_generations_without_improvement=50,
)

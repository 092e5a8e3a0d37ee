"""Exceptions raised by the shift planner."""


class ShiftPlannerError(Exception):
    """Base class for all shift planner errors."""


class InvalidConfigurationError(ShiftPlannerError, ValueError):
    """Raised when an optimization config cannot be run."""


class InvalidShiftLabelError(ShiftPlannerError, ValueError):
    """Raised when a shift label does not name known shifts."""


class InvalidEditError(ShiftPlannerError, ValueError):
    """Raised when a ledger edit carries a value that cannot be applied."""


class OptimizationCancelled(ShiftPlannerError):
    """Raised when a run is cancelled through its RunControl.

    Attributes:
        generation: Generation at which the cancellation was observed
        partial_result: Best result found before cancelling (may be None
            if cancellation happened before the first generation)
    """

    def __init__(self, generation: int, partial_result=None):
        super().__init__(f"Optimization cancelled at generation {generation}")
        self.generation = generation
        self.partial_result = partial_result

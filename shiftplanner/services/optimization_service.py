"""Service for optimization run management."""

import logging
import threading
import uuid
from typing import Dict, Optional

from ..config import Config
from ..exceptions import OptimizationCancelled
from ..genetic import GeneticConfig, GeneticOptimizer, RunControl
from ..logger import JSONProgressLogger
from ..models.optimization import OptimizationProgress, OptimizationResult
from ..schemas.optimization_schemas import OptimizeRequest

logger = logging.getLogger(__name__)


class OptimizationService:
    """Service for managing optimization runs.

    Holds at most one background run at a time; start, pause, resume and
    cancel all go through this service.
    """

    def __init__(self, config: Optional[Config] = None):
        """Initialize optimization service."""
        self.config = config or Config()
        self._lock = threading.Lock()
        self.status = "not_started"
        self.run_id: Optional[str] = None
        self.control: Optional[RunControl] = None
        self.optimizer: Optional[GeneticOptimizer] = None
        self.latest_progress: Optional[OptimizationProgress] = None
        self.result: Optional[OptimizationResult] = None
        self.error: Optional[str] = None

    def build_optimizer(self, request: OptimizeRequest) -> GeneticOptimizer:
        """
        Create an optimizer for a request, applying service defaults.

        Args:
            request: Optimization request

        Returns:
            Configured GeneticOptimizer

        Raises:
            InvalidConfigurationError: If the request cannot be optimized
        """
        run_config = request.config
        defaults = {}
        if "population_size" not in run_config.model_fields_set:
            defaults["population_size"] = self.config.DEFAULT_POPULATION_SIZE
        if "generations" not in run_config.model_fields_set:
            defaults["generations"] = self.config.DEFAULT_GENERATIONS
        if run_config.random_seed is None and self.config.RANDOM_SEED is not None:
            defaults["random_seed"] = self.config.RANDOM_SEED
        if defaults:
            run_config = run_config.model_copy(update=defaults)

        ga_config = GeneticConfig(progress_interval=self.config.PROGRESS_INTERVAL)
        return GeneticOptimizer(
            run_config,
            request.expenses,
            request.deposits,
            request.shift_types,
            ga_config,
        )

    def optimize(self, request: OptimizeRequest) -> OptimizationResult:
        """Run an optimization synchronously and return its result."""
        optimizer = self.build_optimizer(request)
        return optimizer.optimize()

    def start_run(self, request: OptimizeRequest) -> str:
        """
        Prepare a background run (execution happens in run_optimization_task).

        Args:
            request: Optimization request

        Returns:
            Run id

        Raises:
            ValueError: If a run is already in progress or the request is invalid
        """
        with self._lock:
            if self.status in ("running", "paused"):
                raise ValueError("Optimization already running")

            run_id = uuid.uuid4().hex
            self.optimizer = self.build_optimizer(request)
            self.run_id = run_id
            self.control = RunControl()
            self.status = "running"
            self.latest_progress = None
            self.result = None
            self.error = None

        logger.info(f"Optimization run {run_id} prepared")
        return run_id

    def run_optimization_task(self) -> None:
        """Background task executing the prepared run."""
        with self._lock:
            optimizer = self.optimizer
            control = self.control
            run_id = self.run_id
            self.optimizer = None
        if optimizer is None or control is None:
            raise ValueError("No optimization run prepared")

        progress_log = None

        def update_progress(progress: OptimizationProgress) -> None:
            """Callback to record progress during the run."""
            with self._lock:
                if self.run_id == run_id:
                    self.latest_progress = progress
            logger.info(
                f"Run {run_id} gen {progress.generation}: fitness={progress.best_fitness:.2f}, "
                f"work_days={progress.work_days}, balance={progress.balance:.2f}, "
                f"violations={progress.violations}"
            )
            if progress_log is not None:
                progress_log.log_progress(run_id, progress)

        try:
            if self.config.PROGRESS_LOG_FILE:
                progress_log = JSONProgressLogger(self.config.PROGRESS_LOG_FILE)

            logger.info(f"Starting optimization run {run_id}")
            result = optimizer.optimize(progress_callback=update_progress, control=control)
            if progress_log is not None:
                progress_log.log_result(run_id, result)
            self._finish(run_id, "completed", result=result)
            logger.info(
                f"Run {run_id} completed: {len(result.work_days)} work days, "
                f"final balance {result.final_balance:.2f}, {result.computation_time}"
            )
        except OptimizationCancelled as e:
            self._finish(run_id, "cancelled", result=e.partial_result)
            logger.info(f"Run {run_id} cancelled at generation {e.generation}")
        except Exception as e:
            logger.error(f"Error in optimization run {run_id}: {e}")
            self._finish(run_id, "error", error=str(e))
        finally:
            if progress_log is not None:
                progress_log.close()

    def _finish(
        self,
        run_id: str,
        status: str,
        result: Optional[OptimizationResult] = None,
        error: Optional[str] = None,
    ) -> None:
        # A newer run owns the state once run_id has moved on
        with self._lock:
            if self.run_id != run_id:
                return
            self.status = status
            self.result = result
            self.error = error

    def _require_active(self) -> RunControl:
        if self.status not in ("running", "paused") or self.control is None:
            raise ValueError("No optimization running")
        return self.control

    def pause(self) -> Dict:
        with self._lock:
            control = self._require_active()
            control.pause()
            self.status = "paused"
        return self.get_status()

    def resume(self) -> Dict:
        with self._lock:
            control = self._require_active()
            control.resume()
            self.status = "running"
        return self.get_status()

    def cancel(self) -> Dict:
        """Request cancellation; the run stops at its next generation."""
        with self._lock:
            control = self._require_active()
            control.cancel()
        logger.info(f"Cancellation requested for run {self.run_id}")
        return self.get_status()

    def get_status(self) -> Dict:
        """
        Get current run status.

        Returns:
            Status dictionary with the latest progress event
        """
        with self._lock:
            return {
                "status": self.status,
                "run_id": self.run_id,
                "progress": self.latest_progress,
                "error": self.error,
            }

    def get_result(self) -> Optional[OptimizationResult]:
        with self._lock:
            return self.result

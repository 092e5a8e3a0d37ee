"""Logging and progress reporting module."""

import json
import logging
import logging.handlers
from datetime import datetime
from pathlib import Path
from typing import Optional

from .models.optimization import OptimizationProgress, OptimizationResult


def configure_logging(level: str = "INFO", log_file: Optional[str] = None) -> None:
    """
    Configure structured logging.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        log_file: Path to log file (console only when None)
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    # Create formatter
    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    # Console handler
    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.addHandler(console_handler)

    # File handler
    if log_file:
        file_handler = logging.handlers.RotatingFileHandler(
            log_file, maxBytes=10 * 1024 * 1024, backupCount=5
        )
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)


class JSONProgressLogger:
    """JSON-lines log of optimization progress for machine parsing."""

    def __init__(self, log_file: str = "optimization.jsonl"):
        """
        Initialize JSON logger.

        Args:
            log_file: Path to JSON lines file (appended to)
        """
        self.log_file = Path(log_file)
        self.log_file.parent.mkdir(parents=True, exist_ok=True)
        self.file_handle = open(self.log_file, "a")

    def _write(self, entry: dict) -> None:
        entry["timestamp"] = datetime.now().isoformat()
        json.dump(entry, self.file_handle)
        self.file_handle.write("\n")
        self.file_handle.flush()

    def log_progress(self, run_id: str, progress: OptimizationProgress) -> None:
        """Append one progress event."""
        self._write({"run_id": run_id, "event": "progress", **progress.model_dump()})

    def log_result(self, run_id: str, result: OptimizationResult) -> None:
        """Append the summary of a finished run (without the ledger)."""
        summary = result.model_dump(exclude={"formatted_schedule"})
        self._write({"run_id": run_id, "event": "result", **summary})

    def close(self) -> None:
        """Close log file."""
        self.file_handle.close()

"""Service layer for optimization runs."""

from .optimization_service import OptimizationService
from .singleton import get_optimization_service

__all__ = ["OptimizationService", "get_optimization_service"]

"""Singleton pattern for shared service instances."""

from .optimization_service import OptimizationService

# Global service instance (singleton pattern)
_optimization_service: OptimizationService = None


def get_optimization_service() -> OptimizationService:
    """
    Get or create the singleton optimization service instance.

    Returns:
        OptimizationService instance
    """
    global _optimization_service
    if _optimization_service is None:
        _optimization_service = OptimizationService()
    return _optimization_service

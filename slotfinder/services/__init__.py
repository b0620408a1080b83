"""
Service layer - Orchestration between adapters and the domain.
"""

from .availability import AvailabilityService

__all__ = ["AvailabilityService"]

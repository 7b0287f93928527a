"""
Context Use Cases

Board resolution and plan usage.
"""

from .dtos import CapsResponse, ContextResponse, UsageCounters, UsageResponse
from .get_usage_use_case import GetUsageUseCase
from .resolve_context_use_case import ResolveContextUseCase

__all__ = [
    "CapsResponse",
    "ContextResponse",
    "UsageCounters",
    "UsageResponse",
    "GetUsageUseCase",
    "ResolveContextUseCase",
]

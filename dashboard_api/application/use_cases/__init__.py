"""Application use cases."""

from .build_dashboard import (
    DashboardRequest,
    DashboardResult,
    DashboardUseCase,
)

__all__ = [
    "DashboardRequest",
    "DashboardResult",
    "DashboardUseCase",
]

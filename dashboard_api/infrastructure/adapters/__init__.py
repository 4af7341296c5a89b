"""Infrastructure adapters."""

from .store_adapter import HostedStoreAdapter

__all__ = [
    "HostedStoreAdapter",
]

"""Application ports."""

from .score_store import ScoreStorePort

__all__ = [
    "ScoreStorePort",
]

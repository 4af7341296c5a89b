"""Bowling League Dashboard API.

Read-only HTTP surface over the ``bowling_stats`` engine, laid out in
hexagonal style.

Layers:
- application: Use cases and port interfaces
- infrastructure: Adapters for the hosted score store
- api: REST endpoints and payload transformers
"""

__version__ = "1.0.0"

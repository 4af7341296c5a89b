"""Port (interface) for the raw result store."""

from abc import ABC, abstractmethod
from typing import List

from bowling_stats.ingest import RawGameResult


class ScoreStorePort(ABC):
    """Port for fetching a snapshot of raw game rows."""

    @abstractmethod
    def fetch_results(
        self,
        date_from: str | None = None,
        date_to: str | None = None,
    ) -> List[RawGameResult]:
        """Fetch every game result in the date range.

        Args:
            date_from: Earliest session date (ISO 8601), inclusive
            date_to: Latest session date (ISO 8601), inclusive

        Returns:
            Validated raw game results

        Raises:
            StoreError: When the store cannot be read
        """
        ...

    @property
    def configured(self) -> bool:
        """Whether the port has what it needs to reach the store."""
        return True

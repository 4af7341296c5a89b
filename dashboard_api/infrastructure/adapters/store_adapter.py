"""Adapter wrapping the hosted score store client."""

from typing import List

from bowling_stats.config import StoreConfig, store_config_from_env
from bowling_stats.ingest import RawGameResult, fetch_raw_results
from bowling_stats.store_client import ScoreStoreClient, StoreError

from ...application.ports.score_store import ScoreStorePort


class HostedStoreAdapter(ScoreStorePort):
    """Adapter for reading game results from the hosted PostgREST store."""

    def __init__(self, config: StoreConfig | None = None):
        """Initialize with store settings.

        Args:
            config: Store URL and key. If None, will try to read the environment.
        """
        self._config = config or store_config_from_env()
        self._client = ScoreStoreClient(self._config) if self._config else None

    @property
    def configured(self) -> bool:
        return self._client is not None

    def fetch_results(
        self,
        date_from: str | None = None,
        date_to: str | None = None,
    ) -> List[RawGameResult]:
        if self._client is None:
            raise StoreError("BOWLING_STORE_URL / BOWLING_STORE_KEY not configured")
        return fetch_raw_results(self._client, date_from=date_from, date_to=date_to)

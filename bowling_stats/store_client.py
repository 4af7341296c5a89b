from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import requests

from .config import DEFAULT_PAGE_SIZE, StoreConfig

logger = logging.getLogger(__name__)

GAME_RESULTS_SELECT = (
    "session_id,member_id,game_number,score,strikes,spares,"
    "members!inner(id,name),"
    "game_sessions!inner(id,date,lane_number,session_name)"
)


class StoreError(RuntimeError):
    """The hosted score store could not be read."""


@dataclass
class ScoreStoreClient:
    config: StoreConfig
    page_size: int = DEFAULT_PAGE_SIZE

    def __post_init__(self) -> None:
        self.session = requests.Session()
        self.session.headers.update(
            {
                "apikey": self.config.api_key,
                "authorization": f"Bearer {self.config.api_key}",
                "accept": "application/json",
            }
        )

    def _get(
        self,
        path: str,
        params: List[tuple],
        headers: Dict[str, str],
        retries: int = 3,
        backoff_s: float = 0.6,
    ) -> List[Dict[str, Any]]:
        url = f"{self.config.base_url}/rest/v1/{path}"
        last_err: Optional[Exception] = None
        for attempt in range(retries):
            try:
                resp = self.session.get(
                    url, params=params, headers=headers, timeout=self.config.timeout_s
                )
                if resp.status_code in (429, 500, 502, 503, 504):
                    last_err = StoreError(f"HTTP {resp.status_code} from {url}")
                    time.sleep(backoff_s * (attempt + 1))
                    continue
                resp.raise_for_status()
                body = resp.json()
                if not isinstance(body, list):
                    raise StoreError("Unexpected response shape: " + json.dumps(body)[:500])
                return body
            except StoreError:
                raise
            except (requests.RequestException, ValueError) as exc:
                last_err = exc
                time.sleep(backoff_s * (attempt + 1))

        raise StoreError(f"Failed after {retries} attempts. Last error: {last_err}")

    def fetch_game_rows(
        self,
        date_from: Optional[str] = None,
        date_to: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """
        Read every game_results row with its member and session embedded.

        Pages through the table with Range headers until a short page comes back.
        """
        params: List[tuple] = [("select", GAME_RESULTS_SELECT)]
        if date_from:
            params.append(("game_sessions.date", f"gte.{date_from}"))
        if date_to:
            params.append(("game_sessions.date", f"lte.{date_to}"))

        rows: List[Dict[str, Any]] = []
        offset = 0
        while True:
            headers = {
                "range-unit": "items",
                "range": f"{offset}-{offset + self.page_size - 1}",
            }
            page = self._get("game_results", params, headers)
            rows.extend(page)
            if len(page) < self.page_size:
                break
            offset += self.page_size
        logger.info("Read %d game rows from store", len(rows))
        return rows

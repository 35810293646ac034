"""HTTP client for the item availability service."""

from typing import Any

import requests
from loguru import logger

from shelf_browse import config
from shelf_browse.core.importer.json_reader import parse_holdings
from shelf_browse.exceptions import StoreError
from shelf_browse.models.catalog import HoldingsSnapshot


class HttpHoldingsClient:
    """Fetches holdings snapshots from ``GET {base_url}/items/{doc_id}``."""

    def __init__(self, base_url: str, *, timeout: float = config.HOLDINGS_TIMEOUT) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.sess = requests.Session()
        logger.debug("Holdings service ready: {} (timeout {}s)", self.base_url, timeout)

    def get_holdings(self, doc_id: str) -> HoldingsSnapshot:
        """Return the holdings snapshot of a document.

        A 404 means the service has no physical holdings for the item.
        """
        url = f"{self.base_url}/items/{doc_id}"
        logger.debug("Requesting holdings: {}", url)
        try:
            r = self.sess.get(url, timeout=self.timeout)
            if r.status_code == 404:
                return HoldingsSnapshot.empty(doc_id)
            r.raise_for_status()
            data: Any = r.json()
        except (requests.RequestException, ValueError) as e:
            msg = f"Holdings request for {doc_id!r} failed: {e}"
            raise StoreError(msg) from e

        if not isinstance(data, dict):
            msg = f"Holdings response for {doc_id!r} is not an object"
            raise StoreError(msg)
        try:
            return parse_holdings(doc_id, data)
        except (TypeError, ValueError, AttributeError) as e:
            msg = f"Malformed holdings response for {doc_id!r}: {e}"
            raise StoreError(msg) from e

"""
Price Source Client
CoinGecko REST wrapper for the ticker catalog and batched spot prices.

Usage:
    from services import get_price_client

    client = get_price_client()
    catalog = client.fetch_catalog()                  # [{"id", "symbol", "name"}, ...]
    prices = client.fetch_prices(["ripple", "near"])  # {"ripple": 0.62, ...}
"""

from typing import Any, Dict, List, Optional

import requests

from core import get_logger, get_settings

logger = get_logger(__name__)


class PriceSourceClient:
    """Upstream failures are logged and surface as None / empty results."""

    def __init__(
        self,
        base_url: str = "https://api.coingecko.com/api/v3",
        vs_currency: str = "usd",
        api_key: Optional[str] = None,
        timeout: float = 10,
        session: Optional[requests.Session] = None
    ):
        self.base_url = base_url.rstrip('/')
        self.vs_currency = vs_currency
        self.timeout = timeout
        self.session = session or requests.Session()
        if api_key:
            self.session.headers["x-cg-demo-api-key"] = api_key

    def _get(self, endpoint: str, params: dict = None) -> Optional[Any]:
        url = f"{self.base_url}{endpoint}"
        try:
            resp = self.session.get(url, params=params, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logger.error("Price source request to %s failed: %s", endpoint, e)
            return None

        if not resp.ok:
            logger.error("Price source %s returned %s", endpoint, resp.status_code)
            return None

        try:
            return resp.json()
        except ValueError:
            logger.error("Price source %s returned invalid JSON", endpoint)
            return None

    def fetch_catalog(self) -> Optional[List[Dict[str, Any]]]:
        """Full ticker catalog, or None when the fetch fails."""
        data = self._get("/coins/list")
        if not isinstance(data, list):
            return None
        return [
            entry for entry in data
            if isinstance(entry, dict)
            and isinstance(entry.get("id"), str)
            and isinstance(entry.get("symbol"), str)
        ]

    def fetch_prices(self, ids: List[str]) -> Dict[str, float]:
        """One request for all ids; ids without a numeric price are omitted."""
        ids = [i for i in dict.fromkeys(ids) if i]
        if not ids:
            return {}

        data = self._get("/simple/price", {
            "ids": ",".join(ids),
            "vs_currencies": self.vs_currency
        })
        if not isinstance(data, dict):
            return {}

        prices = {}
        for source_id in ids:
            quote = data.get(source_id)
            if not isinstance(quote, dict):
                continue
            value = quote.get(self.vs_currency)
            if isinstance(value, (int, float)) and not isinstance(value, bool):
                prices[source_id] = float(value)
        return prices


_price_client: Optional[PriceSourceClient] = None


def get_price_client() -> PriceSourceClient:
    global _price_client
    if _price_client is None:
        settings = get_settings()
        _price_client = PriceSourceClient(
            base_url=settings.price_api_url,
            vs_currency=settings.vs_currency,
            api_key=settings.price_api_key,
            timeout=settings.request_timeout_sec
        )
    return _price_client

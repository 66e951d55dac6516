"""
Symbol Resolver
Maps human tickers ("XRP") to price-source ids ("ripple").

Resolution order:
    1. static overrides + memoized earlier resolutions
    2. the price source's ticker catalog, cached for catalog_ttl_sec

When several catalog entries share a ticker, the entry whose id equals the
lowercase ticker wins; otherwise the first match in catalog order.
"""

from datetime import datetime, timedelta
from typing import Any, Callable, Dict, List, Optional

from core import get_logger, get_settings

logger = get_logger(__name__)

STATIC_OVERRIDES = {
    "XRP": "ripple",
    "HBAR": "hedera-hashgraph",
    "XLM": "stellar",
    "FET": "fetch-ai",
    "NEAR": "near",
    "RNDR": "render-token",
    "ONDO": "ondo-finance",
    "AKT": "akash-network",
}


class SymbolResolver:
    def __init__(
        self,
        catalog_source: Any,
        overrides: Dict[str, str] = None,
        catalog_ttl_sec: float = 6 * 60 * 60,
        catalog_retry_sec: float = 60,
        clock: Callable[[], datetime] = datetime.now
    ):
        self._catalog_source = catalog_source
        self._overrides: Dict[str, str] = dict(STATIC_OVERRIDES if overrides is None else overrides)
        self._catalog_ttl = timedelta(seconds=catalog_ttl_sec)
        self._catalog_retry = timedelta(seconds=catalog_retry_sec)
        self._clock = clock
        self._catalog: Optional[List[Dict[str, Any]]] = None
        self._catalog_loaded_at: Optional[datetime] = None
        self._catalog_attempted_at: Optional[datetime] = None
        self._stats = {
            "catalog_refreshes": 0,
            "catalog_failures": 0,
            "misses": 0
        }

    @property
    def overrides(self) -> Dict[str, str]:
        return dict(self._overrides)

    def resolve(self, symbol: str) -> Optional[str]:
        symbol = (symbol or "").strip().upper()
        if not symbol:
            return None

        cached = self._overrides.get(symbol)
        if cached:
            return cached

        self._ensure_catalog()
        source_id = self._pick(symbol)
        if source_id is None:
            self._stats["misses"] += 1
            logger.warning("No price-source id for %s", symbol)
            return None

        self._overrides[symbol] = source_id
        return source_id

    def resolve_batch(self, symbols: List[str]) -> Dict[str, Optional[str]]:
        return {symbol: self.resolve(symbol) for symbol in symbols}

    def _pick(self, symbol: str) -> Optional[str]:
        matches = [
            entry["id"] for entry in (self._catalog or [])
            if entry.get("symbol", "").upper() == symbol
        ]
        if not matches:
            return None

        preferred = symbol.lower()
        if preferred in matches:
            return preferred
        return matches[0]

    def _catalog_fresh(self) -> bool:
        if not self._catalog or self._catalog_loaded_at is None:
            return False
        return self._clock() - self._catalog_loaded_at < self._catalog_ttl

    def _ensure_catalog(self) -> None:
        if self._catalog_fresh():
            return

        # at most one attempt per retry window, however many symbols miss
        now = self._clock()
        if self._catalog_attempted_at is not None and now - self._catalog_attempted_at < self._catalog_retry:
            return
        self._catalog_attempted_at = now

        try:
            catalog = self._catalog_source.fetch_catalog()
        except Exception:
            catalog = None
            logger.exception("Catalog refresh raised")

        if not catalog:
            self._stats["catalog_failures"] += 1
            logger.error("Catalog refresh failed; keeping %s cached entries",
                         len(self._catalog or []))
            return

        self._catalog = catalog
        self._catalog_loaded_at = self._clock()
        self._stats["catalog_refreshes"] += 1
        logger.info("Loaded price catalog with %d entries", len(catalog))

    def stats(self) -> Dict[str, Any]:
        return {
            **self._stats,
            "resolved": len(self._overrides),
            "catalog_size": len(self._catalog or []),
            "catalog_loaded_at": self._catalog_loaded_at.isoformat() if self._catalog_loaded_at else None
        }


_resolver: Optional[SymbolResolver] = None


def get_symbol_resolver() -> SymbolResolver:
    global _resolver
    if _resolver is None:
        from .price_source import get_price_client

        _resolver = SymbolResolver(
            catalog_source=get_price_client(),
            catalog_ttl_sec=get_settings().catalog_ttl_sec
        )
    return _resolver

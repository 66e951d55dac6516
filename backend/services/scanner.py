"""
Alert Scanner
Periodic scan cycle: configs -> symbols -> prices -> tiers -> pushes.

Usage:
    from services import get_scanner

    scanner = get_scanner()
    scanner.start()                  # background loop on the running event loop
    summary = await scanner.run_cycle()
    await scanner.stop()
"""

import asyncio
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from alerts import AlertEngine, UserAlertConfig, evaluate, get_alert_engine
from core import get_logger, get_settings
from db import ConfigStore, get_config_store

from .symbols import SymbolResolver, get_symbol_resolver
from .price_source import get_price_client

logger = get_logger(__name__)


@dataclass
class CycleSummary:
    """Outcome of one scan cycle"""
    started_at: datetime = field(default_factory=datetime.now)
    users: int = 0
    symbols: int = 0
    priced: int = 0
    qualifying: int = 0
    dispatched: int = 0
    suppressed: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "started_at": self.started_at.isoformat(),
            "users": self.users,
            "symbols": self.symbols,
            "priced": self.priced,
            "qualifying": self.qualifying,
            "dispatched": self.dispatched,
            "suppressed": self.suppressed
        }


def collect_symbols(configs: List[UserAlertConfig]) -> List[str]:
    """Distinct non-empty symbols across all users, first-seen order."""
    seen = {}
    for cfg in configs:
        for symbol in cfg.symbols():
            seen.setdefault(symbol, None)
    return list(seen)


class AlertScanner:
    def __init__(
        self,
        store: ConfigStore,
        resolver: SymbolResolver,
        price_client: Any,
        engine: AlertEngine,
        interval_sec: float = 300,
        startup_delay_sec: float = 30
    ):
        self._store = store
        self._resolver = resolver
        self._price_client = price_client
        self._engine = engine
        self._interval_sec = interval_sec
        self._startup_delay_sec = startup_delay_sec
        self._task: Optional[asyncio.Task] = None
        self._cycle_lock = asyncio.Lock()
        self._last_summary: Optional[CycleSummary] = None
        self._stats = {
            "cycles": 0,
            "cycle_errors": 0,
            "last_error": None
        }

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def fetch_prices(self, symbols: List[str]) -> Dict[str, float]:
        """Resolve tickers and fetch every price in one upstream request."""
        resolved = self._resolver.resolve_batch(symbols)
        by_id: Dict[str, List[str]] = {}
        for symbol, source_id in resolved.items():
            if source_id:
                by_id.setdefault(source_id, []).append(symbol)

        if not by_id:
            return {}

        quotes = self._price_client.fetch_prices(list(by_id))
        prices = {}
        for source_id, price in quotes.items():
            for symbol in by_id.get(source_id, []):
                prices[symbol] = price
        return prices

    async def run_cycle(self) -> CycleSummary:
        """One full scan; a manual run waits for an in-flight background cycle."""
        async with self._cycle_lock:
            return await self._scan()

    async def _scan(self) -> CycleSummary:
        summary = CycleSummary()
        configs = self._store.snapshot()
        summary.users = len(configs)

        symbols = collect_symbols(configs)
        summary.symbols = len(symbols)
        if not symbols:
            self._finish(summary)
            return summary

        prices = await asyncio.to_thread(self.fetch_prices, symbols)
        summary.priced = len(prices)

        alerts = evaluate(configs, prices)
        summary.qualifying = len(alerts)

        pending = []
        for alert in alerts:
            if self._engine.claim(alert):
                pending.append(asyncio.to_thread(self._engine.deliver, alert))
            else:
                summary.suppressed += 1
        summary.dispatched = len(pending)

        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

        self._finish(summary)
        return summary

    def _finish(self, summary: CycleSummary) -> None:
        self._stats["cycles"] += 1
        self._last_summary = summary
        logger.info(
            "Scan done: %d users, %d/%d symbols priced, %d qualifying, %d sent, %d suppressed",
            summary.users, summary.priced, summary.symbols,
            summary.qualifying, summary.dispatched, summary.suppressed
        )

    async def run_cycle_safe(self) -> Optional[CycleSummary]:
        """Scan boundary: nothing raised inside a cycle escapes."""
        try:
            return await self.run_cycle()
        except Exception as e:
            self._stats["cycle_errors"] += 1
            self._stats["last_error"] = str(e)
            logger.exception("Scan cycle failed")
            return None

    async def _loop(self) -> None:
        await asyncio.sleep(self._startup_delay_sec)
        while True:
            await self.run_cycle_safe()
            await asyncio.sleep(self._interval_sec)

    def start(self) -> Dict[str, Any]:
        if self.is_running:
            return {"status": "already_running"}

        self._task = asyncio.get_running_loop().create_task(self._loop())
        logger.info("Scanner started: first run in %ss, then every %ss",
                    self._startup_delay_sec, self._interval_sec)
        return {"status": "started"}

    async def stop(self) -> Dict[str, Any]:
        if not self.is_running:
            return {"status": "not_running"}

        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Scanner stopped")
        return {"status": "stopped", "cycles": self._stats["cycles"]}

    def stats(self) -> Dict[str, Any]:
        return {
            **self._stats,
            "is_running": self.is_running,
            "interval_sec": self._interval_sec,
            "last_cycle": self._last_summary.to_dict() if self._last_summary else None,
            "resolver": self._resolver.stats(),
            "dispatch": self._engine.stats()
        }


_scanner: Optional[AlertScanner] = None


def get_scanner() -> AlertScanner:
    global _scanner
    if _scanner is None:
        settings = get_settings()
        _scanner = AlertScanner(
            store=get_config_store(),
            resolver=get_symbol_resolver(),
            price_client=get_price_client(),
            engine=get_alert_engine(),
            interval_sec=settings.scan_interval_sec,
            startup_delay_sec=settings.startup_delay_sec
        )
    return _scanner

"""
Services
Outbound collaborators (price source, push notifier) and the scan loop.
"""

from .price_source import PriceSourceClient, get_price_client
from .symbols import SymbolResolver, STATIC_OVERRIDES, get_symbol_resolver
from .notifier import PushNotifier, get_notifier
from .scanner import AlertScanner, CycleSummary, collect_symbols, get_scanner

__all__ = [
    "PriceSourceClient",
    "get_price_client",
    "SymbolResolver",
    "STATIC_OVERRIDES",
    "get_symbol_resolver",
    "PushNotifier",
    "get_notifier",
    "AlertScanner",
    "CycleSummary",
    "collect_symbols",
    "get_scanner",
]

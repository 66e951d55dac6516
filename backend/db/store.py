"""
Config Store
In-memory per-user tier configuration.

Two payload shapes are accepted and normalized into one representation:

    canonical: {"userId", "currency", "assets": [{"symbol", "tier1", "tier2",
                "tier3", "thresholdPct"}]}  or with "tiersUSD": [..]
    legacy:    assets carrying "alertWithinPct" instead of "thresholdPct"

Each submission replaces the user's previous config; nothing is merged.
"""

import math
from typing import Any, Dict, List, Optional

from alerts.models import AssetTierConfig, UserAlertConfig, DEFAULT_THRESHOLD_PCT
from core import get_logger

logger = get_logger(__name__)

NAMED_TIER_FIELDS = ("tier1", "tier2", "tier3")


class ConfigValidationError(ValueError):
    """Raised when a config submission is malformed."""


def _to_number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def normalize_tiers(raw: Dict[str, Any]) -> List[float]:
    """Explicit tiersUSD wins when non-empty; otherwise tier1..tier3."""
    explicit = raw.get("tiersUSD")
    if isinstance(explicit, list) and explicit:
        candidates = explicit
    else:
        candidates = [raw.get(name) for name in NAMED_TIER_FIELDS]

    tiers = []
    for value in candidates:
        number = _to_number(value)
        if number is not None and number > 0:
            tiers.append(number)
    return tiers


def normalize_threshold(raw: Dict[str, Any]) -> float:
    for name in ("thresholdPct", "alertWithinPct"):
        number = _to_number(raw.get(name))
        if number is not None and number > 0:
            return number
    return DEFAULT_THRESHOLD_PCT


def normalize_asset(raw: Any) -> AssetTierConfig:
    if not isinstance(raw, dict):
        raise ConfigValidationError("Each asset must be an object")

    symbol = raw.get("symbol")
    symbol = symbol.strip().upper() if isinstance(symbol, str) else ""

    return AssetTierConfig(
        symbol=symbol,
        threshold_pct=normalize_threshold(raw),
        tiers_usd=normalize_tiers(raw),
    )


def normalize_config(payload: Any) -> UserAlertConfig:
    """Validate a submission and build its normalized form. Raises ConfigValidationError."""
    if not isinstance(payload, dict):
        raise ConfigValidationError("Invalid payload: expected a JSON object")

    user_id = payload.get("userId")
    if not isinstance(user_id, str) or not user_id.strip():
        raise ConfigValidationError("Invalid payload: userId is required")

    assets = payload.get("assets")
    if not isinstance(assets, list):
        raise ConfigValidationError("Invalid payload: assets must be an array")

    currency = payload.get("currency")
    return UserAlertConfig(
        user_id=user_id,
        currency=currency if isinstance(currency, str) and currency else "USD",
        assets=[normalize_asset(a) for a in assets],
    )


class ConfigStore:
    def __init__(self):
        self._configs: Dict[str, UserAlertConfig] = {}

    def set_config(self, payload: Any) -> UserAlertConfig:
        cfg = normalize_config(payload)
        self._configs[cfg.user_id] = cfg
        logger.info("Updated config for %s assets: %d", cfg.user_id, len(cfg.assets))
        return cfg

    def get_config(self, user_id: str) -> Optional[UserAlertConfig]:
        return self._configs.get(user_id)

    def snapshot(self) -> List[UserAlertConfig]:
        """Point-in-time copy of every stored config, taken at scan start."""
        return list(self._configs.values())

    def count(self) -> int:
        return len(self._configs)


_config_store: Optional[ConfigStore] = None


def get_config_store() -> ConfigStore:
    global _config_store
    if _config_store is None:
        _config_store = ConfigStore()
    return _config_store

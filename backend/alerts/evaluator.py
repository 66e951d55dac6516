import math
from typing import Dict, Iterable, List, Optional

from .models import UserAlertConfig, QualifyingAlert, MIN_BAND_PCT


def _positive_finite(value) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value) and value > 0


def distance_pct(price: float, target: float) -> float:
    """Absolute distance of price from target, as a percent of target."""
    return abs(price - target) / target * 100


def proximity_band(threshold_pct: float) -> float:
    return max(MIN_BAND_PCT, threshold_pct)


def evaluate(
    configs: Iterable[UserAlertConfig],
    prices: Dict[str, float]
) -> List[QualifyingAlert]:
    """
    Find every (user, asset, tier) whose target is within its band.

    Pure: reads the configs and price snapshot, touches no throttle state.
    Assets without a positive finite price are skipped.
    """
    qualifying = []

    for cfg in configs:
        for asset in cfg.assets:
            price: Optional[float] = prices.get(asset.symbol)
            if not _positive_finite(price):
                continue

            band = proximity_band(asset.threshold_pct)

            for idx, target in enumerate(asset.tiers_usd):
                if not _positive_finite(target):
                    continue

                distance = distance_pct(price, target)
                if distance > band:
                    continue

                qualifying.append(QualifyingAlert(
                    user_id=cfg.user_id,
                    symbol=asset.symbol,
                    tier_index=idx,
                    price_usd=float(price),
                    target_usd=float(target),
                    distance_pct=distance,
                ))

    return qualifying

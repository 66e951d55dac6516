"""
Alert Models
Data structures for per-user tier configs and qualifying alerts.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Dict, Any, Tuple

DEFAULT_THRESHOLD_PCT = 5.0
MIN_BAND_PCT = 1.0

# (user_id, symbol, tier_index)
ThrottleKey = Tuple[str, str, int]


@dataclass
class AssetTierConfig:
    """
    One tracked asset within a user's config.

    Example:
        "Tell me when XRP gets within 5% of 0.5, 0.6 or 0.7"
    """
    symbol: str
    threshold_pct: float = DEFAULT_THRESHOLD_PCT
    tiers_usd: List[float] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "symbol": self.symbol,
            "thresholdPct": self.threshold_pct,
            "tiersUSD": list(self.tiers_usd),
        }


@dataclass
class UserAlertConfig:
    """
    Latest tier configuration submitted by a user.

    Replaced wholesale on every submission, never merged.
    """
    user_id: str
    currency: str = "USD"
    assets: List[AssetTierConfig] = field(default_factory=list)
    updated_at: datetime = field(default_factory=datetime.now)

    def symbols(self) -> List[str]:
        return [a.symbol for a in self.assets if a.symbol]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "userId": self.user_id,
            "currency": self.currency,
            "assets": [a.to_dict() for a in self.assets],
            "updatedAt": self.updated_at.isoformat(),
        }


@dataclass(frozen=True)
class QualifyingAlert:
    """A tier whose target is within the proximity band of the current price."""
    user_id: str
    symbol: str
    tier_index: int
    price_usd: float
    target_usd: float
    distance_pct: float

    @property
    def key(self) -> ThrottleKey:
        return (self.user_id, self.symbol, self.tier_index)

    @property
    def tier_number(self) -> int:
        return self.tier_index + 1

    @property
    def title(self) -> str:
        return f"Tier {self.tier_number} nearly hit for {self.symbol}"

    @property
    def body(self) -> str:
        return (
            f"Current: {self.price_usd:.4f} vs target {self.target_usd:.4f} "
            f"({self.distance_pct:.1f}% away)."
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "userId": self.user_id,
            "symbol": self.symbol,
            "tier": self.tier_number,
            "priceUSD": self.price_usd,
            "targetUSD": self.target_usd,
            "distancePct": round(self.distance_pct, 4),
        }

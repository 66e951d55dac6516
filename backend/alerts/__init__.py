"""
Alert System
Tier proximity evaluation and throttled push dispatch.

Structure:
    alerts/
    ├── models.py     → AssetTierConfig, UserAlertConfig, QualifyingAlert
    ├── evaluator.py  → evaluate (pure distance/band check)
    └── engine.py     → AlertEngine (cooldown gate + dispatch)

Usage:
    from alerts import evaluate, get_alert_engine

    alerts = evaluate(configs, {"XRP": 0.615})
    engine = get_alert_engine()
    for alert in alerts:
        engine.maybe_notify(alert)
"""

from .models import (
    AssetTierConfig,
    UserAlertConfig,
    QualifyingAlert,
    ThrottleKey,
    DEFAULT_THRESHOLD_PCT,
    MIN_BAND_PCT,
)

from .evaluator import (
    evaluate,
    distance_pct,
    proximity_band,
)

from .engine import (
    AlertEngine,
    get_alert_engine,
)

__all__ = [
    # Models
    "AssetTierConfig",
    "UserAlertConfig",
    "QualifyingAlert",
    "ThrottleKey",
    "DEFAULT_THRESHOLD_PCT",
    "MIN_BAND_PCT",
    # Evaluator
    "evaluate",
    "distance_pct",
    "proximity_band",
    # Engine
    "AlertEngine",
    "get_alert_engine",
]

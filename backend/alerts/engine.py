from datetime import datetime, timedelta
from typing import Dict, List, Optional, Callable, Any
from collections import deque

from core import get_logger, get_settings

from .models import QualifyingAlert, ThrottleKey

logger = get_logger(__name__)

Clock = Callable[[], datetime]


class AlertEngine:
    """
    Cooldown gate and dispatcher for qualifying tier alerts.

    A key's timestamp is written when a send is attempted, not when it
    succeeds, so a failing notifier cannot cause repeat sends inside the
    cooldown window.
    """

    def __init__(
        self,
        notifier: Any,
        cooldown_minutes: float = 30,
        history_size: int = 100,
        clock: Clock = datetime.now
    ):
        self._notifier = notifier
        self._cooldown_minutes = cooldown_minutes
        self._clock = clock
        self._last_notified: Dict[ThrottleKey, datetime] = {}
        self._history: deque = deque(maxlen=history_size)
        self._stats = {
            "claimed": 0,
            "suppressed": 0,
            "delivered": 0,
            "failed": 0,
            "start_time": clock()
        }

    def last_notified(self, key: ThrottleKey) -> Optional[datetime]:
        return self._last_notified.get(key)

    def should_throttle(self, key: ThrottleKey, cooldown_minutes: float = None) -> bool:
        """True while the key's last dispatch attempt is inside the cooldown."""
        if cooldown_minutes is None:
            cooldown_minutes = self._cooldown_minutes
        last = self._last_notified.get(key)
        if last is None:
            return False
        return self._clock() - last < timedelta(minutes=cooldown_minutes)

    def claim(self, alert: QualifyingAlert) -> bool:
        """Pass the gate and record the attempt; False if still cooling."""
        key = alert.key
        if self.should_throttle(key):
            self._stats["suppressed"] += 1
            logger.debug("Suppressed %s tier %d for %s (cooling)",
                         alert.symbol, alert.tier_number, alert.user_id)
            return False

        self._last_notified[key] = self._clock()
        self._stats["claimed"] += 1
        return True

    def deliver(self, alert: QualifyingAlert) -> bool:
        """Send the notification; failures are logged, never raised."""
        try:
            sent = bool(self._notifier.send(alert.user_id, alert.title, alert.body))
        except Exception:
            self._stats["failed"] += 1
            logger.exception("Push to %s failed for %s tier %d",
                             alert.user_id, alert.symbol, alert.tier_number)
            return False

        if sent:
            self._stats["delivered"] += 1
            self._history.append({**alert.to_dict(), "sentAt": self._clock().isoformat()})
        return sent

    def maybe_notify(self, alert: QualifyingAlert) -> bool:
        """Claim and deliver in one step. Returns whether a send was attempted."""
        if not self.claim(alert):
            return False
        self.deliver(alert)
        return True

    def get_history(self, limit: int = 50) -> List[Dict[str, Any]]:
        history = list(self._history)
        history.reverse()
        return history[:limit]

    def stats(self) -> Dict[str, Any]:
        uptime = (self._clock() - self._stats["start_time"]).total_seconds()
        return {
            **{k: v for k, v in self._stats.items() if k != "start_time"},
            "uptime_seconds": round(uptime, 2),
            "cooldown_minutes": self._cooldown_minutes,
            "throttle_keys": len(self._last_notified),
            "history_size": len(self._history)
        }


_alert_engine: Optional[AlertEngine] = None


def get_alert_engine() -> AlertEngine:
    global _alert_engine
    if _alert_engine is None:
        from services import get_notifier

        _alert_engine = AlertEngine(
            notifier=get_notifier(),
            cooldown_minutes=get_settings().cooldown_minutes
        )
    return _alert_engine

"""
Service Configuration
Environment-driven settings for the scanner, price source and notifier.

Usage:
    from core import get_settings

    settings = get_settings()
    settings.scan_interval_sec   # 300
"""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_optional(name: str) -> Optional[str]:
    raw = os.getenv(name, "").strip()
    return raw or None


@dataclass(frozen=True)
class Settings:
    """Process-wide settings, read once at startup."""
    port: int = 3000
    scan_interval_sec: float = 300
    startup_delay_sec: float = 30
    cooldown_minutes: float = 30
    catalog_ttl_sec: float = 6 * 60 * 60
    price_api_url: str = "https://api.coingecko.com/api/v3"
    price_api_key: Optional[str] = None
    vs_currency: str = "usd"
    onesignal_url: str = "https://onesignal.com/api/v1/notifications"
    onesignal_app_id: Optional[str] = None
    onesignal_api_key: Optional[str] = None
    request_timeout_sec: float = 10
    scanner_enabled: bool = True
    log_level: str = "INFO"

    @property
    def notifier_configured(self) -> bool:
        return bool(self.onesignal_app_id and self.onesignal_api_key)

    @classmethod
    def from_env(cls) -> "Settings":
        load_dotenv()
        return cls(
            port=int(os.getenv("PORT", "3000")),
            scan_interval_sec=float(os.getenv("SCAN_INTERVAL_SEC", "300")),
            startup_delay_sec=float(os.getenv("STARTUP_DELAY_SEC", "30")),
            cooldown_minutes=float(os.getenv("NOTIFY_COOLDOWN_MINUTES", "30")),
            catalog_ttl_sec=float(os.getenv("CATALOG_TTL_SEC", str(6 * 60 * 60))),
            price_api_url=os.getenv("PRICE_API_URL", cls.price_api_url).rstrip("/"),
            price_api_key=_env_optional("PRICE_API_KEY"),
            vs_currency=os.getenv("VS_CURRENCY", "usd").lower(),
            onesignal_url=os.getenv("ONESIGNAL_URL", cls.onesignal_url),
            onesignal_app_id=_env_optional("ONESIGNAL_APP_ID"),
            onesignal_api_key=_env_optional("ONESIGNAL_API_KEY"),
            request_timeout_sec=float(os.getenv("REQUEST_TIMEOUT_SEC", "10")),
            scanner_enabled=_env_bool("SCANNER_ENABLED", True),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings

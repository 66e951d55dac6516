"""
Tests for environment-driven settings.
"""

from core import Settings


class TestSettings:
    def test_defaults(self, monkeypatch):
        for name in ("PORT", "SCAN_INTERVAL_SEC", "STARTUP_DELAY_SEC", "CATALOG_TTL_SEC",
                     "NOTIFY_COOLDOWN_MINUTES",
                     "ONESIGNAL_APP_ID", "ONESIGNAL_API_KEY", "SCANNER_ENABLED"):
            monkeypatch.delenv(name, raising=False)
        monkeypatch.setattr("core.config.load_dotenv", lambda: None)

        settings = Settings.from_env()

        assert settings.port == 3000
        assert settings.scan_interval_sec == 300
        assert settings.startup_delay_sec == 30
        assert settings.cooldown_minutes == 30
        assert settings.catalog_ttl_sec == 6 * 60 * 60
        assert settings.scanner_enabled is True
        assert settings.notifier_configured is False

    def test_overrides(self, monkeypatch):
        monkeypatch.setattr("core.config.load_dotenv", lambda: None)
        monkeypatch.setenv("PORT", "8080")
        monkeypatch.setenv("NOTIFY_COOLDOWN_MINUTES", "5")
        monkeypatch.setenv("ONESIGNAL_APP_ID", "app")
        monkeypatch.setenv("ONESIGNAL_API_KEY", "key")
        monkeypatch.setenv("SCANNER_ENABLED", "false")
        monkeypatch.setenv("PRICE_API_URL", "https://prices.test/v3/")

        settings = Settings.from_env()

        assert settings.port == 8080
        assert settings.cooldown_minutes == 5
        assert settings.notifier_configured is True
        assert settings.scanner_enabled is False
        assert settings.price_api_url == "https://prices.test/v3"

    def test_blank_credentials_count_as_missing(self, monkeypatch):
        monkeypatch.setattr("core.config.load_dotenv", lambda: None)
        monkeypatch.setenv("ONESIGNAL_APP_ID", "  ")
        monkeypatch.setenv("ONESIGNAL_API_KEY", "key")

        assert Settings.from_env().notifier_configured is False

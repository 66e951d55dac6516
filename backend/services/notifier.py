"""
Push Notifier
OneSignal REST wrapper addressing users by external user id.

Without an app id and API key every send is a logged no-op.
"""

from typing import Optional

import requests

from core import get_logger, get_settings

logger = get_logger(__name__)


class PushNotifier:
    def __init__(
        self,
        app_id: Optional[str] = None,
        api_key: Optional[str] = None,
        url: str = "https://onesignal.com/api/v1/notifications",
        timeout: float = 10,
        session: Optional[requests.Session] = None
    ):
        self.app_id = app_id
        self.api_key = api_key
        self.url = url
        self.timeout = timeout
        self.session = session or requests.Session()

    @property
    def is_configured(self) -> bool:
        return bool(self.app_id and self.api_key)

    def send(self, user_id: str, title: str, body: str) -> bool:
        """
        Deliver one push. Returns True on an accepted request.

        Transport errors propagate to the caller.
        """
        if not self.is_configured:
            logger.warning("OneSignal not configured; skipping push.")
            return False

        payload = {
            "app_id": self.app_id,
            "include_external_user_ids": [user_id],
            "headings": {"en": title},
            "contents": {"en": body}
        }
        resp = self.session.post(
            self.url,
            json=payload,
            headers={
                "Content-Type": "application/json; charset=utf-8",
                "Authorization": f"Basic {self.api_key}"
            },
            timeout=self.timeout
        )

        if not resp.ok:
            logger.error("OneSignal push failed: %s %s", resp.status_code, resp.text)
            return False

        logger.info("Push sent to %s: %s", user_id, title)
        return True


_notifier: Optional[PushNotifier] = None


def get_notifier() -> PushNotifier:
    global _notifier
    if _notifier is None:
        settings = get_settings()
        _notifier = PushNotifier(
            app_id=settings.onesignal_app_id,
            api_key=settings.onesignal_api_key,
            url=settings.onesignal_url,
            timeout=settings.request_timeout_sec
        )
    return _notifier

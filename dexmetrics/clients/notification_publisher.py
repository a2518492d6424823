# dexmetrics/clients/notification_publisher.py

from typing import Any, Dict

import msgspec
import requests

from .interfaces import NotificationPublisher
from ..core.logging import LoggingMixin
from ..types.config import NotificationConfig


class HttpNotificationPublisher(NotificationPublisher, LoggingMixin):
    """Relays events to the socket server's HTTP emit endpoint"""

    def __init__(self, config: NotificationConfig, session: requests.Session = None):
        if not config.url:
            raise ValueError("NotificationConfig.url is required for HttpNotificationPublisher")
        self.url = config.url
        self.timeout = config.timeout
        self.session = session or requests.Session()

    def publish(self, channel: str, payload: Dict[str, Any]) -> None:
        body = msgspec.json.encode({"channel": channel, "payload": payload})
        resp = self.session.post(
            self.url,
            data=body,
            headers={"Content-Type": "application/json"},
            timeout=self.timeout,
        )
        resp.raise_for_status()
        self.log_debug("Notification published", channel=channel)


class NullNotificationPublisher(NotificationPublisher):
    """Used when no relay is configured; drops every event"""

    def publish(self, channel: str, payload: Dict[str, Any]) -> None:
        return None

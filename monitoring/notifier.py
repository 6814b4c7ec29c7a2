"""
monitoring/notifier.py - Slack incoming-webhook notification sink.

Delivery failures are logged and reported as False; they never propagate
into the monitoring cycle.
"""

import time
from typing import Optional

import httpx

from core.logging import get_logger

logger = get_logger(__name__)

NOTIFIER_TITLE = "🔗 Oasys Validator Monitor"
NOTIFIER_FOOTER = "Oasys Validator Monitor"

COLORS = ("good", "warning", "danger")


def build_payload(message: str, color: str) -> dict:
    """Slack attachment payload for one message."""
    return {
        "attachments": [
            {
                "color": color,
                "title": NOTIFIER_TITLE,
                "text": message,
                "ts": int(time.time()),
                "footer": NOTIFIER_FOOTER,
                "mrkdwn_in": ["text"],
            }
        ]
    }


class SlackNotifier:
    """Posts formatted messages to a Slack webhook."""

    def __init__(
        self,
        webhook_url: Optional[str],
        timeout_seconds: float = 10,
        client: httpx.Client | None = None,
    ):
        self.webhook_url = webhook_url
        self.timeout_seconds = timeout_seconds
        self._client = client
        self._owns_client = client is None

    @property
    def configured(self) -> bool:
        return bool(self.webhook_url)

    def _get_client(self) -> httpx.Client:
        if self._client is None:
            self._client = httpx.Client(timeout=httpx.Timeout(self.timeout_seconds))
        return self._client

    def close(self) -> None:
        if self._client is not None and self._owns_client:
            self._client.close()
        self._client = None

    def send(self, message: str, color: str = "good") -> bool:
        """
        Send message with a severity color.

        Returns:
            True if the webhook accepted the message
        """
        if not self.webhook_url:
            logger.warning("Slack webhook URL not configured; notification dropped")
            return False

        if color not in COLORS:
            color = "good"

        try:
            resp = self._get_client().post(self.webhook_url, json=build_payload(message, color))
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.error(
                "Error sending Slack notification",
                extra={"context": {"error": str(e)}},
            )
            return False

        if resp.status_code == 200:
            logger.info("Slack notification sent", extra={"context": {"color": color}})
            return True

        logger.error(
            "Failed to send Slack notification",
            extra={"context": {"status": resp.status_code, "body": resp.text[:200]}},
        )
        return False

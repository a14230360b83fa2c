"""
Outgoing e-mail delivery for notifications.

When ``settings.mail_relay_url`` is configured each message is POSTed as
JSON to that relay with ``httpx``; otherwise it is written to the
``cashbox_api.mail`` logger so development setups can follow what would
have been sent.  Relay failures are logged and reported back as
``False`` so the caller can still store the in-app notification.
"""

import logging
from typing import Optional

import httpx

from ..core.config import settings

mail_logger = logging.getLogger("cashbox_api.mail")
logger = logging.getLogger(__name__)


class Mailer:
    def __init__(self, relay_url: Optional[str] = None, sender: Optional[str] = None,
                 timeout: Optional[float] = None, client: Optional[httpx.Client] = None):
        self.relay_url = relay_url if relay_url is not None else settings.mail_relay_url
        self.sender = sender or settings.notification_sender
        self.timeout = timeout if timeout is not None else settings.mail_relay_timeout
        self._client = client

    def send(self, to: str, subject: str, body: str) -> bool:
        """Deliver one message.  Returns ``True`` when it was handed off."""
        if not self.relay_url:
            mail_logger.info("From: %s To: %s Subject: %s\n%s", self.sender, to, subject, body)
            return True

        payload = {"from": self.sender, "to": to, "subject": subject, "body": body}
        try:
            if self._client is not None:
                response = self._client.post(self.relay_url, json=payload, timeout=self.timeout)
            else:
                response = httpx.post(self.relay_url, json=payload, timeout=self.timeout)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.error("Mail relay rejected message to %s: %s", to, exc)
            return False
        logger.info("Mail to %s handed to relay", to)
        return True

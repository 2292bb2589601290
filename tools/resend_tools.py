"""Resend transactional e-mail client.

Calls the Resend REST API directly with requests; sends run in a worker
thread so the pipeline's event loop is not blocked.
"""
import asyncio
import logging
from typing import Any, Dict

import requests

from triage.exceptions import NotificationError

logger = logging.getLogger(__name__)

RESEND_BASE = "https://api.resend.com"


def resend_send_email(api_key: str, sender: str, to: str, subject: str, html: str) -> Dict[str, Any]:
    """Send one HTML e-mail via Resend.

    Args:
        api_key: Resend API key.
        sender: Verified sender address.
        to: Recipient address.
        subject: Subject line.
        html: Rendered HTML body.

    Returns:
        Dict with the Resend message 'id'.

    Raises:
        NotificationError: on transport errors or a non-2xx response.
    """
    try:
        resp = requests.post(
            f"{RESEND_BASE}/emails",
            headers={"Authorization": f"Bearer {api_key}"},
            json={"from": sender, "to": [to], "subject": subject, "html": html},
            timeout=10,
        )
        resp.raise_for_status()
        return resp.json()
    except requests.RequestException as exc:
        raise NotificationError(to, str(exc)) from exc


class ResendMailer:
    def __init__(self, api_key: str, from_email: str):
        self.api_key = api_key
        self.from_email = from_email

    async def send(self, to: str, subject: str, html: str) -> str:
        """Send an e-mail and return the provider message id."""
        logger.info("Sending email via Resend to %s", to)
        data = await asyncio.to_thread(
            resend_send_email, self.api_key, self.from_email, to, subject, html
        )
        message_id = data.get("id", "")
        logger.info("Email sent via Resend: id=%s to=%s", message_id, to)
        return message_id

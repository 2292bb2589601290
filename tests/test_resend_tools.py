"""Unit tests for resend_tools: Resend REST e-mail client."""
from unittest.mock import MagicMock, patch

import pytest
import requests

from triage.exceptions import NotificationError


RESEND_MODULE = "tools.resend_tools"


class TestResendSendEmail:
    @patch(f"{RESEND_MODULE}.requests.post")
    def test_sends_email_successfully(self, mock_post):
        mock_resp = MagicMock()
        mock_resp.json.return_value = {"id": "re_123"}
        mock_resp.raise_for_status.return_value = None
        mock_post.return_value = mock_resp

        from tools.resend_tools import resend_send_email
        result = resend_send_email(
            "test-key", "onboarding@resend.dev", "anna@techcompany.se", "Hej", "<p>Hej</p>"
        )

        assert result == {"id": "re_123"}
        mock_post.assert_called_once()
        call_kwargs = mock_post.call_args
        assert call_kwargs.args[0] == "https://api.resend.com/emails"
        assert call_kwargs.kwargs["headers"]["Authorization"] == "Bearer test-key"
        assert call_kwargs.kwargs["json"] == {
            "from": "onboarding@resend.dev",
            "to": ["anna@techcompany.se"],
            "subject": "Hej",
            "html": "<p>Hej</p>",
        }
        assert call_kwargs.kwargs["timeout"] == 10

    @patch(f"{RESEND_MODULE}.requests.post")
    def test_http_error_raises_notification_error(self, mock_post):
        mock_resp = MagicMock()
        mock_resp.raise_for_status.side_effect = requests.HTTPError("422 Unprocessable Entity")
        mock_post.return_value = mock_resp

        from tools.resend_tools import resend_send_email
        with pytest.raises(NotificationError) as exc_info:
            resend_send_email("test-key", "a@rookie.se", "b@rookie.se", "s", "h")
        assert exc_info.value.recipient == "b@rookie.se"

    @patch(f"{RESEND_MODULE}.requests.post")
    def test_network_error_raises_notification_error(self, mock_post):
        mock_post.side_effect = requests.ConnectionError("connection refused")

        from tools.resend_tools import resend_send_email
        with pytest.raises(NotificationError):
            resend_send_email("test-key", "a@rookie.se", "b@rookie.se", "s", "h")


class TestResendMailer:
    @pytest.mark.asyncio
    @patch(f"{RESEND_MODULE}.resend_send_email", return_value={"id": "re_456"})
    async def test_send_returns_message_id(self, mock_send):
        from tools.resend_tools import ResendMailer
        mailer = ResendMailer("test-key", "onboarding@resend.dev")

        message_id = await mailer.send("anna@techcompany.se", "Hej", "<p>Hej</p>")

        assert message_id == "re_456"
        mock_send.assert_called_once_with(
            "test-key", "onboarding@resend.dev", "anna@techcompany.se", "Hej", "<p>Hej</p>"
        )

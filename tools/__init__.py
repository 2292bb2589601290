from .completion_tools import LiteLlmCompleter
from .resend_tools import ResendMailer, resend_send_email

__all__ = [
    "LiteLlmCompleter",
    "ResendMailer", "resend_send_email",
]

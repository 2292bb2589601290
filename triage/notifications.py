"""E-mail notifications: the lead-facing confirmation and the operator alert."""
import logging
from datetime import datetime
from pathlib import Path
from typing import Optional
from zoneinfo import ZoneInfo

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape

from schemas.scoring import JobAdDraft
from schemas.submission import Submission
from triage.exceptions import CompletionSchemaError
from triage.ports import Mailer

logger = logging.getLogger(__name__)

_TEMPLATES_DIR = Path(__file__).parent / "templates"
_env = Environment(
    loader=FileSystemLoader(_TEMPLATES_DIR),
    autoescape=select_autoescape(["html", "j2"]),
    undefined=StrictUndefined,
)

PORTAL_URL = "https://portal.rookie.se"
ALERT_TIMEZONE = ZoneInfo("Europe/Stockholm")

# Placeholder profiles shown until real candidate matching exists for the ad.
EXAMPLE_CANDIDATES = [
    {
        "label": "Kandidat A",
        "background": "3 års erfarenhet, stark teknisk profil med fokus på projektledning",
        "skills": "analytisk förmåga, ledarskapsförmåga",
        "education": "Civilingenjör + certifieringar",
    },
    {
        "label": "Kandidat B",
        "background": "Junior profil med 2+ års erfarenhet, strategisk förståelse",
        "skills": "affärsutveckling, projektledning, coaching",
        "education": "Kandidatexamen inom relevant område",
    },
]


def fault_kind(error: BaseException) -> str:
    """'schema_error' for bad completion output, 'fault' for everything else."""
    return "schema_error" if isinstance(error, CompletionSchemaError) else "fault"


def render_lead_confirmation(job_ad: JobAdDraft, portal_url: str = PORTAL_URL) -> str:
    return _env.get_template("lead_confirmation.html.j2").render(
        job_ad=job_ad,
        example_candidates=EXAMPLE_CANDIDATES,
        portal_url=portal_url,
    )


def render_admin_alert(
    submission: Submission,
    error: BaseException,
    failure_point: str,
    occurred_at: Optional[datetime] = None,
) -> str:
    occurred_at = occurred_at or datetime.now(ALERT_TIMEZONE)
    return _env.get_template("admin_alert.html.j2").render(
        submission=submission,
        error_message=str(error),
        fault_kind=fault_kind(error),
        failure_point=failure_point,
        occurred_at=occurred_at.strftime("%Y-%m-%d %H:%M:%S"),
    )


class LeadNotifier:
    """Renders and sends pipeline e-mails through a Mailer.

    lead_email_override redirects lead confirmations to a fixed inbox (used
    before the sending domain is verified); the real address stays in the
    subject line for tracking.
    """

    def __init__(
        self,
        mailer: Mailer,
        admin_email: Optional[str] = None,
        lead_email_override: Optional[str] = None,
    ):
        self.mailer = mailer
        self.admin_email = admin_email
        self.lead_email_override = lead_email_override

    async def send_confirmation(self, lead_email: str, job_ad: JobAdDraft) -> str:
        recipient = self.lead_email_override or lead_email
        subject = f"Tack för din förfrågan till Rookie - Vi har kandidater! [Lead: {lead_email}]"
        logger.info("Sending confirmation email for lead %s (to=%s)", lead_email, recipient)
        return await self.mailer.send(recipient, subject, render_lead_confirmation(job_ad))

    async def send_admin_alert(
        self,
        submission: Submission,
        error: BaseException,
        failure_point: str,
    ) -> Optional[str]:
        """Alert the operator about a failed submission. None when no recipient is set."""
        if not self.admin_email:
            logger.warning("Admin alert email not configured, skipping alert")
            return None

        logger.info("Sending admin alert to %s (failure_point=%s)", self.admin_email, failure_point)
        subject = f"🚨 Form Submission Failed - {submission.company_name or 'Unknown Company'}"
        html = render_admin_alert(submission, error, failure_point)
        return await self.mailer.send(self.admin_email, subject, html)

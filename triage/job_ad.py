"""Draft job advertisement generation for accepted leads."""
import logging
from datetime import date
from pathlib import Path
from typing import Callable

from schemas.scoring import JobAdDraft, LeadScore
from schemas.submission import Submission
from triage.parsing import complete_structured
from triage.ports import Completer

logger = logging.getLogger(__name__)

_PROMPTS_DIR = Path(__file__).parent / "prompts"
JOB_AD_SYSTEM_PROMPT = (_PROMPTS_DIR / "job_ad_system.md").read_text(encoding="utf-8")

STAGE = "job_ad_generation"


def build_job_ad_prompt(lead: Submission, score: LeadScore, today: date) -> str:
    return f"""Generate a professional Swedish job ad based on this form submission:

Company: {lead.company_name or ""}
Industry: {lead.industry or ""}
Role Category: {score.role_category}
Service Type: {lead.service_type or ""}
Key Requirements: {", ".join(score.key_requirements)}
Client's Description: {lead.needs_description or ""}

Return ONLY valid JSON in this format:
{{
  "title": "compelling job title in Swedish (30-60 chars)",
  "company": "{lead.company_name or ""}",
  "description": "professional description in Swedish (200-400 words)",
  "location": "Stockholm",
  "category": "{score.role_category}",
  "external_url": "https://rookiework.se/jobs/[generate-slug-from-title]",
  "posted_date": "{today.isoformat()}"
}}"""


class JobAdGenerator:
    def __init__(
        self,
        completer: Completer,
        system_prompt: str = JOB_AD_SYSTEM_PROMPT,
        today: Callable[[], date] = date.today,
    ):
        self.completer = completer
        self.system_prompt = system_prompt
        self.today = today

    async def generate(self, lead: Submission, score: LeadScore) -> JobAdDraft:
        logger.info("Calling completion service for job ad generation")
        draft = await complete_structured(
            self.completer,
            STAGE,
            self.system_prompt,
            build_job_ad_prompt(lead, score, self.today()),
            JobAdDraft,
        )
        logger.info("Job ad generation complete: title=%r", draft.title)
        return draft

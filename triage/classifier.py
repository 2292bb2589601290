"""Lead classification via the completion service.

The system prompt encodes Rookie's taxonomy, a fixed decision order
(spam → candidate → out-of-scope role → personal domain → valid) and the
inclusion-first rule: borderline leads are valid_lead with a lower score.
The model's answer is untrusted and must pass the LeadScore schema.
"""
import logging
from pathlib import Path

from schemas.scoring import LeadScore
from schemas.submission import Submission
from triage.parsing import complete_structured
from triage.ports import Completer

logger = logging.getLogger(__name__)

_PROMPTS_DIR = Path(__file__).parent / "prompts"
SCORING_SYSTEM_PROMPT = (_PROMPTS_DIR / "lead_scoring_system.md").read_text(encoding="utf-8")

STAGE = "lead_scoring"


def build_scoring_prompt(lead: Submission) -> str:
    return f"""Analyze this lead submission:

Company Name: {lead.company_name or ""}
Contact Name: {lead.full_name or ""}
Email: {lead.email or ""}
Phone: {lead.phone or ""}
Needs Description: {lead.needs_description or ""}
Service Type: {lead.service_type or ""}
Industry: {lead.industry or ""}

Provide your analysis in this exact JSON format:
{{
"lead_score": <number 1-100>,
"role_category": "<category>",
"classification": "valid_lead | invalid_lead | likely_candidate | likely_spam",
"key_requirements": ["requirement1", "requirement2"],
"ai_reasoning": "<short explanation of why this classification and score were assigned>"
}}"""


class LeadClassifier:
    def __init__(self, completer: Completer, system_prompt: str = SCORING_SYSTEM_PROMPT):
        self.completer = completer
        self.system_prompt = system_prompt

    async def classify(self, lead: Submission) -> LeadScore:
        """Classify and score one lead. Raises CompletionSchemaError on bad output."""
        logger.info("Calling completion service for lead scoring")
        score = await complete_structured(
            self.completer,
            STAGE,
            self.system_prompt,
            build_scoring_prompt(lead),
            LeadScore,
        )
        logger.info(
            "Lead scoring complete: classification=%s score=%d",
            score.classification.value, score.lead_score,
        )
        return score

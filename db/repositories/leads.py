"""Terminal sinks for submissions that do not become companies."""
import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from db.models import REJECTED_CLASSIFICATIONS, CandidateLead, RejectedLead

logger = logging.getLogger(__name__)


async def insert_rejected(session: AsyncSession, data: dict) -> RejectedLead:
    """Insert a rejected lead.

    data dict keys: full_name, email, phone, company_name, needs_description,
    classification, ai_reasoning, raw_data
    """
    if data.get("classification") not in REJECTED_CLASSIFICATIONS:
        raise ValueError(f"Invalid rejected-lead classification: {data.get('classification')!r}")
    row = RejectedLead(**data)
    session.add(row)
    await session.flush()
    logger.info("Stored rejected lead %s (%s)", row.id, row.classification)
    return row


async def insert_candidate(
    session: AsyncSession, data: dict, ai_reasoning: Optional[str] = None
) -> CandidateLead:
    """Insert a job-seeker submission.

    data dict keys: full_name, email, phone, needs_description, raw_data
    """
    row = CandidateLead(**data, classification="likely_candidate", ai_reasoning=ai_reasoning)
    session.add(row)
    await session.flush()
    logger.info("Stored candidate lead %s", row.id)
    return row

"""Website job repository: AI-drafted job ads owned by a company."""
import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from db.models import WebsiteJob

logger = logging.getLogger(__name__)


async def create_draft(session: AsyncSession, data: dict) -> WebsiteJob:
    """Insert a job ad with published_status 'draft'.

    data dict keys: company_id, title, company, description, location,
    category, external_url, external_id, posted_date, service_type, source,
    ai_valid, ai_score, ai_reasoning, ai_category, raw_data
    """
    job = WebsiteJob(**data, is_ai_generated=True, published_status="draft")
    session.add(job)
    await session.flush()
    logger.info("Created draft job ad %s: %r", job.id, job.title)
    return job


async def get_by_company(session: AsyncSession, company_id: UUID) -> list[WebsiteJob]:
    result = await session.execute(
        select(WebsiteJob).where(WebsiteJob.company_id == company_id)
    )
    return list(result.scalars().all())

"""Signal repository: append-only; rows are never updated or deleted."""
import logging
from typing import Any, Dict
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from db.models import Signal

logger = logging.getLogger(__name__)

WEBSITE_FORM_SUBMISSION = "website_form_submission"


async def append(
    session: AsyncSession,
    company_id: UUID,
    payload: Dict[str, Any],
    signal_type: str = WEBSITE_FORM_SUBMISSION,
    source: str = "website_form",
) -> Signal:
    signal = Signal(
        company_id=company_id,
        signal_type=signal_type,
        source=source,
        payload=payload,
    )
    session.add(signal)
    await session.flush()
    return signal


async def get_by_company(session: AsyncSession, company_id: UUID) -> list[Signal]:
    """Return all signals for a company, oldest first."""
    result = await session.execute(
        select(Signal)
        .where(Signal.company_id == company_id)
        .order_by(Signal.created_at)
    )
    return list(result.scalars().all())

"""Company repository: atomic find-or-create by domain, then name."""
import logging
from typing import Optional
from uuid import UUID

from sqlalchemy import UUID as SA_UUID, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from db.models import Company

logger = logging.getLogger(__name__)


def normalize_domain(domain: Optional[str]) -> Optional[str]:
    """Lower-case and trim a domain; blank becomes None."""
    if domain is None:
        return None
    domain = domain.strip().lower()
    return domain or None


async def find_or_create(
    session: AsyncSession,
    name: str,
    domain: Optional[str],
    source: str = "website_form",
) -> UUID:
    """Return the id of the company for (name, domain), creating it if needed.

    Runs crm.find_or_create_company in one round trip. The function matches
    on domain first, then case-insensitive name (filling in a missing domain),
    and inserts otherwise, under an advisory lock on the normalized key.
    """
    name = name.strip()
    if not name:
        raise ValueError("Company name must not be empty")
    domain = normalize_domain(domain)

    result = await session.execute(
        select(
            func.crm.find_or_create_company(name, domain, source, type_=SA_UUID(as_uuid=True))
        )
    )
    company_id = result.scalar_one()
    logger.info("Resolved company %r (domain=%s) → %s", name, domain, company_id)
    return company_id


async def get_by_id(session: AsyncSession, company_id: UUID) -> Optional[Company]:
    result = await session.execute(select(Company).where(Company.id == company_id))
    return result.scalar_one_or_none()


async def get_by_domain(session: AsyncSession, domain: str) -> Optional[Company]:
    """Return the Company with this domain, or None."""
    result = await session.execute(
        select(Company).where(Company.domain == normalize_domain(domain))
    )
    return result.scalar_one_or_none()


async def count_by_name(session: AsyncSession, name: str) -> int:
    """Number of companies whose name matches case-insensitively."""
    result = await session.execute(
        select(func.count(Company.id)).where(func.lower(Company.name) == name.strip().lower())
    )
    return result.scalar_one()

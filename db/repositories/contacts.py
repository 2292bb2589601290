"""Contact repository: upsert keyed on (company_id, email)."""
import logging
from typing import Optional
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from db.models import Contact

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.lower().strip()


async def get_by_email(session: AsyncSession, company_id: UUID, email: str) -> Optional[Contact]:
    """Return the company's Contact with this email, or None."""
    result = await session.execute(
        select(Contact).where(
            Contact.company_id == company_id,
            Contact.email == normalize_email(email),
        )
    )
    return result.scalar_one_or_none()


async def upsert(session: AsyncSession, data: dict) -> Contact:
    """Insert or update a contact by (company_id, email).

    data dict keys: company_id, email, full_name, phone, source
    """
    data = {**data, "email": normalize_email(data["email"])}
    stmt = (
        pg_insert(Contact)
        .values(**data)
        .on_conflict_do_update(
            constraint="uq_contact_company_email",
            set_={
                **{k: v for k, v in data.items() if k not in ("company_id", "email")},
                "updated_at": func.now(),
            },
        )
        .returning(Contact)
    )
    result = await session.execute(stmt, execution_options={"populate_existing": True})
    await session.flush()
    contact = result.scalar_one()
    logger.debug("Upserted contact %s for company %s", contact.id, contact.company_id)
    return contact

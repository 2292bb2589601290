"""SQL-backed LeadStore.

Each operation opens its own session from the store's session factory, so
a failure in one step rolls back only that step and never leaves a
half-written row behind.
"""
import logging
from typing import Any, Dict, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker

from db.connection import build_engine, build_session_factory, session_scope
from db.repositories import companies as companies_repo
from db.repositories import contacts as contacts_repo
from db.repositories import leads as leads_repo
from db.repositories import signals as signals_repo
from db.repositories import website_jobs as jobs_repo
from schemas.scoring import JobAdDraft, LeadScore
from schemas.submission import Submission
from settings import Settings

logger = logging.getLogger(__name__)

SOURCE = "website_form"


class SqlLeadStore:
    def __init__(
        self,
        session_factory: async_sessionmaker,
        source: str = SOURCE,
        engine: Optional[AsyncEngine] = None,
    ):
        self.session_factory = session_factory
        self.source = source
        self.engine = engine

    @classmethod
    def from_settings(cls, settings: Settings, source: str = SOURCE) -> "SqlLeadStore":
        """Build a store on its own engine, using the settings' URL and pool sizing."""
        engine = build_engine(settings)
        return cls(build_session_factory(engine), source=source, engine=engine)

    def _session(self):
        return session_scope(self.session_factory)

    async def close(self) -> None:
        """Dispose the engine this store owns, if any."""
        if self.engine is not None:
            await self.engine.dispose()

    async def find_or_create_company(
        self, name: str, domain: Optional[str], source: str = SOURCE
    ) -> UUID:
        async with self._session() as session:
            return await companies_repo.find_or_create(session, name, domain, source)

    async def create_signal(self, company_id: UUID, payload: Dict[str, Any]) -> UUID:
        async with self._session() as session:
            signal = await signals_repo.append(session, company_id, payload, source=self.source)
            return signal.id

    async def upsert_contact(
        self,
        company_id: UUID,
        email: str,
        full_name: Optional[str] = None,
        phone: Optional[str] = None,
    ) -> UUID:
        async with self._session() as session:
            contact = await contacts_repo.upsert(session, {
                "company_id": company_id,
                "email": email,
                "full_name": full_name,
                "phone": phone,
                "source": self.source,
            })
            return contact.id

    async def insert_rejected_lead(
        self,
        submission: Submission,
        classification: str,
        ai_reasoning: Optional[str],
    ) -> UUID:
        async with self._session() as session:
            row = await leads_repo.insert_rejected(session, {
                "full_name": submission.full_name,
                "email": submission.email,
                "phone": submission.phone,
                "company_name": submission.company_name,
                "needs_description": submission.needs_description,
                "classification": classification,
                "ai_reasoning": ai_reasoning,
                "raw_data": submission.form_fields(),
            })
            return row.id

    async def insert_candidate_lead(self, submission: Submission, score: LeadScore) -> UUID:
        async with self._session() as session:
            row = await leads_repo.insert_candidate(
                session,
                {
                    "full_name": submission.full_name,
                    "email": submission.email,
                    "phone": submission.phone,
                    "needs_description": submission.needs_description,
                    "raw_data": submission.form_fields(),
                },
                ai_reasoning=score.ai_reasoning,
            )
            return row.id

    async def create_job_ad(
        self,
        company_id: UUID,
        draft: JobAdDraft,
        submission: Submission,
        score: LeadScore,
    ) -> UUID:
        async with self._session() as session:
            job = await jobs_repo.create_draft(session, {
                "company_id": company_id,
                "title": draft.title,
                "company": draft.company,
                "description": draft.description,
                "location": draft.location,
                "category": draft.category,
                "external_url": str(draft.external_url),
                "external_id": submission.submission_id,
                "posted_date": draft.posted_date,
                "service_type": submission.service_type,
                "source": self.source,
                "ai_valid": True,
                "ai_score": score.lead_score,
                "ai_reasoning": score.ai_reasoning,
                "ai_category": score.role_category,
                "raw_data": submission.form_fields(),
            })
            return job.id

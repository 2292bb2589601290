"""Collaborator contracts the pipeline depends on.

Real implementations live in db.store and tools/; tests substitute fakes.
"""
from typing import Any, Dict, Optional, Protocol
from uuid import UUID

from schemas.scoring import JobAdDraft, LeadScore
from schemas.submission import Submission


class Completer(Protocol):
    async def complete(self, system: str, user: str) -> str: ...


class Mailer(Protocol):
    async def send(self, to: str, subject: str, html: str) -> str: ...


class LeadStore(Protocol):
    async def find_or_create_company(
        self, name: str, domain: Optional[str], source: str = "website_form"
    ) -> UUID: ...

    async def create_signal(self, company_id: UUID, payload: Dict[str, Any]) -> UUID: ...

    async def upsert_contact(
        self,
        company_id: UUID,
        email: str,
        full_name: Optional[str] = None,
        phone: Optional[str] = None,
    ) -> UUID: ...

    async def insert_rejected_lead(
        self,
        submission: Submission,
        classification: str,
        ai_reasoning: Optional[str],
    ) -> UUID: ...

    async def insert_candidate_lead(self, submission: Submission, score: LeadScore) -> UUID: ...

    async def create_job_ad(
        self,
        company_id: UUID,
        draft: JobAdDraft,
        submission: Submission,
        score: LeadScore,
    ) -> UUID: ...

"""Integration tests for the identity repositories and SQL store.

These run against PostgreSQL with migration 001 applied:
  export DATABASE_URL="postgresql+asyncpg://rookie:<password>@<host>:5432/rookie_crm"
  alembic upgrade head
"""
import asyncio
import os
import uuid

import pytest
import pytest_asyncio

from db import dispose_engine, get_db
from db.repositories import companies as companies_repo
from db.repositories import contacts as contacts_repo
from db.repositories import signals as signals_repo
from db.store import SqlLeadStore
from schemas.scoring import JobAdDraft, LeadScore
from schemas.submission import Submission
from settings import Settings

from conftest import job_ad_json, scoring_json

pytestmark = pytest.mark.skipif(
    not os.environ.get("DATABASE_URL"),
    reason="DATABASE_URL not set; skipping PostgreSQL integration tests",
)


@pytest_asyncio.fixture(autouse=True)
async def _fresh_engine():
    """Each test runs in its own event loop, so pooled connections cannot be reused."""
    yield
    await dispose_engine()


@pytest_asyncio.fixture
async def sql_store():
    store = SqlLeadStore.from_settings(Settings.from_env())
    yield store
    await store.close()


def _unique(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:8]}"


# ---------------------------------------------------------------------------
# Companies
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_company_dedup_by_domain():
    """Same domain with a different name returns the existing company."""
    domain = f"{_unique('acme')}.se"
    async with get_db() as session:
        first = await companies_repo.find_or_create(session, _unique("Acme AB"), domain)
    async with get_db() as session:
        second = await companies_repo.find_or_create(session, _unique("Acme Sverige"), domain.upper())
    async with get_db() as session:
        company = await companies_repo.get_by_domain(session, f"  {domain.upper()} ")
    assert first == second
    assert company.id == first
    assert company.domain == domain


@pytest.mark.asyncio
async def test_company_dedup_by_name_is_case_insensitive():
    name = _unique("Nordic Logistics")
    async with get_db() as session:
        first = await companies_repo.find_or_create(session, name, None)
    async with get_db() as session:
        second = await companies_repo.find_or_create(session, name.upper(), None)
    async with get_db() as session:
        count = await companies_repo.count_by_name(session, name)
    assert first == second
    assert count == 1


@pytest.mark.asyncio
async def test_name_match_backfills_missing_domain():
    name = _unique("Backfill")
    domain = f"{name.lower()}.se"
    async with get_db() as session:
        first = await companies_repo.find_or_create(session, name, None)
    async with get_db() as session:
        second = await companies_repo.find_or_create(session, name, domain)
    async with get_db() as session:
        company = await companies_repo.get_by_id(session, first)
    assert first == second
    assert company.domain == domain


@pytest.mark.asyncio
async def test_concurrent_first_sight_creates_one_company():
    domain = f"{_unique('race')}.se"
    race_name = _unique("Race AB")

    async def resolve():
        async with get_db() as session:
            return await companies_repo.find_or_create(session, race_name, domain)

    ids = await asyncio.gather(*(resolve() for _ in range(5)))
    assert len(set(ids)) == 1


# ---------------------------------------------------------------------------
# Contacts and signals
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_contact_upsert_updates_in_place():
    async with get_db() as session:
        company_id = await companies_repo.find_or_create(session, _unique("Contact Co"), f"{_unique('c')}.se")
    email = f"{_unique('anna')}@contactco.se"
    async with get_db() as session:
        first = await contacts_repo.upsert(session, {
            "company_id": company_id, "email": email, "full_name": "Anna", "source": "website_form",
        })
    async with get_db() as session:
        second = await contacts_repo.upsert(session, {
            "company_id": company_id, "email": f"  {email.upper()} ", "full_name": "Anna Svensson",
            "phone": "070-123 45 67", "source": "website_form",
        })
    assert first.id == second.id
    assert second.full_name == "Anna Svensson"
    assert second.email == email
    async with get_db() as session:
        stored = await contacts_repo.get_by_email(session, company_id, email.upper())
    assert stored.id == first.id
    assert stored.phone == "070-123 45 67"


@pytest.mark.asyncio
async def test_signals_are_appended():
    async with get_db() as session:
        company_id = await companies_repo.find_or_create(session, _unique("Signal Co"), f"{_unique('s')}.se")
    async with get_db() as session:
        await signals_repo.append(session, company_id, {"n": 1})
        await signals_repo.append(session, company_id, {"n": 2})
    async with get_db() as session:
        signals = await signals_repo.get_by_company(session, company_id)
    assert [s.payload["n"] for s in signals] == [1, 2]
    assert all(s.signal_type == "website_form_submission" for s in signals)


# ---------------------------------------------------------------------------
# SqlLeadStore
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_store_writes_every_sink(sql_store):
    store = sql_store
    submission = Submission(
        full_name="Anna Svensson",
        email=f"{_unique('anna')}@storeco.se",
        company_name="Store Co AB",
        needs_description="Vi söker en junior utvecklare",
        service_type="Rekrytering",
    )
    score = LeadScore.model_validate_json(scoring_json())
    draft = JobAdDraft.model_validate_json(job_ad_json(company="Store Co AB"))

    company_id = await store.find_or_create_company(_unique("Store Co AB"), f"{_unique('storeco')}.se")
    assert await store.create_signal(company_id, {"email": submission.email})
    assert await store.upsert_contact(company_id, submission.email, full_name=submission.full_name)
    assert await store.create_job_ad(company_id, draft, submission, score)
    assert await store.insert_rejected_lead(submission, "processing_error", "Processing error: x")
    assert await store.insert_candidate_lead(submission, score)


@pytest.mark.asyncio
async def test_store_rejects_unknown_rejected_classification(sql_store):
    with pytest.raises(ValueError):
        await sql_store.insert_rejected_lead(Submission(), "valid_lead", None)

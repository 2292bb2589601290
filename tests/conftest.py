"""Shared fixtures: in-memory fakes for the pipeline's collaborators."""
import json
import uuid
from typing import Any, Dict, List, Optional

import pytest

from triage.exceptions import NotificationError


VALID_NEEDS = (
    "Vi söker en junior backend-utvecklare med Python-erfarenhet till vårt "
    "team i Stockholm. Start i januari, heltid."
)


def scoring_json(classification: str = "valid_lead", lead_score: int = 82, **overrides) -> str:
    payload = {
        "lead_score": lead_score,
        "role_category": "Tech",
        "classification": classification,
        "key_requirements": ["Python", "API design"],
        "ai_reasoning": "Company hiring a junior developer.",
    }
    payload.update(overrides)
    return json.dumps(payload)


def job_ad_json(**overrides) -> str:
    payload = {
        "title": "Junior Backend-utvecklare",
        "company": "Tech Company AB",
        "description": "Vi söker en nyfiken junior utvecklare.",
        "location": "Stockholm",
        "category": "Tech",
        "external_url": "https://rookiework.se/jobs/junior-backend-utvecklare",
        "posted_date": "2026-10-17",
    }
    payload.update(overrides)
    return json.dumps(payload)


class StoreUnavailable(RuntimeError):
    pass


class FakeStore:
    """In-memory LeadStore with the same dedup rules as the SQL store.

    fail_on names methods that raise StoreUnavailable.
    """

    def __init__(self, fail_on: Optional[set] = None):
        self.fail_on = set(fail_on or ())
        self.companies: Dict[uuid.UUID, Dict[str, Any]] = {}
        self.contacts: Dict[tuple, Dict[str, Any]] = {}
        self.signals: List[Dict[str, Any]] = []
        self.rejected: List[Dict[str, Any]] = []
        self.candidates: List[Dict[str, Any]] = []
        self.job_ads: List[Dict[str, Any]] = []

    def _check(self, name: str) -> None:
        if name in self.fail_on:
            raise StoreUnavailable(f"store unavailable during {name}")

    async def find_or_create_company(self, name, domain, source="website_form"):
        self._check("find_or_create_company")
        domain = domain.strip().lower() if domain else None
        if domain:
            for company_id, row in self.companies.items():
                if row["domain"] == domain:
                    return company_id
        for company_id, row in self.companies.items():
            if row["name"].lower() == name.strip().lower():
                if domain and row["domain"] is None:
                    row["domain"] = domain
                return company_id
        company_id = uuid.uuid4()
        self.companies[company_id] = {"name": name.strip(), "domain": domain, "source": source}
        return company_id

    async def create_signal(self, company_id, payload):
        self._check("create_signal")
        self.signals.append({"company_id": company_id, "payload": payload})
        return uuid.uuid4()

    async def upsert_contact(self, company_id, email, full_name=None, phone=None):
        self._check("upsert_contact")
        key = (company_id, email.strip().lower())
        row = self.contacts.setdefault(key, {"id": uuid.uuid4()})
        row.update(full_name=full_name, phone=phone)
        return row["id"]

    async def insert_rejected_lead(self, submission, classification, ai_reasoning):
        self._check("insert_rejected_lead")
        self.rejected.append({
            "submission": submission,
            "classification": classification,
            "ai_reasoning": ai_reasoning,
        })
        return uuid.uuid4()

    async def insert_candidate_lead(self, submission, score):
        self._check("insert_candidate_lead")
        self.candidates.append({"submission": submission, "score": score})
        return uuid.uuid4()

    async def create_job_ad(self, company_id, draft, submission, score):
        self._check("create_job_ad")
        self.job_ads.append({"company_id": company_id, "draft": draft, "submission": submission})
        return uuid.uuid4()


class FakeCompleter:
    """Answers scoring prompts and job-ad prompts with canned content."""

    def __init__(self, scoring: str = "", job_ad: str = ""):
        self.scoring = scoring or scoring_json()
        self.job_ad = job_ad or job_ad_json()
        self.calls: List[tuple] = []

    async def complete(self, system: str, user: str) -> str:
        self.calls.append((system, user))
        if user.startswith("Analyze this lead submission"):
            return self.scoring
        return self.job_ad


class FakeMailer:
    def __init__(self, fail_for: Optional[set] = None):
        self.fail_for = set(fail_for or ())
        self.sent: List[Dict[str, str]] = []

    async def send(self, to: str, subject: str, html: str) -> str:
        if to in self.fail_for:
            raise NotificationError(to, "503 Service Unavailable")
        self.sent.append({"to": to, "subject": subject, "html": html})
        return f"msg-{len(self.sent)}"


@pytest.fixture
def store():
    return FakeStore()


@pytest.fixture
def completer():
    return FakeCompleter()


@pytest.fixture
def mailer():
    return FakeMailer()


@pytest.fixture
def valid_payload():
    return {
        "name": "Anna Svensson",
        "email": "anna@techcompany.se",
        "phone": "+46 70 123 45 67",
        "company": "Tech Company AB",
        "industry": "IT",
        "service_type": "Rekrytering",
        "message": VALID_NEEDS,
    }

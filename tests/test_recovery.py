"""Unit tests for the best-effort recovery combinator."""
import asyncio

import pytest

from schemas.submission import Submission
from triage.notifications import LeadNotifier
from triage.recovery import FailureRecovery, attempt_all

from conftest import FakeMailer, FakeStore, StoreUnavailable


async def _ok(value=None):
    return value


async def _boom():
    raise RuntimeError("boom")


class TestAttemptAll:
    @pytest.mark.asyncio
    async def test_reports_each_outcome(self):
        outcomes = await attempt_all(("first", _ok(1)), ("second", _boom()))

        assert outcomes[0] is None
        assert isinstance(outcomes[1], RuntimeError)

    @pytest.mark.asyncio
    async def test_failure_does_not_cancel_sibling(self):
        finished = asyncio.Event()

        async def slow():
            await asyncio.sleep(0.01)
            finished.set()

        outcomes = await attempt_all(("fails_fast", _boom()), ("slow", slow()))

        assert finished.is_set()
        assert outcomes[1] is None


class TestFailureRecovery:
    @pytest.mark.asyncio
    async def test_writes_and_alerts(self):
        store, mailer = FakeStore(), FakeMailer()
        recovery = FailureRecovery(store, LeadNotifier(mailer, admin_email="ops@rookie.se"))
        submission = Submission(email="anna@techcompany.se", company_name="Tech Company AB")

        outcomes = await recovery.recover(submission, RuntimeError("db down"), "signal")

        assert outcomes == [None, None]
        assert store.rejected[0]["classification"] == "processing_error"
        assert store.rejected[0]["ai_reasoning"] == "Processing error: db down"
        assert store.rejected[0]["submission"] is submission
        assert mailer.sent[0]["to"] == "ops@rookie.se"

    @pytest.mark.asyncio
    async def test_never_raises(self):
        store = FakeStore(fail_on={"insert_rejected_lead"})
        mailer = FakeMailer(fail_for={"ops@rookie.se"})
        recovery = FailureRecovery(store, LeadNotifier(mailer, admin_email="ops@rookie.se"))

        outcomes = await recovery.recover(Submission(), RuntimeError("db down"), "signal")

        assert isinstance(outcomes[0], StoreUnavailable)
        assert outcomes[1] is not None

"""Lead intake pipeline: validate, classify, route, and recover.

States per run:
  Received → Validated → (FastReject | Classified) → Routed → Terminal

A submission that fails the deterministic fast gate never reaches the
completion service. Classified submissions dispatch on the closed
LeadClassification enum to one of four terminal routes. Any exception after
the request is accepted is absorbed by FailureRecovery, and the caller still
gets a success-shaped response.
"""
import asyncio
import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional

from pydantic import ValidationError

from schemas.response import PipelineResponse
from schemas.scoring import LeadClassification, LeadScore
from schemas.submission import Submission, SubmissionRequest, ValidatedLead
from triage.classifier import LeadClassifier
from triage.domain import DomainResolution, DomainResolver
from triage.exceptions import UnknownClassificationError
from triage.job_ad import JobAdGenerator
from triage.notifications import LeadNotifier
from triage.parsing import format_violations
from triage.ports import Completer, LeadStore
from triage.recovery import FailureRecovery
from triage.validator import validate_lead

logger = logging.getLogger(__name__)

FAST_REJECT_CLASSIFICATION = "spam"
FAST_REJECT_REASONING = "N/A (fast reject)"
SIGNAL_SOURCE = "website_form"


class RunState(str, Enum):
    RECEIVED = "received"
    VALIDATED = "validated"
    FAST_REJECT = "fast_reject"
    CLASSIFIED = "classified"
    ROUTED = "routed"
    TERMINAL = "terminal"


@dataclass
class _Run:
    """Per-submission bookkeeping; never shared between runs."""

    submission: Submission
    started: float
    clock: Callable[[], float]
    state: RunState = RunState.RECEIVED
    stage: str = "received"

    def advance(self, state: RunState) -> None:
        logger.debug("Run %s: %s → %s", self.submission.submission_id, self.state.value, state.value)
        self.state = state

    def elapsed_ms(self) -> int:
        return int((self.clock() - self.started) * 1000)

    def respond(self, **fields: Any) -> PipelineResponse:
        self.advance(RunState.TERMINAL)
        return PipelineResponse(success=True, processing_time=self.elapsed_ms(), **fields)


Route = Callable[[_Run, ValidatedLead, LeadScore], Awaitable[PipelineResponse]]


def signal_payload(
    lead: ValidatedLead, score: LeadScore, resolution: DomainResolution
) -> Dict[str, Any]:
    """Audit payload for the append-only signals log."""
    return {
        "submission_id": lead.submission_id,
        "full_name": lead.full_name,
        "email": lead.email,
        "phone": lead.phone,
        "company_name": lead.company_name,
        "industry": lead.industry,
        "service_type": lead.service_type,
        "needs_description": lead.needs_description,
        "subject": lead.subject,
        "validation_score": lead.validation_score,
        "lead_score": score.lead_score,
        "classification": score.classification.value,
        "role_category": score.role_category,
        "key_requirements": score.key_requirements,
        "extracted_domain": resolution.domain,
        "domain_source": resolution.source,
    }


class LeadPipeline:
    """Processes one form submission end to end.

    All collaborators are passed in; the pipeline holds no per-run state, so
    one instance can serve concurrent submissions.
    """

    def __init__(
        self,
        store: LeadStore,
        completer: Completer,
        notifier: LeadNotifier,
        domain_resolver: Optional[DomainResolver] = None,
        classifier: Optional[LeadClassifier] = None,
        job_ad_generator: Optional[JobAdGenerator] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.store = store
        self.notifier = notifier
        self.domain_resolver = domain_resolver or DomainResolver()
        self.classifier = classifier or LeadClassifier(completer)
        self.job_ad_generator = job_ad_generator or JobAdGenerator(completer)
        self.recovery = FailureRecovery(store, notifier)
        self.clock = clock

        self._routes: Dict[LeadClassification, Route] = {
            LeadClassification.VALID_LEAD: self._route_valid_lead,
            LeadClassification.INVALID_LEAD: self._route_invalid_lead,
            LeadClassification.LIKELY_CANDIDATE: self._route_candidate,
            LeadClassification.LIKELY_SPAM: self._route_spam,
        }
        missing = set(LeadClassification) - set(self._routes)
        if missing:
            raise TypeError(f"No route for classifications: {sorted(c.value for c in missing)}")

    async def process_submission(self, raw: Optional[Mapping[str, Any]]) -> PipelineResponse:
        """Run one submission to a terminal response. Never raises for pipeline faults."""
        started = self.clock()
        try:
            request = SubmissionRequest.model_validate(raw)
        except ValidationError as exc:
            errors = "; ".join(format_violations(exc))
            logger.warning("Request validation failed: %s", errors)
            return PipelineResponse(
                success=False,
                message="Invalid request data",
                errors=errors,
                processing_time=int((self.clock() - started) * 1000),
            )

        submission = Submission.from_request(request)
        run = _Run(submission=submission, started=started, clock=self.clock)
        logger.info("Submission received: id=%s email=%s", submission.submission_id, submission.email)

        try:
            return await self._run(run)
        except Exception as exc:
            logger.error(
                "Submission processing failed: id=%s stage=%s error=%s",
                submission.submission_id, run.stage, exc, exc_info=True,
            )
            await self.recovery.recover(submission, exc, run.stage)
            return PipelineResponse(
                success=True,
                message="Submission received and will be processed",
                processing_time=run.elapsed_ms(),
            )

    async def _run(self, run: _Run) -> PipelineResponse:
        run.stage = "validation"
        lead = validate_lead(run.submission)
        run.advance(RunState.VALIDATED)

        if not lead.passes_fast_gate:
            return await self._fast_reject(run, lead)

        run.stage = "lead_scoring"
        score = await self.classifier.classify(lead)
        run.advance(RunState.CLASSIFIED)

        route = self._routes.get(score.classification)
        if route is None:
            raise UnknownClassificationError(score.classification)
        run.advance(RunState.ROUTED)
        logger.info("Routing submission %s as %s", lead.submission_id, score.classification.value)
        return await route(run, lead, score)

    async def _fast_reject(self, run: _Run, lead: ValidatedLead) -> PipelineResponse:
        logger.warning(
            "Lead failed validation - fast reject: score=%d spam=%s",
            lead.validation_score, lead.is_likely_spam,
        )
        run.advance(RunState.FAST_REJECT)
        run.stage = "rejected_sink"
        await self.store.insert_rejected_lead(lead, FAST_REJECT_CLASSIFICATION, FAST_REJECT_REASONING)
        return run.respond(
            message="Lead received but classified as spam (fast reject)",
            classification=FAST_REJECT_CLASSIFICATION,
        )

    async def _route_valid_lead(self, run: _Run, lead: ValidatedLead, score: LeadScore) -> PipelineResponse:
        run.stage = "domain_resolution"
        resolution = self.domain_resolver.resolve(lead)

        run.stage = "company_resolution"
        company_id = await self.store.find_or_create_company(
            lead.company_name or "", resolution.domain, SIGNAL_SOURCE
        )

        run.stage = "signal"
        await self.store.create_signal(company_id, signal_payload(lead, score, resolution))

        run.stage = "contact_upsert_and_job_ad"
        _, draft = await asyncio.gather(
            self.store.upsert_contact(
                company_id, lead.email or "", full_name=lead.full_name, phone=lead.phone
            ),
            self.job_ad_generator.generate(lead, score),
        )

        run.stage = "job_ad_record"
        await self.store.create_job_ad(company_id, draft, lead, score)

        run.stage = "lead_confirmation"
        await self.notifier.send_confirmation(lead.email or "", draft)

        return run.respond(
            message="Valid lead processed successfully",
            classification=LeadClassification.VALID_LEAD.value,
            lead_score=score.lead_score,
            job_ad_title=draft.title,
        )

    async def _route_invalid_lead(self, run: _Run, lead: ValidatedLead, score: LeadScore) -> PipelineResponse:
        run.stage = "rejected_sink"
        await self.store.insert_rejected_lead(lead, score.classification.value, score.ai_reasoning)
        return run.respond(
            message="Lead classified as invalid",
            classification=LeadClassification.INVALID_LEAD.value,
            reason=score.ai_reasoning,
        )

    async def _route_candidate(self, run: _Run, lead: ValidatedLead, score: LeadScore) -> PipelineResponse:
        run.stage = "candidate_sink"
        await self.store.insert_candidate_lead(lead, score)
        return run.respond(
            message="Lead classified as job seeker",
            classification=LeadClassification.LIKELY_CANDIDATE.value,
        )

    async def _route_spam(self, run: _Run, lead: ValidatedLead, score: LeadScore) -> PipelineResponse:
        run.stage = "rejected_sink"
        await self.store.insert_rejected_lead(lead, score.classification.value, score.ai_reasoning)
        return run.respond(
            message="Lead classified as spam",
            classification=LeadClassification.LIKELY_SPAM.value,
        )

"""Heuristic lead validation and spam scoring.

Pure and synchronous: the score depends only on the submission fields, so the
fast-reject gate can run before any external call is made.
"""
import logging
import math
import re

from schemas.submission import Submission, ValidatedLead, ValidationDetails

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_PATTERN = re.compile(r"[\d\s\-+()]{8,}")

SPAM_KEYWORDS = re.compile(r"(viagra|cialis|casino|crypto|bitcoin)", re.IGNORECASE)
SPAM_PHRASES = re.compile(r"(click here|buy now|limited offer)", re.IGNORECASE)
DISPOSABLE_EMAIL = re.compile(r"@(test|example|temp|fake)", re.IGNORECASE)

MIN_NEEDS_LENGTH = 50
MIN_NAME_LENGTH = 3
SPAM_THRESHOLD = 2


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def spam_indicators(submission: Submission) -> list[bool]:
    """The four independent spam signals, in a fixed order."""
    needs = submission.needs_description or ""
    email = submission.email or ""
    return [
        bool(SPAM_KEYWORDS.search(needs)),
        bool(SPAM_PHRASES.search(needs)),
        "http" in needs,
        bool(DISPOSABLE_EMAIL.search(email)),
    ]


def validate_lead(submission: Submission) -> ValidatedLead:
    """Score a submission's completeness and flag likely spam.

    validation_score is the share of passed boolean checks, 0-100. The
    denominator is the number of boolean checks (five); the description
    length is reported in the details but is not itself a check.
    """
    needs = submission.needs_description or ""
    details = ValidationDetails(
        email_valid=bool(EMAIL_PATTERN.match(submission.email or "")),
        phone_valid=bool(PHONE_PATTERN.search(submission.phone or "")),
        company_filled=len(submission.company_name or "") >= MIN_NAME_LENGTH,
        needs_description_length=len(needs),
        needs_adequate=len(needs) >= MIN_NEEDS_LENGTH,
        contact_name_filled=len(submission.full_name or "") >= MIN_NAME_LENGTH,
    )
    checks = [
        details.email_valid,
        details.phone_valid,
        details.company_filled,
        details.needs_adequate,
        details.contact_name_filled,
    ]
    passed = sum(checks)
    score = _round_half_up(passed / len(checks) * 100)

    indicators = spam_indicators(submission)
    is_spam = sum(indicators) >= SPAM_THRESHOLD

    logger.debug(
        "Lead validation complete: score=%d spam=%s passed=%d indicators=%d",
        score, is_spam, passed, sum(indicators),
    )
    return ValidatedLead(
        **submission.model_dump(include=set(Submission.model_fields)),
        validation_score=score,
        is_likely_spam=is_spam,
        validation_details=details,
    )

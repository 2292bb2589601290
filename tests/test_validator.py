"""Unit tests for the heuristic lead validator."""
from schemas.submission import Submission
from triage.validator import spam_indicators, validate_lead

from conftest import VALID_NEEDS


def _submission(**fields) -> Submission:
    base = {
        "full_name": "Anna Svensson",
        "email": "anna@techcompany.se",
        "phone": "+46 70 123 45 67",
        "company_name": "Tech Company AB",
        "needs_description": VALID_NEEDS,
    }
    base.update(fields)
    return Submission(**base)


class TestValidationScore:
    def test_complete_corporate_submission_scores_100(self):
        lead = validate_lead(_submission())

        assert lead.validation_score == 100
        assert lead.is_likely_spam is False
        assert lead.passes_fast_gate

    def test_spam_submission_scores_20_and_is_spam(self):
        lead = validate_lead(Submission(
            full_name="X",
            email="spamuser@fake.com",
            phone="abc123",
            company_name="A",
            needs_description="Buy now http://spamlink.com Viagra deals!",
        ))

        assert lead.validation_score == 20
        assert lead.is_likely_spam is True
        assert not lead.passes_fast_gate

    def test_each_check_is_worth_twenty_points(self):
        lead = validate_lead(_submission(phone=None))
        assert lead.validation_score == 80
        assert lead.validation_details.phone_valid is False

    def test_short_description_fails_needs_check(self):
        lead = validate_lead(_submission(needs_description="Need a dev"))

        assert lead.validation_details.needs_adequate is False
        assert lead.validation_details.needs_description_length == 10
        assert lead.validation_score == 80

    def test_description_of_exactly_fifty_chars_is_adequate(self):
        lead = validate_lead(_submission(needs_description="x" * 50))
        assert lead.validation_details.needs_adequate is True

    def test_two_char_names_do_not_count_as_filled(self):
        lead = validate_lead(_submission(full_name="Al", company_name="AB"))

        assert lead.validation_details.contact_name_filled is False
        assert lead.validation_details.company_filled is False
        assert lead.validation_score == 60

    def test_phone_needs_eight_consecutive_phone_chars(self):
        assert validate_lead(_submission(phone="0701234")).validation_details.phone_valid is False
        assert validate_lead(_submission(phone="070-123 45")).validation_details.phone_valid is True

    def test_score_is_deterministic(self):
        submission = _submission(phone="abc")
        assert validate_lead(submission) == validate_lead(submission)

    def test_gate_requires_score_above_thirty(self):
        lead = validate_lead(Submission(
            full_name="Al",
            email="not-an-email",
            company_name="AB",
            needs_description="short",
            phone="0701234567",
        ))
        assert lead.validation_score == 20
        assert not lead.passes_fast_gate


class TestSpamIndicators:
    def test_single_indicator_is_not_spam(self):
        lead = validate_lead(_submission(
            needs_description=VALID_NEEDS + " Se mer på https://techcompany.se/jobb"
        ))

        assert sum(spam_indicators(lead)) == 1
        assert lead.is_likely_spam is False

    def test_two_indicators_flag_spam(self):
        lead = validate_lead(_submission(
            email="anna@temp.se",
            needs_description=VALID_NEEDS + " Bitcoin bonus!",
        ))
        assert spam_indicators(lead) == [True, False, False, True]
        assert lead.is_likely_spam is True

    def test_indicators_are_case_insensitive(self):
        submission = _submission(needs_description="CLICK HERE for CASINO offers")
        assert spam_indicators(submission)[:2] == [True, True]

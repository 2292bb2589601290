"""Unit tests for company domain resolution."""
from schemas.submission import Submission
from triage.domain import DomainResolution, DomainResolver


def _lead(email=None, company=None) -> Submission:
    return Submission(email=email, company_name=company)


class TestDomainResolver:
    def test_corporate_email_domain_is_used(self):
        result = DomainResolver().resolve(_lead("anna@TechCompany.SE", "Tech Company AB"))
        assert result == DomainResolution("techcompany.se", "email")

    def test_personal_email_falls_back_to_guess(self):
        result = DomainResolver().resolve(_lead("user@gmail.com", "Nordea AB"))
        assert result == DomainResolution("nordea.se", "guessed")

    def test_aktiebolag_suffix_and_spaces_are_removed(self):
        resolver = DomainResolver()
        assert resolver.guess_from_company("Svenska Bygg Aktiebolag") == "svenskabygg.se"
        assert resolver.guess_from_company("  Acme Solutions ab ") == "acmesolutions.se"

    def test_suffix_inside_a_word_is_kept(self):
        assert DomainResolver().guess_from_company("Kebab") == "kebab.se"

    def test_no_email_domain_and_no_company_resolves_to_none(self):
        result = DomainResolver().resolve(_lead("user@hotmail.se", None))
        assert result == DomainResolution(None, "none")

    def test_every_personal_provider_is_ignored(self):
        resolver = DomainResolver()
        for domain in ("gmail.com", "hotmail.com", "outlook.com", "icloud.com",
                       "yahoo.com", "live.com", "hotmail.se", "outlook.se"):
            assert resolver.from_email(f"someone@{domain}") is None

    def test_default_tld_is_configurable(self):
        resolver = DomainResolver(default_tld=".com")
        assert resolver.resolve(_lead("user@gmail.com", "Nordea AB")).domain == "nordea.com"

    def test_custom_deny_list(self):
        resolver = DomainResolver(personal_domains=("bredband.net",))
        assert resolver.from_email("a@bredband.net") is None
        assert resolver.from_email("a@gmail.com") == "gmail.com"

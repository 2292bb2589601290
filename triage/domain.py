"""Organizational domain resolution from a lead's email or company name."""
import logging
import re
from typing import Iterable, NamedTuple, Optional

from schemas.submission import Submission

logger = logging.getLogger(__name__)

PERSONAL_EMAIL_DOMAINS = (
    "gmail.com",
    "hotmail.com",
    "outlook.com",
    "icloud.com",
    "yahoo.com",
    "live.com",
    "hotmail.se",
    "outlook.se",
)
LEGAL_SUFFIXES = ("ab", "aktiebolag")


class DomainResolution(NamedTuple):
    domain: Optional[str]
    source: str  # 'email' | 'guessed' | 'none'


class DomainResolver:
    """Derive a company domain, falling back to a guess from the company name.

    A guessed domain is the company name with legal suffixes and whitespace
    removed plus ``default_tld``. It will misresolve foreign or non-Latin
    company names; identity resolution downstream tolerates that.
    """

    def __init__(
        self,
        default_tld: str = ".se",
        personal_domains: Iterable[str] = PERSONAL_EMAIL_DOMAINS,
        legal_suffixes: Iterable[str] = LEGAL_SUFFIXES,
    ):
        self.default_tld = default_tld
        self.personal_domains = frozenset(d.lower() for d in personal_domains)
        suffixes = "|".join(re.escape(s) for s in legal_suffixes)
        self._suffix_pattern = re.compile(rf"\s+({suffixes})$", re.IGNORECASE)

    def from_email(self, email: Optional[str]) -> Optional[str]:
        if not email or "@" not in email:
            return None
        domain = email.split("@", 1)[1].strip().lower()
        if not domain or domain in self.personal_domains:
            return None
        return domain

    def guess_from_company(self, company_name: Optional[str]) -> Optional[str]:
        name = (company_name or "").strip().lower()
        name = self._suffix_pattern.sub("", name)
        name = re.sub(r"\s+", "", name)
        if not name:
            return None
        return f"{name}{self.default_tld}"

    def resolve(self, lead: Submission) -> DomainResolution:
        domain = self.from_email(lead.email)
        if domain:
            result = DomainResolution(domain, "email")
        else:
            guessed = self.guess_from_company(lead.company_name)
            result = DomainResolution(guessed, "guessed") if guessed else DomainResolution(None, "none")

        logger.debug("Domain resolved: domain=%s source=%s", result.domain, result.source)
        return result

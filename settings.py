"""Runtime settings for the lead intake pipeline.

All values come from the environment (a local .env file is loaded first).
Settings are built once by the entry point and passed into the pipeline
factory; nothing below reads os.environ after construction.
"""
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

DEFAULT_FROM_EMAIL = "onboarding@resend.dev"
DEFAULT_GUESSED_TLD = ".se"
DEFAULT_TEMPERATURE = 0.7


def _optional(name: str) -> Optional[str]:
    value = os.environ.get(name, "").strip()
    return value or None


@dataclass(frozen=True)
class Settings:
    database_url: Optional[str] = None
    db_pool_size: int = 5
    db_max_overflow: int = 10
    db_pool_timeout: int = 30

    llm_model: Optional[str] = None
    llm_temperature: float = DEFAULT_TEMPERATURE

    resend_api_key: Optional[str] = None
    resend_from_email: str = DEFAULT_FROM_EMAIL
    admin_alert_email: Optional[str] = None
    lead_email_override: Optional[str] = None

    guessed_domain_tld: str = DEFAULT_GUESSED_TLD
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from the current process environment."""
        tld = os.environ.get("GUESSED_DOMAIN_TLD", DEFAULT_GUESSED_TLD).strip()
        if tld and not tld.startswith("."):
            tld = f".{tld}"
        return cls(
            database_url=_optional("DATABASE_URL"),
            db_pool_size=int(os.environ.get("DB_POOL_SIZE", "5")),
            db_max_overflow=int(os.environ.get("DB_MAX_OVERFLOW", "10")),
            db_pool_timeout=int(os.environ.get("DB_POOL_TIMEOUT", "30")),
            llm_model=_optional("LLM_MODEL"),
            llm_temperature=float(os.environ.get("LLM_TEMPERATURE", DEFAULT_TEMPERATURE)),
            resend_api_key=_optional("RESEND_API_KEY"),
            resend_from_email=_optional("RESEND_FROM_EMAIL") or DEFAULT_FROM_EMAIL,
            admin_alert_email=_optional("ADMIN_ALERT_EMAIL"),
            lead_email_override=_optional("LEAD_EMAIL_OVERRIDE"),
            guessed_domain_tld=tld or DEFAULT_GUESSED_TLD,
            log_level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        )

"""SQLAlchemy 2.0 ORM models for the lead intake pipeline.

Six tables in the crm schema:
  - companies, contacts: identity (deduplicated)
  - signals: append-only audit log of accepted submissions
  - website_jobs: AI-drafted job ads for valid leads
  - rejected_leads, candidate_leads: terminal sinks, not linked to a company
"""

import uuid
from datetime import date, datetime
from typing import Any, Optional

from sqlalchemy import (
    UUID,
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    Index,
    Integer,
    JSON,
    Text,
    ForeignKey,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship
from sqlalchemy.sql import func


# ---------------------------------------------------------------------------
# Shared base
# ---------------------------------------------------------------------------


class Base(DeclarativeBase):
    pass


# ---------------------------------------------------------------------------
# Classification tags accepted by the sink CHECK constraints
# ---------------------------------------------------------------------------

REJECTED_CLASSIFICATIONS = ("spam", "invalid_lead", "likely_spam", "processing_error")
CANDIDATE_CLASSIFICATIONS = ("likely_candidate",)


def _in_check(column: str, values: tuple) -> str:
    return f"{column} IN (" + ", ".join(f"'{v}'" for v in values) + ")"


# ===========================================================================
# Identity
# ===========================================================================


class Company(Base):
    """crm.companies: one row per organization, keyed by domain then name."""

    __tablename__ = "companies"
    __table_args__ = (
        UniqueConstraint("domain", name="uq_company_domain"),
        {"schema": "crm"},
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
        server_default=func.gen_random_uuid(),
    )
    name: Mapped[str] = mapped_column(Text, nullable=False)
    domain: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    source: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    contacts: Mapped[list["Contact"]] = relationship(
        "Contact", back_populates="company"
    )
    signals: Mapped[list["Signal"]] = relationship(
        "Signal", back_populates="company"
    )
    website_jobs: Mapped[list["WebsiteJob"]] = relationship(
        "WebsiteJob", back_populates="owner"
    )


# Name fallback lookups are case-insensitive.
Index("ix_company_lower_name", func.lower(Company.name))


class Contact(Base):
    """crm.contacts: a person at a company, unique on (company_id, email)."""

    __tablename__ = "contacts"
    __table_args__ = (
        UniqueConstraint("company_id", "email", name="uq_contact_company_email"),
        {"schema": "crm"},
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    company_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("crm.companies.id", ondelete="CASCADE"),
        nullable=False,
    )
    email: Mapped[str] = mapped_column(Text, nullable=False)
    full_name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    source: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    company: Mapped["Company"] = relationship("Company", back_populates="contacts")


# ===========================================================================
# Append-only log and collateral
# ===========================================================================


class Signal(Base):
    """crm.signals: immutable record of an accepted submission."""

    __tablename__ = "signals"
    __table_args__ = {"schema": "crm"}

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    company_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("crm.companies.id"), nullable=False
    )
    signal_type: Mapped[str] = mapped_column(Text, nullable=False)
    source: Mapped[str] = mapped_column(Text, nullable=False)
    payload: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    company: Mapped["Company"] = relationship("Company", back_populates="signals")


class WebsiteJob(Base):
    """crm.website_jobs: job ad drafts generated for valid leads."""

    __tablename__ = "website_jobs"
    __table_args__ = (
        CheckConstraint(
            "ai_score IS NULL OR (ai_score BETWEEN 1 AND 100)",
            name="ck_website_job_ai_score",
        ),
        CheckConstraint(
            "published_status IN ('draft', 'published', 'archived')",
            name="ck_website_job_published_status",
        ),
        {"schema": "crm"},
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    company_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("crm.companies.id"), nullable=False
    )
    title: Mapped[str] = mapped_column(Text, nullable=False)
    company: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    location: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    category: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    external_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    external_id: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    posted_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    service_type: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    source: Mapped[str] = mapped_column(Text, nullable=False)
    is_ai_generated: Mapped[bool] = mapped_column(Boolean, server_default="true", nullable=False)
    ai_valid: Mapped[Optional[bool]] = mapped_column(Boolean, nullable=True)
    ai_score: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    ai_reasoning: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    ai_category: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    published_status: Mapped[str] = mapped_column(
        Text, server_default="draft", nullable=False
    )
    raw_data: Mapped[Optional[dict[str, Any]]] = mapped_column(JSON, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    # Named owner to avoid clashing with the `company` text column.
    owner: Mapped["Company"] = relationship("Company", back_populates="website_jobs")


# ===========================================================================
# Terminal sinks
# ===========================================================================


class RejectedLead(Base):
    """crm.rejected_leads: spam, invalid leads, and processing errors."""

    __tablename__ = "rejected_leads"
    __table_args__ = (
        CheckConstraint(
            _in_check("classification", REJECTED_CLASSIFICATIONS),
            name="ck_rejected_lead_classification",
        ),
        {"schema": "crm"},
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    full_name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    email: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    company_name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    needs_description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    classification: Mapped[str] = mapped_column(Text, nullable=False)
    ai_reasoning: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    raw_data: Mapped[Optional[dict[str, Any]]] = mapped_column(JSON, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )


class CandidateLead(Base):
    """crm.candidate_leads: submissions from job seekers."""

    __tablename__ = "candidate_leads"
    __table_args__ = (
        CheckConstraint(
            _in_check("classification", CANDIDATE_CLASSIFICATIONS),
            name="ck_candidate_lead_classification",
        ),
        {"schema": "crm"},
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    full_name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    email: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    needs_description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    classification: Mapped[str] = mapped_column(
        Text, server_default="likely_candidate", nullable=False
    )
    ai_reasoning: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    raw_data: Mapped[Optional[dict[str, Any]]] = mapped_column(JSON, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

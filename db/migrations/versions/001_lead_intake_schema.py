"""Lead intake schema: companies, contacts, signals, job ads, lead sinks.

Revision ID: 001
Revises:
Create Date: 2026-10-17

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers
revision = "001"
down_revision = None
branch_labels = None
depends_on = None


_UUID_PK = dict(primary_key=True, server_default=sa.text("gen_random_uuid()"))

# Domain first, then case-insensitive name (backfilling a missing domain),
# then insert. Advisory locks are always taken domain key first, then name
# key, so concurrent callers cannot deadlock or double-insert.
FIND_OR_CREATE_COMPANY = """
CREATE OR REPLACE FUNCTION crm.find_or_create_company(
    p_name text,
    p_domain text,
    p_source text DEFAULT 'website_form'
) RETURNS uuid
LANGUAGE plpgsql
AS $fn$
DECLARE
    v_name   text := btrim(p_name);
    v_domain text := nullif(lower(btrim(p_domain)), '');
    v_id     uuid;
BEGIN
    IF v_name IS NULL OR v_name = '' THEN
        RAISE EXCEPTION 'company name must not be empty';
    END IF;

    IF v_domain IS NOT NULL THEN
        PERFORM pg_advisory_xact_lock(hashtext('crm.companies/domain/' || v_domain));
    END IF;
    PERFORM pg_advisory_xact_lock(hashtext('crm.companies/name/' || lower(v_name)));

    IF v_domain IS NOT NULL THEN
        SELECT id INTO v_id FROM crm.companies WHERE domain = v_domain;
        IF FOUND THEN
            RETURN v_id;
        END IF;
    END IF;

    SELECT id INTO v_id
      FROM crm.companies
     WHERE lower(name) = lower(v_name)
     ORDER BY created_at
     LIMIT 1;
    IF FOUND THEN
        IF v_domain IS NOT NULL THEN
            UPDATE crm.companies
               SET domain = v_domain, updated_at = now()
             WHERE id = v_id AND domain IS NULL;
        END IF;
        RETURN v_id;
    END IF;

    INSERT INTO crm.companies (name, domain, source)
    VALUES (v_name, v_domain, p_source)
    RETURNING id INTO v_id;
    RETURN v_id;
END;
$fn$;
"""


def upgrade() -> None:
    op.execute("CREATE SCHEMA IF NOT EXISTS crm")

    op.create_table(
        "companies",
        sa.Column("id", postgresql.UUID(as_uuid=True), **_UUID_PK),
        sa.Column("name", sa.Text, nullable=False),
        sa.Column("domain", sa.Text, nullable=True),
        sa.Column("source", sa.Text, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.UniqueConstraint("domain", name="uq_company_domain"),
        schema="crm",
    )
    op.create_index(
        "ix_company_lower_name",
        "companies",
        [sa.text("lower(name)")],
        schema="crm",
    )

    op.create_table(
        "contacts",
        sa.Column("id", postgresql.UUID(as_uuid=True), **_UUID_PK),
        sa.Column("company_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("email", sa.Text, nullable=False),
        sa.Column("full_name", sa.Text, nullable=True),
        sa.Column("phone", sa.Text, nullable=True),
        sa.Column("source", sa.Text, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.UniqueConstraint("company_id", "email", name="uq_contact_company_email"),
        sa.ForeignKeyConstraint(["company_id"], ["crm.companies.id"], name="fk_contact_company", ondelete="CASCADE"),
        schema="crm",
    )

    op.create_table(
        "signals",
        sa.Column("id", postgresql.UUID(as_uuid=True), **_UUID_PK),
        sa.Column("company_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("signal_type", sa.Text, nullable=False),
        sa.Column("source", sa.Text, nullable=False),
        sa.Column("payload", sa.JSON, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.ForeignKeyConstraint(["company_id"], ["crm.companies.id"], name="fk_signal_company"),
        schema="crm",
    )
    op.create_index("ix_signals_company_id", "signals", ["company_id"], schema="crm")

    op.create_table(
        "website_jobs",
        sa.Column("id", postgresql.UUID(as_uuid=True), **_UUID_PK),
        sa.Column("company_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("title", sa.Text, nullable=False),
        sa.Column("company", sa.Text, nullable=False),
        sa.Column("description", sa.Text, nullable=False),
        sa.Column("location", sa.Text, nullable=True),
        sa.Column("category", sa.Text, nullable=True),
        sa.Column("external_url", sa.Text, nullable=True),
        sa.Column("external_id", sa.Text, nullable=True),
        sa.Column("posted_date", sa.Date, nullable=True),
        sa.Column("service_type", sa.Text, nullable=True),
        sa.Column("source", sa.Text, nullable=False),
        sa.Column("is_ai_generated", sa.Boolean, nullable=False, server_default="true"),
        sa.Column("ai_valid", sa.Boolean, nullable=True),
        sa.Column("ai_score", sa.Integer, nullable=True),
        sa.Column("ai_reasoning", sa.Text, nullable=True),
        sa.Column("ai_category", sa.Text, nullable=True),
        sa.Column("published_status", sa.Text, nullable=False, server_default="draft"),
        sa.Column("raw_data", sa.JSON, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.CheckConstraint(
            "ai_score IS NULL OR (ai_score BETWEEN 1 AND 100)",
            name="ck_website_job_ai_score",
        ),
        sa.CheckConstraint(
            "published_status IN ('draft', 'published', 'archived')",
            name="ck_website_job_published_status",
        ),
        sa.ForeignKeyConstraint(["company_id"], ["crm.companies.id"], name="fk_website_job_company"),
        schema="crm",
    )

    op.create_table(
        "rejected_leads",
        sa.Column("id", postgresql.UUID(as_uuid=True), **_UUID_PK),
        sa.Column("full_name", sa.Text, nullable=True),
        sa.Column("email", sa.Text, nullable=True),
        sa.Column("phone", sa.Text, nullable=True),
        sa.Column("company_name", sa.Text, nullable=True),
        sa.Column("needs_description", sa.Text, nullable=True),
        sa.Column("classification", sa.Text, nullable=False),
        sa.Column("ai_reasoning", sa.Text, nullable=True),
        sa.Column("raw_data", sa.JSON, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.CheckConstraint(
            "classification IN ('spam', 'invalid_lead', 'likely_spam', 'processing_error')",
            name="ck_rejected_lead_classification",
        ),
        schema="crm",
    )

    op.create_table(
        "candidate_leads",
        sa.Column("id", postgresql.UUID(as_uuid=True), **_UUID_PK),
        sa.Column("full_name", sa.Text, nullable=True),
        sa.Column("email", sa.Text, nullable=True),
        sa.Column("phone", sa.Text, nullable=True),
        sa.Column("needs_description", sa.Text, nullable=True),
        sa.Column("classification", sa.Text, nullable=False, server_default="likely_candidate"),
        sa.Column("ai_reasoning", sa.Text, nullable=True),
        sa.Column("raw_data", sa.JSON, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.CheckConstraint(
            "classification IN ('likely_candidate')",
            name="ck_candidate_lead_classification",
        ),
        schema="crm",
    )

    op.execute(FIND_OR_CREATE_COMPANY)


def downgrade() -> None:
    op.execute("DROP FUNCTION IF EXISTS crm.find_or_create_company(text, text, text)")
    # Drop in reverse dependency order
    op.drop_table("candidate_leads", schema="crm")
    op.drop_table("rejected_leads", schema="crm")
    op.drop_table("website_jobs", schema="crm")
    op.drop_index("ix_signals_company_id", table_name="signals", schema="crm")
    op.drop_table("signals", schema="crm")
    op.drop_table("contacts", schema="crm")
    op.drop_index("ix_company_lower_name", table_name="companies", schema="crm")
    op.drop_table("companies", schema="crm")

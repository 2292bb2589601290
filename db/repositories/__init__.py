"""Repository layer for the lead intake pipeline.

Plain async functions over an AsyncSession:
- companies: find_or_create, get_by_id, get_by_domain, count_by_name
- contacts: get_by_email, upsert
- signals: append, get_by_company
- website_jobs: create_draft, get_by_company
- leads: insert_rejected, insert_candidate
"""

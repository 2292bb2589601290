"""Rookie lead intake: command-line entry point.

Builds the lead pipeline from environment settings and runs one form
submission through it.

Usage:
  # Process a submission from a JSON file ('-' reads stdin)
  python intake.py process --json payload.json

  # Process a submission from flags
  python intake.py process --name "Anna Svensson" --email anna@nordea.se \
      --company "Nordea AB" --message "Vi söker en junior utvecklare ..."

  # Show which provider, mailer and store settings are active
  python intake.py check-config
"""
import argparse
import asyncio
import json
import logging
import sys
from typing import Any, Dict, Optional

from db.store import SqlLeadStore
from model_config import active_provider, get_llm_model, init_llm_provider
from settings import Settings
from tools.completion_tools import LiteLlmCompleter
from tools.resend_tools import ResendMailer
from triage.domain import DomainResolver
from triage.notifications import LeadNotifier
from triage.pipeline import LeadPipeline

logger = logging.getLogger(__name__)

_FORM_FIELDS = ("name", "email", "phone", "company", "industry", "service_type", "message", "subject")


def build_pipeline(settings: Settings) -> LeadPipeline:
    """Wire the real store, completion client and mailer into a pipeline."""
    if not settings.resend_api_key:
        raise RuntimeError("RESEND_API_KEY is not set; the pipeline cannot send e-mail.")
    if not settings.database_url:
        raise RuntimeError("DATABASE_URL is not set; the pipeline cannot persist leads.")

    init_llm_provider()
    completer = LiteLlmCompleter(model=settings.llm_model, temperature=settings.llm_temperature)
    notifier = LeadNotifier(
        ResendMailer(settings.resend_api_key, settings.resend_from_email),
        admin_email=settings.admin_alert_email,
        lead_email_override=settings.lead_email_override,
    )
    return LeadPipeline(
        store=SqlLeadStore.from_settings(settings),
        completer=completer,
        notifier=notifier,
        domain_resolver=DomainResolver(default_tld=settings.guessed_domain_tld),
    )


def describe_config(settings: Settings) -> Dict[str, Any]:
    """Active configuration, with secrets reduced to set/unset."""
    return {
        "llm_provider": active_provider(),
        "llm_model": get_llm_model(settings.llm_model),
        "llm_temperature": settings.llm_temperature,
        "database_configured": bool(settings.database_url),
        "resend_configured": bool(settings.resend_api_key),
        "resend_from_email": settings.resend_from_email,
        "admin_alert_email": settings.admin_alert_email,
        "lead_email_override": settings.lead_email_override,
        "guessed_domain_tld": settings.guessed_domain_tld,
    }


def _load_payload(args: argparse.Namespace) -> Optional[Dict[str, Any]]:
    if args.json:
        if args.json == "-":
            return json.load(sys.stdin)
        with open(args.json, encoding="utf-8") as fh:
            return json.load(fh)
    return {field: getattr(args, field) for field in _FORM_FIELDS if getattr(args, field) is not None}


async def run_process(settings: Settings, payload: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    pipeline = build_pipeline(settings)
    try:
        response = await pipeline.process_submission(payload)
    finally:
        await pipeline.store.close()
    return response.to_dict()


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Rookie lead intake and triage pipeline")
    sub = parser.add_subparsers(dest="command")

    process = sub.add_parser("process", help="Run one form submission through the pipeline")
    process.add_argument("--json", help="Path to a JSON submission ('-' for stdin)")
    process.add_argument("--name")
    process.add_argument("--email")
    process.add_argument("--phone")
    process.add_argument("--company")
    process.add_argument("--industry")
    process.add_argument("--service-type", dest="service_type")
    process.add_argument("--message", help="Free-text description of the hiring need")
    process.add_argument("--subject")

    sub.add_parser("check-config", help="Show active provider, mailer and store settings")

    return parser


def main(argv=None) -> int:
    parser = _build_arg_parser()
    args = parser.parse_args(argv)
    settings = Settings.from_env()
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    if args.command == "process":
        result = asyncio.run(run_process(settings, _load_payload(args)))
        print(json.dumps(result, indent=2, ensure_ascii=False))
        return 0 if result.get("success") else 1

    if args.command == "check-config":
        print(json.dumps(describe_config(settings), indent=2))
        return 0

    parser.print_help()
    return 2


if __name__ == "__main__":
    sys.exit(main())

"""Model provider selection.

Priority:
  1. explicit override (LLM_MODEL, passed in from settings) → used as-is
  2. ANTHROPIC_API_KEY set → use Anthropic API directly (faster, simpler)
  3. Otherwise → use Vertex AI (requires GOOGLE_CLOUD_PROJECT + service account)

Usage:
    from model_config import get_llm_model, init_llm_provider
    init_llm_provider()
    model = get_llm_model()
"""
import logging
import os
from typing import Any, Dict, Optional

import litellm

logger = logging.getLogger(__name__)

# Model identifiers
ANTHROPIC_MODEL = "anthropic/claude-sonnet-4-6"
VERTEX_MODEL = "vertex_ai/claude-sonnet-4-5@20250929"


def active_provider() -> str:
    """Return 'anthropic' or 'vertex_ai' depending on which is active."""
    return "anthropic" if os.environ.get("ANTHROPIC_API_KEY") else "vertex_ai"


def get_llm_model(override: Optional[str] = None) -> str:
    """Return the litellm model string for the active provider."""
    if override:
        return override
    if active_provider() == "anthropic":
        return ANTHROPIC_MODEL
    return VERTEX_MODEL


def provider_kwargs(model: str) -> Dict[str, Any]:
    """Extra litellm completion kwargs needed by the chosen model."""
    if not model.startswith("vertex_ai/"):
        return {}
    return {
        "vertex_project": os.environ["GOOGLE_CLOUD_PROJECT"],
        "vertex_location": os.environ.get("GOOGLE_CLOUD_LOCATION", "us-east5"),
    }


def init_llm_provider() -> None:
    """Log the active provider and attach tracing callbacks when configured."""
    if active_provider() == "anthropic":
        logger.info("LLM provider: Anthropic API (ANTHROPIC_API_KEY is set)")
    else:
        logger.info(
            "LLM provider: Vertex AI (project=%s, location=%s)",
            os.environ.get("GOOGLE_CLOUD_PROJECT"),
            os.environ.get("GOOGLE_CLOUD_LOCATION", "us-east5"),
        )

    if os.environ.get("LANGFUSE_PUBLIC_KEY"):
        litellm.success_callback = ["langfuse"]
        litellm.failure_callback = ["langfuse"]

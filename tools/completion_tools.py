"""Text completion client backed by litellm.

One system + user prompt pair in, the model's text out. Provider selection
(Anthropic direct or Vertex AI) follows model_config.
"""
import logging
from typing import Any, Dict, Optional

import litellm

from model_config import get_llm_model, provider_kwargs

logger = logging.getLogger(__name__)


class LiteLlmCompleter:
    def __init__(
        self,
        model: Optional[str] = None,
        temperature: float = 0.7,
        extra_kwargs: Optional[Dict[str, Any]] = None,
    ):
        self.model = get_llm_model(model)
        self.temperature = temperature
        self.extra_kwargs = extra_kwargs if extra_kwargs is not None else provider_kwargs(self.model)

    async def complete(self, system: str, user: str) -> str:
        """Return the first choice's message content ('' when the model sent none)."""
        response = await litellm.acompletion(
            model=self.model,
            messages=[
                {"role": "system", "content": system},
                {"role": "user", "content": user},
            ],
            temperature=self.temperature,
            **self.extra_kwargs,
        )
        content = response.choices[0].message.content
        logger.debug("Completion received from %s (%d chars)", self.model, len(content or ""))
        return content or ""

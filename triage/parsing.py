"""Parse untrusted completion text into a validated pydantic model.

The completion service is asked for a single JSON object but may wrap it in a
markdown code fence. Results are returned as a tagged value rather than raised,
so callers decide how a schema violation is escalated.
"""
import json
import logging
import re
from dataclasses import dataclass
from typing import Generic, List, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError

from triage.exceptions import CompletionSchemaError, EmptyCompletionError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

_LEADING_FENCE = re.compile(r"^\s*```(?:json)?\s*", re.IGNORECASE)
_TRAILING_FENCE = re.compile(r"\s*```\s*$")


@dataclass(frozen=True)
class ParseOk(Generic[ModelT]):
    value: ModelT


@dataclass(frozen=True)
class SchemaError:
    raw: str
    violations: List[str]


ParseResult = Union[ParseOk[ModelT], SchemaError]


def strip_code_fences(content: str) -> str:
    """Remove a surrounding ```json ... ``` fence, if present."""
    cleaned = _LEADING_FENCE.sub("", content, count=1)
    cleaned = _TRAILING_FENCE.sub("", cleaned, count=1)
    return cleaned.strip()


def format_violations(exc: ValidationError) -> List[str]:
    """Render pydantic errors as "field.path: message" strings."""
    violations = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ())) or "<root>"
        violations.append(f"{location}: {error.get('msg', 'invalid')}")
    return violations


def parse_structured(content: str, model: Type[ModelT]) -> "ParseResult[ModelT]":
    cleaned = strip_code_fences(content)
    try:
        payload = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        return SchemaError(raw=cleaned, violations=[f"<root>: invalid JSON ({exc.msg})"])

    if not isinstance(payload, dict):
        return SchemaError(raw=cleaned, violations=["<root>: expected a JSON object"])

    try:
        return ParseOk(model.model_validate(payload))
    except ValidationError as exc:
        return SchemaError(raw=cleaned, violations=format_violations(exc))


async def complete_structured(
    completer,
    stage: str,
    system: str,
    user: str,
    model: Type[ModelT],
) -> ModelT:
    """Run one completion and validate it, raising on empty or invalid output."""
    content = await completer.complete(system, user)
    if not content or not content.strip():
        raise EmptyCompletionError(stage)

    result = parse_structured(content, model)
    if isinstance(result, SchemaError):
        logger.error(
            "%s response failed validation: %s (raw=%r)",
            stage, "; ".join(result.violations), result.raw[:500],
        )
        raise CompletionSchemaError(stage, result.raw, result.violations)
    return result.value
